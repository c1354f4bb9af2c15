"""
Tests for organization resolution and confirmation.
"""

from unittest.mock import MagicMock, patch

import click
import pytest

from ghsync.config import SyncConfig
from ghsync.exit_codes import FatalConfigError, RemoteProtocolError
from ghsync.infra.github_client import GitHubClient
from ghsync.services.org_resolver import (
    OrgResolver,
    auto_accept,
    auto_reject,
    is_affirmative,
    parse_org_list,
    prompt_confirmation,
)


@pytest.fixture
def client(listing):
    c = MagicMock(spec=GitHubClient)
    c.iter_authenticated_orgs.side_effect = lambda: listing(["acme"], ["umbrella"])
    c.get_authenticated_login.return_value = "octo"
    return c


class TestExplicitOrganizations:

    def test_returned_verbatim(self, client):
        config = SyncConfig(token="t", organizations=("zeta", "acme", "zeta"))

        orgs = OrgResolver(client, confirm=auto_reject).resolve(config)

        assert orgs == ["zeta", "acme", "zeta"]
        client.iter_authenticated_orgs.assert_not_called()
        client.get_authenticated_login.assert_not_called()


class TestAutoDiscovery:

    def test_orgs_then_login(self, client):
        orgs = OrgResolver(client, confirm=auto_accept).resolve(SyncConfig(token="t"))
        assert orgs == ["acme", "umbrella", "octo"]

    def test_confirm_sees_resolved_list(self, client):
        confirm = MagicMock(return_value=True)

        OrgResolver(client, confirm=confirm).resolve(SyncConfig(token="t"))

        confirm.assert_called_once_with(["acme", "umbrella", "octo"])

    def test_refusal_is_fatal(self, client):
        with pytest.raises(FatalConfigError, match="Aborted by user."):
            OrgResolver(client, confirm=auto_reject).resolve(SyncConfig(token="t"))

        client.list_org_repos.assert_not_called()
        client.list_user_repos.assert_not_called()

    def test_org_listing_failure_keeps_login(self, client, listing):
        client.iter_authenticated_orgs.side_effect = lambda: listing(error=RemoteProtocolError("boom", status_code=500))

        orgs = OrgResolver(client, confirm=auto_accept).resolve(SyncConfig(token="t"))

        assert orgs == ["octo"]

    def test_org_listing_failure_keeps_earlier_pages(self, client, listing, caplog):
        error = RemoteProtocolError("GitHub API error 502", status_code=502, page=2)
        client.iter_authenticated_orgs.side_effect = lambda: listing(["acme"], error=error)
        confirm = MagicMock(return_value=True)

        orgs = OrgResolver(client, confirm=confirm).resolve(SyncConfig(token="t"))

        assert orgs == ["acme", "octo"]
        confirm.assert_called_once_with(["acme", "octo"])
        assert "keeping 1" in caplog.text

    def test_unknown_caller_is_fatal(self, client):
        client.get_authenticated_login.side_effect = RemoteProtocolError("bad credentials", status_code=401)

        with pytest.raises(FatalConfigError):
            OrgResolver(client, confirm=auto_accept).resolve(SyncConfig(token="t"))


class TestConfirmation:

    @pytest.mark.parametrize("answer", [
        "y", "Y", "yes", " YES ", "ok", "okay", "sure", "go",
        "continue", "do it", "yep", "affirmative", "proceed",
    ])
    def test_affirmative(self, answer):
        assert is_affirmative(answer)

    @pytest.mark.parametrize("answer", ["", "n", "no", "nope", "yess", None])
    def test_not_affirmative(self, answer):
        assert not is_affirmative(answer)

    @patch("ghsync.services.org_resolver.click.prompt", return_value="sure")
    def test_prompt_accepts(self, mock_prompt, capsys):
        assert prompt_confirmation(["acme", "octo"])
        err = capsys.readouterr().err
        assert "  - acme" in err
        assert "  - octo" in err

    @patch("ghsync.services.org_resolver.click.prompt", return_value="n")
    def test_prompt_refuses(self, mock_prompt):
        assert not prompt_confirmation(["acme"])

    @patch("ghsync.services.org_resolver.click.prompt", side_effect=click.Abort())
    def test_end_of_input_refuses(self, mock_prompt):
        assert not prompt_confirmation(["acme"])


class TestParseOrgList:

    def test_trims_and_drops_empties(self):
        assert parse_org_list("a, b,,c ") == ["a", "b", "c"]

    def test_empty(self):
        assert parse_org_list("") == []
        assert parse_org_list(None) == []
        assert parse_org_list(" , ") == []
