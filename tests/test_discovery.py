"""
Tests for repository discovery across organizations.
"""

import logging
from unittest.mock import MagicMock

import pytest

from ghsync.exit_codes import RemoteProtocolError
from ghsync.infra.github_client import GitHubClient
from ghsync.services.discovery_service import DiscoveryService


@pytest.fixture
def client(listing):
    c = MagicMock(spec=GitHubClient)
    c.list_org_repos.side_effect = lambda org: listing()
    c.list_user_repos.side_effect = lambda login: listing()
    return c


def _not_found(org):
    return RemoteProtocolError(f"GitHub API error 404 for {org}", status_code=404)


class TestDiscover:

    def test_org_then_user_listing(self, client, quiet_progress, listing, make_repo):
        client.list_org_repos.side_effect = lambda org: listing([make_repo(org, "a"), make_repo(org, "b")])
        client.list_user_repos.side_effect = lambda login: listing([make_repo(login, "c")])

        repos = DiscoveryService(client, progress=quiet_progress).discover(["acme"])

        assert [r.name for r in repos] == ["a", "b", "c"]
        client.list_org_repos.assert_called_once_with("acme")
        client.list_user_repos.assert_called_once_with("acme")

    def test_orgs_in_order(self, client, quiet_progress, listing, make_repo):
        client.list_org_repos.side_effect = lambda org: listing([make_repo(org, "r")])

        repos = DiscoveryService(client, progress=quiet_progress).discover(["zeta", "acme"])

        assert [r.owner for r in repos] == ["zeta", "acme"]

    def test_duplicates_across_listings_kept_once(self, client, quiet_progress, listing, make_repo):
        shared = make_repo("acme", "a")
        client.list_org_repos.side_effect = lambda org: listing([shared])
        client.list_user_repos.side_effect = lambda login: listing([shared])

        repos = DiscoveryService(client, progress=quiet_progress).discover(["acme", "acme"])

        assert repos == [shared]

    def test_multiple_pages(self, client, quiet_progress, listing, make_repo):
        client.list_org_repos.side_effect = lambda org: listing(
            [make_repo(org, "a")], [make_repo(org, "b")], [make_repo(org, "c")]
        )

        repos = DiscoveryService(client, progress=quiet_progress).discover(["acme"])

        assert len(repos) == 3


class TestListingErrors:

    def test_partial_results_kept(self, client, quiet_progress, caplog, listing, make_repo):
        error = RemoteProtocolError("GitHub API error 502", status_code=502, page=2)
        client.list_org_repos.side_effect = lambda org: listing([make_repo(org, "a")], error=error)
        client.list_user_repos.side_effect = lambda login: listing([make_repo(login, "u")])

        service = DiscoveryService(client, progress=quiet_progress)
        repos = service.discover(["acme"])

        assert [r.name for r in repos] == ["a", "u"]
        assert service.errors == [error]
        assert "stopped early" in caplog.text

    def test_not_found_is_quiet(self, client, quiet_progress, caplog, listing, make_repo):
        client.list_org_repos.side_effect = lambda org: listing(error=_not_found(org))
        client.list_user_repos.side_effect = lambda login: listing([make_repo(login, "dotfiles")])

        service = DiscoveryService(client, progress=quiet_progress)
        with caplog.at_level(logging.DEBUG, logger="ghsync"):
            repos = service.discover(["octo"])

        assert [r.name for r in repos] == ["dotfiles"]
        assert len(service.errors) == 1
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert "No org listing for octo" in caplog.text

    def test_failure_in_one_org_does_not_stop_others(self, client, quiet_progress, listing, make_repo):
        def org_listing(org):
            if org == "broken":
                return listing(error=RemoteProtocolError("boom", status_code=500))
            return listing([make_repo(org, "r")])

        client.list_org_repos.side_effect = org_listing

        repos = DiscoveryService(client, progress=quiet_progress).discover(["broken", "acme"])

        assert [r.full_name for r in repos] == ["acme/r"]

    def test_errors_reset_per_discovery(self, client, quiet_progress, listing):
        client.list_org_repos.side_effect = lambda org: listing(error=_not_found(org))
        service = DiscoveryService(client, progress=quiet_progress)

        service.discover(["octo"])
        client.list_org_repos.side_effect = lambda org: listing()
        service.discover(["acme"])

        assert service.errors == []
