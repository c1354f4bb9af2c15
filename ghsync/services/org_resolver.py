"""
Organization resolution for ghsync.

Determines which organizations/accounts a run covers: the explicit
``--orgs`` list, or every organization of the authenticated caller plus
the caller's own login. The auto-discovered list only proceeds after an
injected confirmation callable approves it.
"""

import logging
from typing import Callable, List, Optional

import click

from ..config import SyncConfig
from ..exit_codes import FatalConfigError, RemoteProtocolError
from ..infra.github_client import GitHubClient

logger = logging.getLogger(__name__)

# Answers accepted by the interactive prompt (compared case-insensitively)
AFFIRMATIVE_ANSWERS = frozenset({
    "y", "yes", "ok", "okay", "sure", "go", "continue",
    "do it", "yep", "affirmative", "proceed",
})

Confirmer = Callable[[List[str]], bool]


def is_affirmative(answer: Optional[str]) -> bool:
    """Check whether an operator's answer approves the run."""
    if answer is None:
        return False
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS


def parse_org_list(raw: Optional[str]) -> List[str]:
    """Split a comma-separated org list, trimming blanks and dropping empties."""
    if not raw:
        return []
    return [org.strip() for org in raw.split(',') if org.strip()]


def prompt_confirmation(orgs: List[str]) -> bool:
    """Ask the operator on the terminal whether to sync the discovered orgs."""
    click.echo("You did not specify --orgs.", err=True)
    click.echo("The following organizations will be synced:", err=True)
    for org in orgs:
        click.echo(f"  - {org}", err=True)
    click.echo(err=True)

    try:
        answer = click.prompt("Do you want to continue? (y/N)", default="",
                              show_default=False, err=True)
    except click.Abort:
        return False
    return is_affirmative(answer)


def auto_accept(orgs: List[str]) -> bool:
    return True


def auto_reject(orgs: List[str]) -> bool:
    return False


class OrgResolver:
    """
    Resolves the working set of organizations for a run.

    Example:
        resolver = OrgResolver(client, confirm=auto_accept)
        orgs = resolver.resolve(config)
    """

    def __init__(self, client: GitHubClient, confirm: Confirmer = prompt_confirmation):
        self.client = client
        self.confirm = confirm

    def resolve(self, config: SyncConfig) -> List[str]:
        """
        Return the organizations to sync, in order.

        Raises:
            FatalConfigError: If the caller cannot be identified or the
                operator declines the auto-discovered list
        """
        if config.organizations:
            return list(config.organizations)

        logger.debug("Fetching organizations via /user/orgs")
        orgs: List[str] = []
        try:
            for batch in self.client.iter_authenticated_orgs():
                orgs.extend(batch)
        except RemoteProtocolError as e:
            logger.error(f"Could not list all organizations, keeping {len(orgs)}: {e}")

        logger.debug("Fetching user login via /user")
        try:
            login = self.client.get_authenticated_login()
        except RemoteProtocolError as e:
            raise FatalConfigError(f"Could not determine the authenticated user: {e}")

        resolved = orgs + [login]
        if not self.confirm(resolved):
            raise FatalConfigError("Aborted by user.")
        return resolved
