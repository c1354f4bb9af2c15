"""
Token diagnostics for ghsync.

Checks what the configured token can reach: the caller's identity, the
caller's organizations, and optionally one organization's repository
listing. Used by ``--check-permissions`` and ``--diagnose``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..exit_codes import RemoteProtocolError
from ..infra.github_client import GitHubClient

logger = logging.getLogger(__name__)


@dataclass
class DiagnosticCheck:
    """Result of one access check."""
    name: str
    ok: bool
    detail: str = ""
    items: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'check': self.name, 'ok': self.ok, 'detail': self.detail}
        if self.items is not None:
            result['items'] = self.items
        return result


class DiagnosticsService:
    """Runs token access checks against the GitHub API."""

    def __init__(self, client: GitHubClient):
        self.client = client

    def check_user(self) -> DiagnosticCheck:
        try:
            login = self.client.get_authenticated_login()
        except RemoteProtocolError as e:
            return DiagnosticCheck("/user", False, str(e))
        return DiagnosticCheck("/user", True, f"Token can access /user ({login})")

    def check_orgs(self) -> DiagnosticCheck:
        try:
            orgs = self.client.list_authenticated_orgs()
        except RemoteProtocolError as e:
            return DiagnosticCheck("/user/orgs", False, str(e))
        if not orgs:
            return DiagnosticCheck("/user/orgs", False, "Token cannot list organizations", [])
        return DiagnosticCheck("/user/orgs", True, "Token can list organizations", orgs)

    def check_org_repos(self, org: str) -> DiagnosticCheck:
        name = f"/orgs/{org}/repos"
        try:
            batches = self.client.list_org_repos(org)
            first_page = next(batches, [])
        except RemoteProtocolError as e:
            return DiagnosticCheck(name, False, f"Token cannot list repos in {org}: {e}")
        if not first_page:
            return DiagnosticCheck(name, False, f"Token cannot list repos in {org}", [])
        return DiagnosticCheck(name, True, f"Token can list repos in {org}",
                               [repo.name for repo in first_page])

    def check_rate_limit(self) -> DiagnosticCheck:
        status = self.client.rate_limit_status
        if status is None:
            return DiagnosticCheck("rate limit", False, "No rate limit headers seen")
        return DiagnosticCheck(
            "rate limit",
            not status.is_low,
            f"{status.remaining}/{status.limit} remaining, resets in {status.minutes_until_reset} minutes",
        )

    def run(self, org: Optional[str] = None, full: bool = False) -> List[DiagnosticCheck]:
        """
        Run the access checks.

        Args:
            org: Organization whose repository listing to check
            full: Also report the rate limit budget

        Returns:
            Checks in the order they ran
        """
        checks = [self.check_user(), self.check_orgs()]
        if org:
            checks.append(self.check_org_repos(org))
        if full:
            checks.append(self.check_rate_limit())
        for check in checks:
            logger.debug(f"Diagnostic {check.name}: ok={check.ok} {check.detail}")
        return checks
