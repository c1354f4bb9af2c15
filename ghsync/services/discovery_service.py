"""
Repository discovery across organizations.

For each organization, reads the org-owned listing and then the
user-owned listing, merging both into one collection in discovery order.
A repository reachable through both listings appears once.
"""

import logging
from typing import List, Optional, Set, Tuple

from ..domain.repository import RepositoryDescriptor
from ..exit_codes import RemoteProtocolError
from ..infra.github_client import GitHubClient
from ..progress import ProgressReporter, get_progress

logger = logging.getLogger(__name__)


class DiscoveryService:
    """
    Collects repository descriptors for a list of organizations.

    Listing errors are contained to the listing they come from; whatever
    was gathered before the error is kept and recorded in ``errors``.
    """

    def __init__(self, client: GitHubClient, progress: Optional[ProgressReporter] = None):
        self.client = client
        self.progress = progress or get_progress()
        self.errors: List[RemoteProtocolError] = []

    def discover(self, orgs: List[str]) -> List[RepositoryDescriptor]:
        """
        Gather descriptors for every organization.

        Args:
            orgs: Organization or user logins

        Returns:
            Descriptors in discovery order, unique by (owner, name)
        """
        self.errors = []
        seen: Set[Tuple[str, str]] = set()
        descriptors: List[RepositoryDescriptor] = []

        for org in orgs:
            logger.debug(f"Fetching repos for org: {org}")
            before = len(descriptors)

            for kind, listing in (("org", self.client.list_org_repos),
                                  ("user", self.client.list_user_repos)):
                try:
                    for batch in listing(org):
                        for repo in batch:
                            if repo.key in seen:
                                continue
                            seen.add(repo.key)
                            descriptors.append(repo)
                except RemoteProtocolError as e:
                    self.errors.append(e)
                    if e.is_not_found:
                        # A personal login has no org listing and vice versa
                        logger.debug(f"No {kind} listing for {org}: {e}")
                    else:
                        logger.error(f"Listing {kind} repositories for {org} stopped early: {e}")
                        self.progress.failure(f"Could not list all {kind} repositories for {org}")

            self.progress(f"{org}: {len(descriptors) - before} repositories")

        logger.info(f"Total repos discovered: {len(descriptors)}")
        return descriptors
