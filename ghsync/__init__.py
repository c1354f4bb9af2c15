"""
ghsync - Mirror the repositories of your GitHub organizations locally.

ghsync lists every repository of one or more organizations through the
GitHub REST API and clones, pulls or fetches each one into a local
directory tree, several at a time.

Quick Start:
    from ghsync import SyncConfig, GitHubClient, DiscoveryService, SyncService

    config = SyncConfig(token="ghp_...", organizations=("acme",))
    client = GitHubClient(config.token)
    repos = DiscoveryService(client).discover(list(config.organizations))
    stats, outcomes = SyncService(config).run(repos)
    print(stats.cloned, stats.failed)

Command line:
    ghsync --orgs acme --root-dir ~/src --update
"""

__version__ = "0.4.0"

from .config import SyncConfig, load_config
from .domain import RepoAction, RepoOutcome, RepositoryDescriptor, RunStats, Visibility
from .infra import GitClient, GitHubClient
from .layout import Layout, destination_path
from .repo_filter import FilterConfig, passes
from .services import DiscoveryService, OrgResolver, SyncService

__all__ = [
    '__version__',
    'SyncConfig',
    'load_config',
    'RepoAction',
    'RepoOutcome',
    'RepositoryDescriptor',
    'RunStats',
    'Visibility',
    'GitClient',
    'GitHubClient',
    'Layout',
    'destination_path',
    'FilterConfig',
    'passes',
    'DiscoveryService',
    'OrgResolver',
    'SyncService',
]
