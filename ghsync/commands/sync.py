"""
Handles the sync command: mirror every repository of one or more GitHub
organizations into a local directory tree.

Flow:
- Resolve the organizations (explicit --orgs, or auto-discovery plus
  confirmation)
- Discover repositories through the paginated listings
- Filter, map to destinations and clone/update/fetch with bounded
  concurrency
- Report the counts (and, with --json, the structured summary on stdout)
"""

import logging
from pathlib import Path

import click
from rich.console import Console

from ..cli_utils import standard_command, add_common_options
from ..config import (
    DEFAULT_PARALLEL, OUTPUT_HUMAN, OUTPUT_JSON,
    SyncConfig, configure_logging
)
from ..exit_codes import FatalConfigError
from ..infra.github_client import DEFAULT_API_URL, GitHubClient
from ..layout import Layout
from ..output import emit_json
from ..render import render_diagnostics, render_org_list, render_outcome_table, render_summary
from ..repo_filter import FilterConfig
from ..services.diagnostics_service import DiagnosticsService
from ..services.discovery_service import DiscoveryService
from ..services.org_resolver import OrgResolver, auto_accept, parse_org_list, prompt_confirmation
from ..services.sync_service import SyncService

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


@click.command(name='sync')
@click.option('--token', envvar=['GHSYNC_TOKEN', 'GITHUB_TOKEN'], show_envvar=True,
              help='GitHub token (or set GHSYNC_TOKEN / GITHUB_TOKEN)')
@click.option('--orgs', help='Comma-separated organizations to sync (default: all of yours)')
@click.option('--layout', type=click.Choice([layout.value for layout in Layout]),
              default=Layout.NESTED.value, show_default=True,
              help='Local directory layout')
@click.option('--root-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Root directory for clones (default: current directory)')
@click.option('--resume', is_flag=True, help='Skip repositories that already exist locally')
@click.option('--update', is_flag=True, help='Run "git pull --ff-only" in existing repositories')
@click.option('--fetch', is_flag=True, help='Run "git fetch --all --prune" in existing repositories')
@click.option('--parallel', type=click.IntRange(min=1), default=DEFAULT_PARALLEL,
              show_default=True, help='Number of concurrent git operations')
@click.option('--filter', 'name_pattern', metavar='REGEX',
              help='Only sync repositories whose name matches REGEX')
@click.option('--include-private/--exclude-private', default=True, show_default=True,
              help='Include private repositories')
@click.option('--include-public/--exclude-public', default=True, show_default=True,
              help='Include public repositories')
@click.option('--include-archived/--exclude-archived', default=False, show_default=True,
              help='Include archived repositories')
@click.option('--include-forks/--exclude-forks', default=False, show_default=True,
              help='Include forked repositories')
@click.option('-y', '--yes', 'assume_yes', is_flag=True,
              help='Do not ask before syncing auto-discovered organizations')
@click.option('--log-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Directory for the run log and errors.log')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False),
              default='WARNING', show_default=True, help='Console log level')
@click.option('--api-url', default=DEFAULT_API_URL, show_default=True,
              help='GitHub API base URL')
@click.option('--per-page', type=click.IntRange(min=1, max=100), default=100, hidden=True)
@click.option('--check-permissions', is_flag=True,
              help='Check what the token can access, including the first --orgs entry, and exit')
@click.option('--diagnose', is_flag=True,
              help='Same checks plus the rate limit budget, and exit')
@add_common_options('dry_run', 'json', 'verbose', 'debug')
@standard_command
def sync_handler(token, orgs, layout, root_dir, resume, update, fetch, parallel,
                 name_pattern, include_private, include_public, include_archived,
                 include_forks, assume_yes, log_dir, log_level, api_url, per_page,
                 check_permissions, diagnose, dry_run, as_json, verbose, debug,
                 progress=None):
    """Clone or refresh every repository of your GitHub organizations.

    \b
    Examples:
        ghsync --orgs acme,widgets --root-dir ~/src
        ghsync --update --parallel 10
        ghsync --orgs acme --filter '^svc-' --dry-run --json
    """
    if not token:
        raise FatalConfigError(
            "No GitHub token. Pass --token or set GHSYNC_TOKEN or GITHUB_TOKEN."
        )

    if debug:
        log_level = 'DEBUG'
    elif verbose:
        log_level = 'INFO'
    run_log = configure_logging(log_level, log_dir)
    if run_log:
        logger.info(f"Logging to {run_log}")

    config = SyncConfig(
        token=token,
        organizations=tuple(parse_org_list(orgs)),
        resume=resume,
        update=update,
        fetch=fetch,
        dry_run=dry_run,
        concurrency=parallel,
        layout=Layout.parse(layout),
        root_dir=(root_dir or Path.cwd()).expanduser(),
        output_mode=OUTPUT_JSON if as_json else OUTPUT_HUMAN,
        filters=FilterConfig(
            include_private=include_private,
            include_public=include_public,
            exclude_archived=not include_archived,
            exclude_forks=not include_forks,
            name_pattern=name_pattern or None,
        ),
        api_url=api_url,
        per_page=per_page,
        log_dir=log_dir,
        verbose=verbose,
        debug=debug,
        assume_yes=assume_yes,
    )

    # Human output goes to stdout unless stdout carries the JSON summary
    console = Console(stderr=config.json_output)
    client = GitHubClient(config.token, api_url=config.api_url, per_page=config.per_page)

    if check_permissions or diagnose:
        org = config.organizations[0] if config.organizations else None
        checks = DiagnosticsService(client).run(org=org, full=diagnose)
        if config.json_output:
            emit_json({'checks': [check.to_dict() for check in checks]})
        else:
            render_diagnostics(checks, console=console)
        return

    if not config.dry_run:
        try:
            config.root_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FatalConfigError(f"Cannot create root directory {config.root_dir}: {e}")

    confirm = auto_accept if config.assume_yes else prompt_confirmation
    organizations = OrgResolver(client, confirm=confirm).resolve(config)
    render_org_list(organizations, console=console)

    discovery = DiscoveryService(client, progress=progress)
    descriptors = discovery.discover(organizations)
    logger.info(f"Discovered {len(descriptors)} repositories across {len(organizations)} organizations")
    failed_listings = [e for e in discovery.errors if not e.is_not_found]
    if failed_listings:
        progress.warning(f"{len(failed_listings)} listing(s) failed; results may be incomplete")

    service = SyncService(config, progress=progress)
    stats, outcomes = service.run(descriptors)

    render_summary(stats, dry_run=config.dry_run, console=console)
    if config.verbose:
        render_outcome_table(outcomes, title="Repositories", console=console)

    if config.json_output:
        emit_json(service.summary())
