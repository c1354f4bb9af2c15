"""
Rendering functions for ghsync output.

This module handles all pretty-printing for the human summary.
Services return data, this module makes it human-readable.
"""

from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from .domain.operation import RepoAction, RepoOutcome, RunStats
from .services.diagnostics_service import DiagnosticCheck

console = Console(stderr=True)

ACTION_STYLES = {
    RepoAction.CLONED: "green",
    RepoAction.UPDATED: "yellow",
    RepoAction.FETCHED: "blue",
    RepoAction.SKIPPED: "cyan",
    RepoAction.CLONE: "green",
    RepoAction.UPDATE: "yellow",
    RepoAction.FETCH: "blue",
}


def render_org_list(orgs: List[str], console: Console = console) -> None:
    """Show the organizations a run covers."""
    console.print("[cyan]Organizations to sync:[/cyan]")
    for org in orgs:
        console.print(f"  - {org}")


def render_summary(stats: RunStats, dry_run: bool = False, console: Console = console) -> None:
    """
    Render the final counts block.

    Args:
        stats: Final run counters
        dry_run: Also show how many actions were only planned
        console: Target console
    """
    console.print(f"[green]Cloned:   {stats.cloned}[/green]")
    console.print(f"[yellow]Updated:  {stats.updated}[/yellow]")
    console.print(f"[blue]Fetched:  {stats.fetched}[/blue]")
    console.print(f"[cyan]Skipped:  {stats.skipped}[/cyan]")
    console.print(f"[red]Failed:   {stats.failed}[/red]")
    if dry_run:
        console.print(f"[magenta]Planned:  {stats.planned}[/magenta]")
    console.print(f"[cyan]Duration: {stats.duration_seconds}s[/cyan]")


def render_outcome_table(outcomes: Dict[tuple, RepoOutcome], title: Optional[str] = None,
                         console: Console = console) -> None:
    """
    Render per-repository actions as a table.

    Args:
        outcomes: Ledger keyed by (owner, name)
        title: Optional table title
        console: Target console
    """
    if not outcomes:
        console.print("[yellow]No repositories processed.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Org")
    table.add_column("Repository")
    table.add_column("Action")
    table.add_column("Path", style="dim")

    for key in sorted(outcomes):
        outcome = outcomes[key]
        style = "red" if outcome.action.is_failure else ACTION_STYLES.get(outcome.action, "white")
        table.add_row(
            outcome.owner,
            outcome.name,
            f"[{style}]{outcome.action.value}[/{style}]",
            outcome.destination,
        )

    console.print(table)


def render_diagnostics(checks: List[DiagnosticCheck], console: Console = console) -> None:
    """Render token diagnostic results."""
    console.print("[cyan]Running GitHub token diagnostics...[/cyan]")
    for i, check in enumerate(checks, 1):
        console.print(f"\n[blue]{i}. Checking {check.name}...[/blue]")
        if check.ok:
            console.print(f"[green]✔ {check.detail}[/green]")
        else:
            console.print(f"[red]✘ {check.detail}[/red]")
        for item in check.items or []:
            console.print(f"  {item}")
    console.print("\n[cyan]Diagnostics complete.[/cyan]")
