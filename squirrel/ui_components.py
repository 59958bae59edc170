"""
Squirrel CLI - UI Components
Standardized headers and diff rendering
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from squirrel.models.results import DiffResult

BRAND = "[bold color(214)]squirrel[/bold color(214)] [dim]›[/dim]"


def show_header(
    title: str,
    target: Optional[str] = None,
    details: Optional[dict] = None,
    console: Optional[Console] = None,
):
    """
    Display a standardized command header.

    Args:
        title: Main title (e.g., "Deploy", "Stop")
        target: Target name (if applicable)
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Deploy",
            target="production",
            details={"Branch": "master", "Hosts": "web1, web2"}
        )
    """
    if console is None:
        console = Console()

    console.print(f" {BRAND} [bold white]{escape(title)}[/bold white]")

    if target:
        console.print(f" {BRAND} Target: [cyan]{escape(target)}[/cyan]")

    if details:
        for key, value in details.items():
            console.print(f" {BRAND} {key}: [cyan]{escape(str(value))}[/cyan]")

    console.print()


def show_diff(diff: DiffResult, console: Optional[Console] = None):
    """Print pending commits, one per line."""
    if console is None:
        console = Console()

    if diff.is_empty:
        console.print(
            f"[dim]{escape(diff.target)} is up to date with {escape(diff.upstream_ref)}[/dim]"
        )
        return

    console.print(
        f"[bold]{len(diff)} commit(s)[/bold] [dim]{escape(diff.deployed_revision[:7])}..{escape(diff.upstream_ref)}[/dim]"
    )
    for line in diff.lines:
        console.print(f"  {escape(line)}")
