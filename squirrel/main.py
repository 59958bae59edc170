#!/usr/bin/env python3
"""squirrel CLI - Main entry point"""

import functools
import os
import sys

import rich_click as click
from click.exceptions import ClickException
from rich.console import Console
from rich.markup import escape

from squirrel import __version__
from squirrel.commands import deploy, diff, exec_cmd, list_targets, remote
from squirrel.constants import INTERRUPTED_EXIT_CODE

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.MAX_WIDTH = 100

click.rich_click.STYLE_COMMAND = "bold cyan"
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_USAGE = "bold yellow"
click.rich_click.STYLE_OPTIONS_PANEL_BORDER = "cyan"
click.rich_click.STYLE_COMMANDS_PANEL_BORDER = "cyan"

console = Console()


def handle_cli_errors(func):
    """Decorator to handle CLI errors gracefully."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(INTERRUPTED_EXIT_CODE)
        except Exception as e:
            console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {escape(str(e))}\n")
            if os.environ.get("DEBUG"):
                import traceback

                console.print("[dim]Traceback:[/dim]")
                traceback.print_exc()
            sys.exit(1)

    return wrapper


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """
    squirrel - deploy a git project to ssh targets

    \b
    Targets come from squirrel.yml (or the "squirrel" section of
    package.json) in the current directory.

    \b
    Remote commands are sent as bash -ic $'...', so the deploy
    user's login shell on every host must be bash, zsh or ksh.

    \b
    Daily Workflow:
      squirrel diff production             # What would go out?
      squirrel deploy production           # Deploy current branch
      squirrel deploy staging -b feature   # Deploy a branch
      squirrel log production              # Follow logs
      squirrel exec production "npm test"  # Local run with target env
    """


cli.add_command(list_targets.list_targets)
cli.add_command(remote.init)
cli.add_command(remote.start)
cli.add_command(remote.stop)
cli.add_command(deploy.deploy)
cli.add_command(remote.abort)
cli.add_command(remote.monitor)
cli.add_command(remote.log)
cli.add_command(diff.diff)
cli.add_command(exec_cmd.exec_)


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    cli()


if __name__ == "__main__":
    main()
