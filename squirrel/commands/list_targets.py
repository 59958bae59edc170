"""
List Command

Show configured targets and their hosts.
"""

import click
from rich.markup import escape

from squirrel.base import BaseCommand


class ListCommand(BaseCommand):
    """Print each target followed by its hosts."""

    def execute(self) -> None:
        config = self.config_service.load()
        for name, target in config.targets.items():
            self.console.print(f"[bold cyan]{escape(name)}[/bold cyan]")
            for host in target.hosts:
                self.console.print(f"  {escape(host)}")


@click.command(name="list")
def list_targets():
    """List available deploy targets"""
    ListCommand().run()
