"""
Diff Command

Show the commits that a deploy of a branch would bring to a target.
"""

from typing import Optional

import click

from squirrel.base import TargetCommand
from squirrel.services import DiffService
from squirrel.ui_components import show_diff


class DiffCommand(TargetCommand):
    """Print the pending commit log for a target."""

    def __init__(self, target_name: str, branch: Optional[str] = None, verbose: bool = False):
        super().__init__(target_name, verbose=verbose)
        self.branch = branch

    def execute(self) -> None:
        logger = self.init_logger(self.target_name, "diff")
        diff_service = DiffService(self.config, self.target, logger=logger)

        logger.step("Comparing deployed revision with upstream")
        diff = diff_service.diff(self.branch)
        logger.log(f"{len(diff)} pending commit(s)")
        show_diff(diff, console=self.console)


@click.command()
@click.argument("target")
@click.option("--branch", "-b", help="Branch to compare (default: current local branch)")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
def diff(target, branch, verbose):
    """
    Show commits pending deployment

    Compares the revision checked out on the target's first host with
    origin/<branch> after fetching.
    """
    DiffCommand(target, branch=branch, verbose=verbose).run()
