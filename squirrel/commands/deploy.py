"""
Deploy Command

Resolve the branch, show what is about to go out, announce it, then
check out the branch on every host and run the deploy script.
"""

from dataclasses import dataclass
from typing import Optional

import click

from squirrel.base import TargetCommand
from squirrel.exceptions import DiffError
from squirrel.services import DiffService, NotificationService
from squirrel.ui_components import show_diff


@dataclass
class DeployOptions:
    """Options for deploy command."""

    branch: Optional[str] = None
    force: bool = False
    notify: bool = True


class DeployCommand(TargetCommand):
    """
    Deploy a branch to a target.

    Features:
    - Branch defaults to the local checkout's branch
    - Pending commit log before dispatch (advisory)
    - Chat / annotation announcements (advisory)
    """

    def __init__(self, target_name: str, options: DeployOptions, verbose: bool = False):
        super().__init__(target_name, verbose=verbose)
        self.options = options

    def execute(self) -> None:
        """Execute deploy command."""
        logger = self.init_logger(self.target_name, "deploy")
        diff_service = DiffService(self.config, self.target, logger=logger)

        logger.step("Resolving branch")
        branch = diff_service.resolve_branch(self.options.branch)
        sequence = self.composer.deploy(branch, force=self.options.force)
        logger.log(f"Branch: {branch}")

        self.show_header(
            title="Deploy",
            target=self.target_name,
            details={
                "Branch": branch,
                "Hosts": ", ".join(self.target.hosts),
                "Force install": "Yes" if self.options.force else "No",
            },
        )

        logger.step("Pending changes")
        diff_text = ""
        try:
            diff = diff_service.diff(branch)
            show_diff(diff, console=self.console)
            diff_text = diff.text
        except DiffError as e:
            logger.warning(f"{e.message}; deploying {branch} without a diff")

        if self.options.notify and self.config.notifications.enabled:
            logger.step("Announcing deploy")
            notifier = NotificationService(
                self.config.name, self.config.notifications, logger=logger
            )
            notifier.notify_deploy(self.target_name, branch, diff_text)

        self.dispatch(sequence)
        self._print_log_location()


@click.command()
@click.argument("target")
@click.option("--branch", "-b", help="Branch to deploy (default: current local branch)")
@click.option("--force", is_flag=True, help="Force dependency reinstall")
@click.option("--no-notify", is_flag=True, help="Skip chat/annotation notifications")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
def deploy(target, branch, force, no_notify, verbose):
    """
    Deploy code to every host of a target

    Fetches on each host, checks out origin/<branch>, updates submodules,
    prunes and reinstalls dependencies, then runs the deploy script with
    the target's environment.

    Examples:
        # Deploy the current local branch
        squirrel deploy production

        # Deploy a specific branch, forcing a reinstall
        squirrel deploy staging --branch feature/login --force
    """
    options = DeployOptions(branch=branch, force=force, notify=not no_notify)
    DeployCommand(target, options, verbose=verbose).run()
