"""
Target Command Base Class

Base class for commands addressed to one target.
Resolves the project configuration and target before execution.
"""

from pathlib import Path
from typing import Optional

from squirrel.core.composer import CommandComposer
from squirrel.exceptions import SquirrelError
from squirrel.models.command import CommandSequence
from squirrel.models.config import ProjectConfig, Target
from squirrel.models.results import FanOutResult
from squirrel.services import SSHService
from .base_command import BaseCommand


class TargetCommand(BaseCommand):
    """
    Base class for target-specific commands.

    Provides:
    - Target validation before anything runs
    - Pre-built command composer
    - SSH fan-out helper
    """

    def __init__(
        self,
        target_name: str,
        verbose: bool = False,
        project_root: Optional[Path] = None,
    ):
        super().__init__(verbose=verbose, project_root=project_root)
        self.target_name = target_name
        self.config: Optional[ProjectConfig] = None
        self.target: Optional[Target] = None
        self.composer: Optional[CommandComposer] = None

    def resolve_target(self) -> Target:
        """
        Load config and look up the target.

        Raises:
            ConfigurationError: If config is invalid or target unknown
        """
        self.config = self.config_service.load()
        self.target = self.config_service.get_target(self.target_name)
        if self.config.root:
            self.project_root = self.config.root
        self.composer = CommandComposer(self.config, self.target)
        return self.target

    def ssh_service(self) -> SSHService:
        return SSHService(self.target.ssh, logger=self.logger)

    def dispatch(self, sequence: CommandSequence) -> FanOutResult:
        """
        Fan a sequence out to every host, raising if any host failed.

        Raises:
            RemoteExecutionError: Naming each failed host
        """
        if self.logger:
            self.logger.step(f"Running {sequence.operation} on {len(self.target.hosts)} host(s)")
            for command in sequence:
                self.logger.log(f"  {command}")

        result = self.ssh_service().run(sequence)

        if self.logger:
            self.logger.success(f"{sequence.operation} finished on {', '.join(self.target.hosts)}")
        return result

    def run(self) -> None:
        """
        Run command with target validation.

        Configuration errors exit here, before any logger or process exists.
        """
        try:
            self.resolve_target()
        except SquirrelError as e:
            self.handle_error(e)
            raise SystemExit(e.exit_code)

        super().run()
