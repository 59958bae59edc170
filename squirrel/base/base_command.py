"""
Base Command Class

Abstract base for all squirrel CLI commands.
Provides common functionality and structure.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from squirrel.constants import INTERRUPTED_EXIT_CODE
from squirrel.exceptions import SquirrelError
from squirrel.logger import DeployLogger
from squirrel.services import ConfigService
from squirrel.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Config service and logger initialization
    - Header display
    - Error handling and exit codes
    """

    def __init__(self, verbose: bool = False, project_root: Optional[Path] = None):
        self.verbose = verbose
        self.console = Console()
        self.config_service = ConfigService(project_root)
        self.project_root = self.config_service.project_root
        self.logger: Optional[DeployLogger] = None

    def init_logger(self, target_name: str, command_name: str) -> DeployLogger:
        """
        Initialize command logger.

        Args:
            target_name: Target name (use "global" for non-target commands)
            command_name: Command name

        Returns:
            DeployLogger instance
        """
        self.logger = DeployLogger(
            target_name,
            command_name,
            project_root=self.project_root,
            verbose=self.verbose,
            console=self.console,
        )
        return self.logger

    def show_header(
        self,
        title: str,
        target: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in verbose mode)."""
        if not self.verbose:
            show_header(title=title, target=target, details=details, console=self.console)

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]✗ {escape(message)}[/red]")

    def print_dim(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]")

    def handle_error(self, error: Exception, context: Optional[str] = None) -> None:
        """
        Handle error with consistent formatting.

        Args:
            error: Exception object
            context: Optional context message
        """
        if self.logger:
            self.logger.log_error(str(error), context=context)
        else:
            self.print_error(str(error))
            if context:
                self.print_dim(f"Context: {context}")

    def _print_log_location(self) -> None:
        if self.logger and self.logger.log_path:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    @abstractmethod
    def execute(self) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self) -> None:
        """
        Run command with error handling.

        Raises:
            SystemExit: With the command's exit status on any failure
        """
        try:
            self.execute()
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            self._print_log_location()
            raise SystemExit(INTERRUPTED_EXIT_CODE)
        except SystemExit:
            raise
        except SquirrelError as e:
            self.handle_error(e)
            self._print_log_location()
            raise SystemExit(e.exit_code)
        except PermissionError as e:
            self.console.print(f"\n[bold red]✗ Permission denied:[/bold red] {escape(str(e))}\n")
            if self.logger:
                self.logger.log_error(f"Permission error: {e}")
            self._print_log_location()
            raise SystemExit(1)
        except Exception as e:
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {escape(str(e))}\n")
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
            self._print_log_location()
            raise SystemExit(1)
        finally:
            if self.logger:
                self.logger.close()
