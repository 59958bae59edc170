"""
Squirrel Exception Hierarchy

Clean exception hierarchy for consistent error handling across the CLI.
"""

from typing import Optional


class SquirrelError(Exception):
    """Base exception for all squirrel errors."""

    exit_code = 1

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(SquirrelError):
    """Raised when configuration is invalid or missing."""

    pass


class TargetNotFoundError(ConfigurationError):
    """Raised when a target name is not in the project configuration."""

    def __init__(self, target_name: str, available_targets: list[str]):
        self.target_name = target_name
        self.available_targets = available_targets
        message = f"Target '{target_name}' not found"
        context = f"Available targets: {', '.join(available_targets) or '(none)'}"
        super().__init__(message, context)


class ComposeError(SquirrelError):
    """Raised when a command sequence cannot be built from the given parameters."""

    pass


class RemoteExecutionError(SquirrelError):
    """Raised when one or more hosts fail to run a command sequence."""

    def __init__(
        self,
        operation: str,
        failed_hosts: list[str],
        exit_code: int = 1,
        context: Optional[str] = None,
    ):
        self.operation = operation
        self.failed_hosts = failed_hosts
        self.exit_code = exit_code or 1
        message = f"{operation} failed on {len(failed_hosts)} host(s): {', '.join(failed_hosts)}"
        super().__init__(message, context)


class DiffError(SquirrelError):
    """Raised when a step of the deploy diff fails."""

    def __init__(self, step: str, message: str, context: Optional[str] = None):
        self.step = step
        super().__init__(f"Diff failed at step '{step}': {message}", context)


class GitError(SquirrelError):
    """Raised when a local git command fails."""

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(
            f"'{' '.join(command)}' exited {returncode}", context=self.stderr or None
        )
