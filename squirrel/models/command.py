"""
Command Models

An ordered list of shell commands making up one logical operation.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class CommandSequence:
    """
    Shell commands to run in order, stopping at the first failure.

    The stop-on-failure contract is enforced by chain(), which joins
    the commands with '&&' into one compound command.
    """

    operation: str
    commands: Tuple[str, ...]

    def __post_init__(self):
        # Accept any iterable, store an immutable tuple
        object.__setattr__(self, "commands", tuple(self.commands))

    def chain(self) -> str:
        """Join commands into one compound command."""
        return " && ".join(self.commands)

    def __iter__(self):
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def __repr__(self) -> str:
        return f"CommandSequence(operation={self.operation}, commands={len(self.commands)})"
