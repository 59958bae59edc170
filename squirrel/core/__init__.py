"""
Squirrel core: command composition, shell quoting and parallel join.
"""

from .composer import CommandComposer, validate_branch
from .parallel import gather, join
from .shell import (
    escape_double,
    escape_remote,
    escape_single,
    inline_env,
    remote_invocation,
    with_env,
)

__all__ = [
    "CommandComposer",
    "validate_branch",
    "gather",
    "join",
    "escape_double",
    "escape_remote",
    "escape_single",
    "inline_env",
    "remote_invocation",
    "with_env",
]
