"""
Shell quoting for remote invocations.

Every string that ends up inside the compound command sent over ssh
passes through this module. Callers elsewhere only deal in argument
vectors and CommandSequence objects.
"""

from typing import Mapping, Optional

from squirrel.constants import REMOTE_SHELL
from squirrel.models.command import CommandSequence


def escape_single(text: str) -> str:
    """
    Escape text for a single-quoted shell context.

    Every backslash and single quote is escaped, backslashes first so
    the escapes added for quotes are not doubled.

    Example:
        escape_single("a'b'c")  # -> a\\'b\\'c
    """
    return text.replace("\\", "\\\\").replace("'", "\\'")


def escape_remote(text: str) -> str:
    """Escape text for the remote compound command (also neutralises backticks)."""
    return escape_single(text).replace("`", "\\`")


def escape_double(text: str) -> str:
    """Escape text for a double-quoted environment variable value."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def inline_env(env: Optional[Mapping[str, Optional[object]]]) -> str:
    """
    Serialize an environment mapping into inline assignments.

    Keys are sorted so the same mapping always yields the same string.
    A None value becomes an empty string.

    Example:
        inline_env({"PORT": 80, "NODE_ENV": None})
        # -> NODE_ENV="" PORT="80"
    """
    if not env:
        return ""

    items = []
    for key in sorted(env):
        value = env[key]
        value = "" if value is None else str(value)
        items.append(f'{key}="{escape_double(value)}"')
    return " ".join(items)


def with_env(env: Optional[Mapping[str, Optional[object]]], command: str) -> str:
    """Prefix a command with inline assignments (no leading space when empty)."""
    prefix = inline_env(env)
    return f"{prefix} {command}" if prefix else command


def remote_invocation(sequence: CommandSequence) -> str:
    """
    Build the single string handed to the remote shell.

    The chained sequence is wrapped in ANSI-C quoting ($'...'), where
    the remote shell decodes \\' and \\\\ back to the original text.

    sshd hands this string to the remote user's login shell, which must
    understand $'...' (bash, zsh, ksh). A POSIX-only shell such as dash
    passes the $ through literally.
    """
    return f"{REMOTE_SHELL} $'{escape_remote(sequence.chain())}'"
