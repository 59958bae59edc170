"""
Squirrel Services Layer

Configuration, remote execution, git, diff and notification operations.
"""

from .config_service import ConfigService
from .diff_service import DiffService
from .git_service import GitService
from .notification_service import NotificationService
from .ssh_service import SSHService

__all__ = [
    "ConfigService",
    "DiffService",
    "GitService",
    "NotificationService",
    "SSHService",
]
