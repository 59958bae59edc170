"""
Squirrel Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .command import CommandSequence
from .config import (
    AnnotationConfig,
    ChatConfig,
    CommandsConfig,
    NotificationConfig,
    ProjectConfig,
    RepositoryConfig,
    SSHConfig,
    Target,
)
from .results import (
    DiffResult,
    FanOutResult,
    HostResult,
    SSHResult,
)

__all__ = [
    # Commands
    "CommandSequence",
    # Config
    "AnnotationConfig",
    "ChatConfig",
    "CommandsConfig",
    "NotificationConfig",
    "ProjectConfig",
    "RepositoryConfig",
    "SSHConfig",
    "Target",
    # Results
    "DiffResult",
    "FanOutResult",
    "HostResult",
    "SSHResult",
]
