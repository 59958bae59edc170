"""
Configuration Models

Dataclass models for the project configuration read from squirrel.yml
(or the squirrel section of package.json).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from squirrel.constants import (
    DEFAULT_DIFF_FORMAT,
    DEFAULT_SSH_PORT,
    DEFAULT_STRICT_HOST_KEY_CHECKING,
    SUPPORTED_REPOSITORY_TYPE,
)


@dataclass(frozen=True)
class SSHConfig:
    """SSH connection info shared by every host of a target."""

    hosts: tuple
    user: str
    port: int = DEFAULT_SSH_PORT
    strict_host_key_checking: str = DEFAULT_STRICT_HOST_KEY_CHECKING
    forward_agent: bool = True

    @property
    def primary_host(self) -> Optional[str]:
        """First host, authoritative for revision queries."""
        return self.hosts[0] if self.hosts else None

    def connection_string(self, host: str) -> str:
        """Get SSH connection string (user@host)."""
        return f"{self.user}@{host}"

    def __repr__(self) -> str:
        return f"SSHConfig(user={self.user}, hosts={list(self.hosts)}, port={self.port})"


@dataclass(frozen=True)
class Target:
    """A named deployable destination."""

    name: str
    ssh: SSHConfig
    env: Dict[str, Optional[str]] = field(default_factory=dict)
    path: Optional[str] = None

    @property
    def hosts(self) -> tuple:
        return self.ssh.hosts


@dataclass(frozen=True)
class RepositoryConfig:
    """Version-control repository the project is cloned from."""

    type: str = ""
    url: str = ""

    @property
    def is_supported(self) -> bool:
        return bool(self.url) and self.type == SUPPORTED_REPOSITORY_TYPE


@dataclass(frozen=True)
class ChatConfig:
    """Team chat incoming webhook."""

    url: str
    username: Optional[str] = None
    channel: Optional[str] = None


@dataclass(frozen=True)
class AnnotationConfig:
    """Metrics annotation endpoint."""

    url: str
    user: Optional[str] = None
    token: Optional[str] = None


@dataclass(frozen=True)
class NotificationConfig:
    """Configured notification sinks (both optional)."""

    chat: Optional[ChatConfig] = None
    annotations: Optional[AnnotationConfig] = None

    @property
    def enabled(self) -> bool:
        return self.chat is not None or self.annotations is not None


@dataclass(frozen=True)
class CommandsConfig:
    """Overridable remote commands."""

    monitor: Optional[str] = None
    log: Optional[str] = None


@dataclass(frozen=True)
class ProjectConfig:
    """Represents a loaded and validated project configuration"""

    name: str
    repository: RepositoryConfig
    targets: Dict[str, Target]
    commands: CommandsConfig = field(default_factory=CommandsConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    diff_format: str = DEFAULT_DIFF_FORMAT
    root: Optional[Path] = None

    @property
    def target_names(self) -> List[str]:
        return list(self.targets.keys())

    def app_path(self, target: Target) -> str:
        """
        Directory the project is deployed to on every host of a target.

        Args:
            target: Target being addressed

        Returns:
            Explicit target path, or /home/<user>/<target>/<project>
        """
        if target.path:
            return target.path
        return f"/home/{target.ssh.user}/{target.name}/{self.name}"
