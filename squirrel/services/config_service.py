"""
Configuration Management Service

Loads squirrel.yml (or the squirrel section of package.json) into a
read-only ProjectConfig and answers target lookups.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from squirrel.constants import (
    CONFIG_FILENAME,
    CONFIG_PATH_ENV_VAR,
    DEFAULT_DIFF_FORMAT,
    DEFAULT_SSH_PORT,
    DEFAULT_STRICT_HOST_KEY_CHECKING,
    PACKAGE_JSON_FILENAME,
    PACKAGE_JSON_SECTION,
)
from squirrel.exceptions import ConfigurationError, TargetNotFoundError
from squirrel.models.config import (
    AnnotationConfig,
    ChatConfig,
    CommandsConfig,
    NotificationConfig,
    ProjectConfig,
    RepositoryConfig,
    SSHConfig,
    Target,
)


def _env_value(value: Any) -> Optional[str]:
    """Stringify an environment value the way JSON/YAML authors expect."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ConfigService:
    """
    Centralized configuration management service.

    Responsibilities:
    - Locate and parse the project config file
    - Validate targets and their SSH settings
    - Target lookups by name
    """

    def __init__(self, project_root: Optional[Path] = None):
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self._config: Optional[ProjectConfig] = None

    def find_config_file(self) -> Path:
        """
        Find the config file.

        Search order: $SQUIRREL_CONFIG, squirrel.yml, package.json

        Raises:
            ConfigurationError: If no config file exists
        """
        override = os.environ.get(CONFIG_PATH_ENV_VAR)
        if override:
            path = Path(override).expanduser()
            if not path.is_file():
                raise ConfigurationError(
                    f"Config file not found: {path}",
                    context=f"Set by {CONFIG_PATH_ENV_VAR}",
                )
            return path

        search_paths = [
            self.project_root / CONFIG_FILENAME,
            self.project_root / PACKAGE_JSON_FILENAME,
        ]
        for path in search_paths:
            if path.is_file():
                return path

        raise ConfigurationError(
            "No squirrel configuration found",
            context="Searched: " + ", ".join(str(p) for p in search_paths),
        )

    def _read_raw(self, path: Path) -> Dict[str, Any]:
        """Read a config file into the squirrel.yml dict layout."""
        try:
            text = path.read_text()
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}")

        if path.suffix == ".json":
            try:
                package = json.loads(text)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}")
            if not isinstance(package, dict):
                raise ConfigurationError(f"{path} must contain an object")
            return self._from_package_json(package, path)

        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{path} must contain a mapping")
        return raw

    @staticmethod
    def _from_package_json(package: Dict[str, Any], path: Path) -> Dict[str, Any]:
        section = package.get(PACKAGE_JSON_SECTION)
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"{path} has no '{PACKAGE_JSON_SECTION}' section",
                context=f"Add a '{PACKAGE_JSON_SECTION}' object with 'targets', or create {CONFIG_FILENAME}",
            )

        repository = package.get("repository") or {}
        if isinstance(repository, str):
            repository = {"type": "git", "url": repository}

        raw = dict(section)
        raw["project"] = {"name": package.get("name"), "repository": repository}
        return raw

    def load(self, force_reload: bool = False) -> ProjectConfig:
        """
        Load project configuration with caching.

        Returns:
            ProjectConfig

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        if self._config is None or force_reload:
            path = self.find_config_file()
            raw = self._read_raw(path)
            self._config = self.parse(raw, root=path.parent)
        return self._config

    def parse(self, raw: Dict[str, Any], root: Optional[Path] = None) -> ProjectConfig:
        """
        Build a ProjectConfig from a raw config dict.

        Raises:
            ConfigurationError: If required fields are missing or malformed
        """
        project = raw.get("project") or {}
        if not isinstance(project, dict) or not project.get("name"):
            raise ConfigurationError(
                "Missing required field: 'project.name'",
                context="Example:\nproject:\n  name: myapp",
            )

        repository = project.get("repository") or {}
        if not isinstance(repository, dict):
            raise ConfigurationError("'project.repository' must be a mapping with 'type' and 'url'")

        targets_raw = raw.get("targets")
        if not isinstance(targets_raw, dict) or not targets_raw:
            raise ConfigurationError(
                "Missing required field: 'targets'",
                context="Define at least one target with ssh.hosts and ssh.user",
            )

        targets = {
            str(name): self._parse_target(str(name), target_raw)
            for name, target_raw in targets_raw.items()
        }

        commands = raw.get("commands") or {}
        if not isinstance(commands, dict):
            raise ConfigurationError("'commands' must be a mapping")

        return ProjectConfig(
            name=str(project["name"]),
            repository=RepositoryConfig(
                type=str(repository.get("type") or ""),
                url=str(repository.get("url") or ""),
            ),
            targets=targets,
            commands=CommandsConfig(
                monitor=commands.get("monitor"),
                log=commands.get("log"),
            ),
            notifications=self._parse_notifications(raw.get("notifications") or {}),
            diff_format=str(raw.get("diff_format") or DEFAULT_DIFF_FORMAT),
            root=root,
        )

    def _parse_target(self, name: str, raw: Any) -> Target:
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Target '{name}' must be a mapping")

        ssh = raw.get("ssh")
        if not isinstance(ssh, dict):
            raise ConfigurationError(
                f"Target '{name}' has no ssh configuration",
                context="Expected ssh.hosts, ssh.user and optionally ssh.port",
            )

        hosts = ssh.get("hosts") or []
        if isinstance(hosts, str):
            hosts = [hosts]
        if not isinstance(hosts, list) or not hosts:
            raise ConfigurationError(f"Target '{name}' must list at least one host in ssh.hosts")

        user = ssh.get("user")
        if not user:
            raise ConfigurationError(f"Target '{name}' is missing ssh.user")

        port = ssh.get("port", DEFAULT_SSH_PORT)
        try:
            port = int(port)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Target '{name}' has an invalid ssh.port: {port!r}")

        env = raw.get("env") or {}
        if not isinstance(env, dict):
            raise ConfigurationError(f"Target '{name}' env must be a mapping")

        return Target(
            name=name,
            ssh=SSHConfig(
                hosts=tuple(str(host) for host in hosts),
                user=str(user),
                port=port,
                strict_host_key_checking=str(
                    ssh.get("strict_host_key_checking", DEFAULT_STRICT_HOST_KEY_CHECKING)
                ),
                forward_agent=bool(ssh.get("forward_agent", True)),
            ),
            env={str(key): _env_value(value) for key, value in env.items()},
            path=raw.get("path"),
        )

    @staticmethod
    def _parse_notifications(raw: Any) -> NotificationConfig:
        if not isinstance(raw, dict):
            raise ConfigurationError("'notifications' must be a mapping")

        chat = None
        chat_raw = raw.get("chat")
        if chat_raw:
            if not isinstance(chat_raw, dict) or not chat_raw.get("url"):
                raise ConfigurationError("notifications.chat requires a 'url'")
            chat = ChatConfig(
                url=chat_raw["url"],
                username=chat_raw.get("username"),
                channel=chat_raw.get("channel"),
            )

        annotations = None
        annotations_raw = raw.get("annotations")
        if annotations_raw:
            if not isinstance(annotations_raw, dict) or not annotations_raw.get("url"):
                raise ConfigurationError("notifications.annotations requires a 'url'")
            annotations = AnnotationConfig(
                url=annotations_raw["url"],
                user=annotations_raw.get("user"),
                token=annotations_raw.get("token"),
            )

        return NotificationConfig(chat=chat, annotations=annotations)

    def get_target(self, target_name: str) -> Target:
        """
        Look up a target by name.

        Raises:
            TargetNotFoundError: If the target is not configured
        """
        config = self.load()
        if target_name not in config.targets:
            raise TargetNotFoundError(target_name, config.target_names)
        return config.targets[target_name]
