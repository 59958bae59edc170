"""
Command Composer

Builds the CommandSequence for each logical operation from a project
configuration and a target. Nothing here touches the network or spawns
processes.
"""

import os
import re
from typing import Dict, Mapping, Optional

from squirrel.constants import (
    DEFAULT_MONITOR_COMMAND,
    DEPLOY_ABORT_COMMAND,
    DEPLOY_COMMAND,
    INSTALL_COMMAND,
    PRUNE_COMMAND,
    START_COMMAND,
    STOP_COMMAND,
    SUPPORTED_REPOSITORY_TYPE,
    UPSTREAM_REMOTE,
)
from squirrel.core.shell import with_env
from squirrel.exceptions import ComposeError, ConfigurationError
from squirrel.models.command import CommandSequence
from squirrel.models.config import ProjectConfig, Target

# Subset of `git check-ref-format --branch` rules
_INVALID_BRANCH_CHARS = re.compile(r"[\s~^:?*\[\\\x00-\x1f\x7f]")
_SHELL_UNSAFE_CHARS = re.compile(r"[;&|$<>()'\"`!{}]")


def validate_branch(branch: Optional[str]) -> str:
    """
    Check a branch name before it is embedded in a command.

    Raises:
        ComposeError: If the name is empty or not a valid git branch name
    """
    if not branch:
        raise ComposeError("Branch name is required")

    problems = []
    if _INVALID_BRANCH_CHARS.search(branch):
        problems.append("contains whitespace or one of ~^:?*[\\")
    if _SHELL_UNSAFE_CHARS.search(branch):
        problems.append("contains shell metacharacters")
    if ".." in branch or "@{" in branch or "//" in branch:
        problems.append("contains '..', '@{' or '//'")
    if branch.startswith(("-", "/", ".")) or "/." in branch:
        problems.append("starts a component with '-', '/' or '.'")
    if branch.endswith(("/", ".", ".lock")):
        problems.append("ends with '/', '.' or '.lock'")
    if branch == "@":
        problems.append("is '@'")

    if problems:
        raise ComposeError(
            f"Invalid branch name: {branch!r}", context="; ".join(problems)
        )
    return branch


class CommandComposer:
    """
    Command sequences for one target of a project.

    Example:
        composer = CommandComposer(config, config.targets["production"])
        sequence = composer.deploy("master", force=True)
    """

    def __init__(self, config: ProjectConfig, target: Target):
        self.config = config
        self.target = target
        self.app_path = config.app_path(target)

    def _in_app_dir(self, operation: str, *commands: str) -> CommandSequence:
        return CommandSequence(operation, (f"cd {self.app_path}",) + commands)

    def _require_repository(self) -> str:
        repository = self.config.repository
        if not repository.is_supported:
            raise ConfigurationError(
                f"Project must have a repository of type '{SUPPORTED_REPOSITORY_TYPE}'",
                context=f"Found type={repository.type or '(missing)'}, url={repository.url or '(missing)'}",
            )
        return repository.url

    def init(self) -> CommandSequence:
        """Create the deploy directory, clone the repository and install."""
        repo_url = self._require_repository()
        return CommandSequence(
            "init",
            (
                f"mkdir -p {self.app_path}",
                f"git clone {repo_url} {self.app_path}",
                f"cd {self.app_path}",
                INSTALL_COMMAND,
            ),
        )

    def start(self) -> CommandSequence:
        return self._in_app_dir("start", with_env(self.target.env, START_COMMAND))

    def stop(self) -> CommandSequence:
        return self._in_app_dir("stop", STOP_COMMAND)

    def deploy(self, branch: str, force: bool = False) -> CommandSequence:
        """
        Fetch and check out the upstream branch, reinstall, run the deploy script.

        Args:
            branch: Branch name on the upstream remote
            force: Pass --force to the dependency install

        Raises:
            ConfigurationError: If the project has no git repository
            ComposeError: If the branch name is invalid
        """
        self._require_repository()
        validate_branch(branch)
        install = f"{INSTALL_COMMAND} --force" if force else INSTALL_COMMAND
        return self._in_app_dir(
            "deploy",
            "git fetch",
            f"git checkout {UPSTREAM_REMOTE}/{branch}",
            "git submodule update",
            PRUNE_COMMAND,
            install,
            with_env(self.target.env, DEPLOY_COMMAND),
        )

    def abort(self) -> CommandSequence:
        return self._in_app_dir("abort", DEPLOY_ABORT_COMMAND)

    def monitor(self) -> CommandSequence:
        command = self.config.commands.monitor or DEFAULT_MONITOR_COMMAND
        return self._in_app_dir("monitor", command)

    def log(self) -> CommandSequence:
        commands = self.config.commands
        command = commands.log or commands.monitor or DEFAULT_MONITOR_COMMAND
        return self._in_app_dir("log", command)

    def revision(self) -> CommandSequence:
        """Ask a host which revision is checked out."""
        return self._in_app_dir("revision", "git rev-parse HEAD")

    def exec_env(self, base_env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Target environment merged over the invoking process's environment.

        Args:
            base_env: Environment to merge over (default: os.environ)

        Returns:
            New environment dict, None values replaced by empty strings
        """
        merged = dict(os.environ if base_env is None else base_env)
        for key, value in self.target.env.items():
            merged[key] = "" if value is None else str(value)
        return merged
