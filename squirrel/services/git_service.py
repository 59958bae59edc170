"""Git service for inquiries against the operator's local checkout."""

import subprocess
from pathlib import Path
from typing import List, Optional

from squirrel.constants import UPSTREAM_REMOTE
from squirrel.exceptions import GitError
from squirrel.logger import DeployLogger
from squirrel.models.results import SSHResult


class GitService:
    """Runs git in the local working copy."""

    def __init__(
        self,
        cwd: Optional[Path] = None,
        remote: str = UPSTREAM_REMOTE,
        logger: Optional[DeployLogger] = None,
    ):
        self.cwd = cwd
        self.remote = remote
        self.logger = logger

    def _git(self, *args: str) -> str:
        cmd = ["git", *args]
        if self.logger:
            self.logger.log_command(" ".join(cmd))

        result = subprocess.run(
            cmd,
            cwd=self.cwd,
            capture_output=True,
            text=True,
        )
        if self.logger:
            self.logger.log_output(result.stderr, "stderr")
        if result.returncode != 0:
            raise GitError(cmd, result.returncode, result.stderr)
        return result.stdout

    def current_branch(self) -> str:
        """
        Name of the checked-out branch.

        Raises:
            GitError: If git fails or HEAD is detached
        """
        branch = self._git("rev-parse", "--abbrev-ref", "HEAD").strip()
        if not branch or branch == "HEAD":
            raise GitError(
                ["git", "rev-parse", "--abbrev-ref", "HEAD"],
                1,
                "HEAD is detached, pass a branch explicitly",
            )
        return branch

    def fetch(self) -> None:
        """Fetch refs from the upstream remote."""
        self._git("fetch", self.remote)

    def upstream_ref(self, branch: str) -> str:
        return f"{self.remote}/{branch}"

    def log(self, since: str, until: str, pretty_format: str) -> List[str]:
        """
        One formatted line per commit reachable from until but not since.

        Args:
            since: Revision already deployed
            until: Ref to compare against (e.g. origin/master)
            pretty_format: git --pretty=format string

        Returns:
            Lines in git log order (newest first), empty if nothing pending
        """
        output = self._git("log", f"--pretty=format:{pretty_format}", f"{since}..{until}")
        return [line for line in output.splitlines() if line.strip()]


def parse_revision(result: SSHResult) -> str:
    """Extract the revision from `git rev-parse HEAD` output (last non-empty line)."""
    lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    return lines[-1] if lines else ""
