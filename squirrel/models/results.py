"""
Result Models

Dataclass models for operation results and command outputs.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class SSHResult:
    """Result of a captured SSH command execution."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    host: str = ""
    command: str = ""
    duration_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        """Check if SSH command succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if SSH command failed."""
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"SSHResult(host={self.host}, returncode={self.returncode}, duration={self.duration_seconds:.2f}s)"


@dataclass
class HostResult:
    """Exit status of one host's connection during a fan-out."""

    host: str
    returncode: int
    args: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        return self.returncode != 0

    def __repr__(self) -> str:
        return f"HostResult(host={self.host}, returncode={self.returncode}, duration={self.duration_seconds:.2f}s)"


@dataclass
class FanOutResult:
    """Per-host results of one fan-out, in host order."""

    operation: str
    results: List[HostResult] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return all(r.is_success for r in self.results)

    @property
    def failed_hosts(self) -> List[str]:
        return [r.host for r in self.results if r.is_failure]

    @property
    def exit_code(self) -> int:
        """0 if every host succeeded, else the first failing host's code."""
        for result in self.results:
            if result.is_failure:
                return result.returncode
        return 0

    def __repr__(self) -> str:
        return f"FanOutResult(operation={self.operation}, hosts={len(self.results)}, failed={len(self.failed_hosts)})"


@dataclass
class DiffResult:
    """Commits on the upstream branch not yet deployed to a target."""

    target: str
    branch: str
    deployed_revision: str
    upstream_ref: str
    lines: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"DiffResult(target={self.target}, range={self.deployed_revision[:7]}..{self.upstream_ref}, commits={len(self.lines)})"
