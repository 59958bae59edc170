"""
Diff Service

Works out which commits on a branch are not yet deployed to a target:
the revision checked out on the target's first host is compared with
the branch's upstream tip in the local checkout.
"""

from typing import Optional

from squirrel.core.composer import CommandComposer
from squirrel.core.parallel import join
from squirrel.exceptions import DiffError, GitError
from squirrel.logger import DeployLogger
from squirrel.models.config import ProjectConfig, Target
from squirrel.models.results import DiffResult
from squirrel.services.git_service import GitService, parse_revision
from squirrel.services.ssh_service import SSHService


class DiffService:
    """
    Computes the pending commit log for a target.

    No step is retried; every failure surfaces as a DiffError naming
    the step that failed.
    """

    def __init__(
        self,
        config: ProjectConfig,
        target: Target,
        git: Optional[GitService] = None,
        ssh: Optional[SSHService] = None,
        logger: Optional[DeployLogger] = None,
    ):
        self.config = config
        self.target = target
        self.logger = logger
        self.git = git or GitService(cwd=config.root, logger=logger)
        self.ssh = ssh or SSHService(target.ssh, logger=logger)
        self.composer = CommandComposer(config, target)

    def resolve_branch(self, branch: Optional[str] = None) -> str:
        """
        Branch to diff/deploy: the given one, or the local checkout's branch.

        Raises:
            DiffError: If the local branch cannot be determined
        """
        if branch:
            return branch
        try:
            return self.git.current_branch()
        except (GitError, OSError) as e:
            raise DiffError("resolve branch", str(e))

    def deployed_revision(self) -> str:
        """
        Revision checked out on the target's first host.

        Raises:
            DiffError: If the host cannot be queried
        """
        host = self.target.ssh.primary_host
        if host is None:
            raise DiffError("remote revision", f"Target '{self.target.name}' has no hosts")

        try:
            result = self.ssh.execute_command(host, self.composer.revision())
        except (OSError, TimeoutError) as e:
            raise DiffError("remote revision", f"{host}: {e}")

        revision = parse_revision(result)
        if result.is_failure or not revision:
            raise DiffError(
                "remote revision",
                f"{host}: git rev-parse exited {result.returncode}",
                context=result.stderr.strip() or None,
            )
        return revision

    def fetch(self) -> None:
        """
        Fetch upstream refs into the local checkout.

        Raises:
            DiffError: If git fetch fails
        """
        try:
            self.git.fetch()
        except (GitError, OSError) as e:
            raise DiffError("fetch", str(e))

    def diff(self, branch: Optional[str] = None) -> DiffResult:
        """
        Commits on the branch's upstream tip not yet on the target.

        The remote revision query and the local fetch run concurrently.

        Args:
            branch: Branch to compare (default: local checkout's branch)

        Returns:
            DiffResult, empty when the target is up to date

        Raises:
            DiffError: Naming the failed step
        """
        branch = self.resolve_branch(branch)
        upstream_ref = self.git.upstream_ref(branch)

        def on_error(error: BaseException):
            if isinstance(error, DiffError):
                raise error
            raise DiffError("parallel inquiry", str(error))

        revision, _ = join(
            [self.deployed_revision, self.fetch],
            on_success=tuple,
            on_error=on_error,
        )

        if self.logger:
            self.logger.log(f"{self.target.name} is at {revision}, comparing with {upstream_ref}")

        try:
            lines = self.git.log(revision, upstream_ref, self.config.diff_format)
        except (GitError, OSError) as e:
            raise DiffError("log", str(e))

        return DiffResult(
            target=self.target.name,
            branch=branch,
            deployed_revision=revision,
            upstream_ref=upstream_ref,
            lines=lines,
        )
