"""Unit tests for DiffService."""

import shutil
import subprocess
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

from squirrel.exceptions import DiffError, GitError
from squirrel.models.results import SSHResult
from squirrel.services.diff_service import DiffService
from squirrel.services.git_service import GitService, parse_revision

REVISION = "4f2a9c1e0b7d3a5f6e8c9d0a1b2c3d4e5f6a7b8c"


@pytest.fixture
def git():
    git = MagicMock(spec=GitService)
    git.current_branch.return_value = "master"
    git.upstream_ref.side_effect = lambda branch: f"origin/{branch}"
    git.log.return_value = []
    return git


@pytest.fixture
def ssh():
    ssh = MagicMock()
    ssh.execute_command.return_value = SSHResult(returncode=0, stdout=f"{REVISION}\n", host="web1")
    return ssh


@pytest.fixture
def service(project_config, target, git, ssh):
    return DiffService(project_config, target, git=git, ssh=ssh)


class TestDiff:
    def test_up_to_date(self, service, git):
        result = service.diff("master")

        assert result.is_empty
        assert result.deployed_revision == REVISION
        assert result.upstream_ref == "origin/master"
        git.log.assert_called_once_with(REVISION, "origin/master", "%h %an: %s")

    def test_pending_commits(self, service, git):
        git.log.return_value = ["abc1234 Ann: fix login", "def5678 Bob: add cache"]

        result = service.diff("master")

        assert len(result) == 2
        assert result.text == "abc1234 Ann: fix login\ndef5678 Bob: add cache"

    def test_defaults_to_local_branch(self, service, git):
        git.current_branch.return_value = "feature/login"

        result = service.diff()

        assert result.branch == "feature/login"
        assert result.upstream_ref == "origin/feature/login"

    def test_queries_first_host_only(self, service, ssh, git):
        service.diff("master")

        ssh.execute_command.assert_called_once()
        host, sequence = ssh.execute_command.call_args.args
        assert host == "web1"
        assert sequence.commands[-1] == "git rev-parse HEAD"
        git.fetch.assert_called_once()


class TestDiffErrors:
    """Each failure names its step."""

    def test_branch_resolution(self, service, git):
        git.current_branch.side_effect = GitError(["git", "rev-parse"], 128, "not a repo")

        with pytest.raises(DiffError) as exc_info:
            service.diff()
        assert exc_info.value.step == "resolve branch"

    def test_remote_revision_exit_code(self, service, ssh, git):
        ssh.execute_command.return_value = SSHResult(returncode=1, stderr="no such dir")

        with pytest.raises(DiffError) as exc_info:
            service.diff("master")
        assert exc_info.value.step == "remote revision"
        git.log.assert_not_called()

    def test_remote_revision_unreachable(self, service, ssh):
        ssh.execute_command.side_effect = OSError("ssh not found")

        with pytest.raises(DiffError) as exc_info:
            service.diff("master")
        assert exc_info.value.step == "remote revision"

    def test_remote_revision_empty_output(self, service, ssh):
        ssh.execute_command.return_value = SSHResult(returncode=0, stdout="\n")

        with pytest.raises(DiffError) as exc_info:
            service.diff("master")
        assert exc_info.value.step == "remote revision"

    def test_fetch(self, service, git):
        git.fetch.side_effect = GitError(["git", "fetch", "origin"], 1, "could not resolve host")

        with pytest.raises(DiffError) as exc_info:
            service.diff("master")
        assert exc_info.value.step == "fetch"
        git.log.assert_not_called()

    def test_log(self, service, git):
        git.log.side_effect = GitError(["git", "log"], 128, "bad revision")

        with pytest.raises(DiffError) as exc_info:
            service.diff("master")
        assert exc_info.value.step == "log"

    def test_unexpected_error_in_inquiry(self, service, ssh):
        ssh.execute_command.side_effect = RuntimeError("boom")

        with pytest.raises(DiffError) as exc_info:
            service.diff("master")
        assert exc_info.value.step == "parallel inquiry"


class TestGitService:
    RUN = "squirrel.services.git_service.subprocess.run"

    def _completed(self, stdout="", returncode=0, stderr=""):
        return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)

    def test_log_command(self, tmp_path):
        with patch(self.RUN, return_value=self._completed("a x\n\nb y\n")) as mock_run:
            lines = GitService(cwd=tmp_path).log("abc", "origin/master", "%h %s")

        assert lines == ["a x", "b y"]
        assert mock_run.call_args.args[0] == [
            "git",
            "log",
            "--pretty=format:%h %s",
            "abc..origin/master",
        ]
        assert mock_run.call_args.kwargs["cwd"] == tmp_path

    def test_fetch_origin(self):
        with patch(self.RUN, return_value=self._completed()) as mock_run:
            GitService().fetch()
        assert mock_run.call_args.args[0] == ["git", "fetch", "origin"]

    def test_failure_raises(self):
        with patch(self.RUN, return_value=self._completed(returncode=128, stderr="fatal: nope\n")):
            with pytest.raises(GitError) as exc_info:
                GitService().fetch()
        assert exc_info.value.returncode == 128
        assert exc_info.value.stderr == "fatal: nope"

    def test_detached_head(self):
        with patch(self.RUN, return_value=self._completed("HEAD\n")):
            with pytest.raises(GitError):
                GitService().current_branch()

    def test_current_branch(self):
        with patch(self.RUN, return_value=self._completed("develop\n")):
            assert GitService().current_branch() == "develop"

    def test_parse_revision_ignores_shell_noise(self):
        result = SSHResult(returncode=0, stdout=f"Welcome to web1\n{REVISION}\n\n")
        assert parse_revision(result) == REVISION


def _run_git(cwd, *args):
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Ann",
            "-c", "user.email=ann@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def _commit(repo, message):
    _run_git(repo, "commit", "--allow-empty", "-q", "-m", message)
    return _run_git(repo, "rev-parse", "HEAD")


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestAgainstLocalRepository:
    """Upstream repository plus a clone, git log run for real."""

    @pytest.fixture
    def repos(self, tmp_path):
        upstream = tmp_path / "upstream"
        upstream.mkdir()
        _run_git(upstream, "init", "-q")
        _commit(upstream, "one")
        _run_git(upstream, "branch", "-M", "master")

        checkout = tmp_path / "checkout"
        _run_git(tmp_path, "clone", "-q", str(upstream), str(checkout))
        return upstream, checkout

    def _service(self, project_config, target, checkout, revision):
        ssh = MagicMock()
        ssh.execute_command.return_value = SSHResult(returncode=0, stdout=f"{revision}\n", host="web1")
        return DiffService(project_config, target, git=GitService(cwd=checkout), ssh=ssh)

    def test_empty_when_deployed_revision_is_upstream_tip(self, project_config, target, repos):
        upstream, checkout = repos
        deployed = _run_git(upstream, "rev-parse", "HEAD")

        result = self._service(project_config, target, checkout, deployed).diff("master")

        assert result.is_empty
        assert result.lines == []

    def test_one_line_per_new_upstream_commit(self, project_config, target, repos):
        upstream, checkout = repos
        deployed = _run_git(upstream, "rev-parse", "HEAD")
        _commit(upstream, "two")
        _commit(upstream, "three")

        config = replace(project_config, diff_format="%s")
        result = self._service(config, target, checkout, deployed).diff("master")

        # Fetch ran, so origin/master now includes the new commits
        assert result.lines == ["three", "two"]

    def test_current_branch_of_clone(self, repos):
        _, checkout = repos
        assert GitService(cwd=checkout).current_branch() == "master"
