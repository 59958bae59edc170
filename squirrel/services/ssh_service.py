"""SSH service for running command sequences on every host of a target."""

import shlex
import subprocess
import time
from typing import List, Optional

from squirrel.constants import SPAWN_FAILURE_EXIT_CODE
from squirrel.core.shell import remote_invocation
from squirrel.exceptions import ConfigurationError, RemoteExecutionError
from squirrel.logger import DeployLogger
from squirrel.models.command import CommandSequence
from squirrel.models.config import SSHConfig
from squirrel.models.results import FanOutResult, HostResult, SSHResult


class SSHService:
    """Service for SSH operations against one target's hosts."""

    def __init__(self, config: SSHConfig, logger: Optional[DeployLogger] = None):
        """
        Initialize SSH service.

        Args:
            config: SSH configuration of the target
            logger: Optional logger receiving every ssh argument vector
        """
        self.config = config
        self.logger = logger

    def ssh_args(self, host: str, command: str) -> List[str]:
        """
        Build the ssh argument vector for one host.

        Args:
            host: Host IP or hostname
            command: Remote command string (already escaped)

        Returns:
            Argument vector for subprocess
        """
        args = ["ssh"]
        if self.config.forward_agent:
            args.extend(["-o", "ForwardAgent=yes"])
        args.extend(
            [
                "-o",
                f"StrictHostKeyChecking={self.config.strict_host_key_checking}",
                "-p",
                str(self.config.port),
                self.config.connection_string(host),
                command,
            ]
        )
        return args

    def _log_command(self, args: List[str]) -> None:
        if self.logger:
            self.logger.log_command(shlex.join(args))

    def _require_hosts(self) -> List[str]:
        hosts = list(self.config.hosts)
        if not hosts:
            raise ConfigurationError(
                "Target has no hosts", context="Add at least one entry to ssh.hosts"
            )
        return hosts

    def fan_out(self, sequence: CommandSequence) -> FanOutResult:
        """
        Run a command sequence on every host at once.

        Each connection inherits the terminal's stdin/stdout/stderr, so
        output streams live and Ctrl-C reaches the remote side.

        Args:
            sequence: Commands to chain and send

        Returns:
            FanOutResult with one HostResult per host, in host order

        Raises:
            ConfigurationError: If the target has no hosts (nothing is spawned)
        """
        hosts = self._require_hosts()
        invocation = remote_invocation(sequence)

        running = []
        try:
            for host in hosts:
                args = self.ssh_args(host, invocation)
                self._log_command(args)
                start_time = time.time()
                try:
                    process = subprocess.Popen(args)
                except OSError as e:
                    if self.logger:
                        self.logger.log_error(
                            f"Could not start ssh for {host}: {e}",
                            context=shlex.join(args),
                        )
                    process = None
                running.append((host, args, start_time, process))

            results = []
            for host, args, start_time, process in running:
                if process is None:
                    returncode = SPAWN_FAILURE_EXIT_CODE
                else:
                    returncode = process.wait()
                results.append(
                    HostResult(
                        host=host,
                        returncode=returncode,
                        args=args,
                        duration_seconds=time.time() - start_time,
                    )
                )
        except KeyboardInterrupt:
            for _, _, _, process in running:
                if process is not None and process.poll() is None:
                    process.terminate()
            raise

        fan_out_result = FanOutResult(operation=sequence.operation, results=results)

        if self.logger:
            for result in results:
                if result.is_success:
                    self.logger.log(f"{result.host}: exit 0 ({result.duration_seconds:.1f}s)")
                else:
                    self.logger.log(
                        f"{result.host}: exit {result.returncode} ({result.duration_seconds:.1f}s)",
                        "ERROR",
                    )

        return fan_out_result

    def run(self, sequence: CommandSequence) -> FanOutResult:
        """
        Fan out a sequence and fail if any host failed.

        Raises:
            RemoteExecutionError: Naming every failed host
        """
        result = self.fan_out(sequence)
        if not result.is_success:
            raise RemoteExecutionError(
                sequence.operation,
                result.failed_hosts,
                exit_code=result.exit_code,
                context="; ".join(
                    f"{r.host} exited {r.returncode}" for r in result.results if r.is_failure
                ),
            )
        return result

    def execute_command(
        self,
        host: str,
        sequence: CommandSequence,
        timeout: Optional[int] = None,
    ) -> SSHResult:
        """
        Run a sequence on a single host and capture its output.

        Args:
            host: Host IP or hostname
            sequence: Commands to chain and send
            timeout: Optional timeout in seconds (None leaves it to ssh)

        Returns:
            SSHResult with execution details
        """
        args = self.ssh_args(host, remote_invocation(sequence))
        self._log_command(args)

        start_time = time.time()
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            raise TimeoutError(
                f"SSH command timed out after {timeout}s\nContext: Host: {host}, Command: {sequence.chain()}"
            )

        ssh_result = SSHResult(
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            host=host,
            command=sequence.chain(),
            duration_seconds=time.time() - start_time,
        )
        if self.logger:
            self.logger.log_output(ssh_result.stdout, "stdout")
            self.logger.log_output(ssh_result.stderr, "stderr")
        return ssh_result
