"""
Exec Command

Run a local command with a target's environment applied, so an operator
can reproduce the target environment on their own machine.
"""

import os
import shlex
import subprocess
from typing import Sequence

import click

from squirrel.base import TargetCommand


class ExecCommand(TargetCommand):
    """
    Run a command locally with the target environment merged over os.environ.

    Features:
    - A single argument is a shell string ("echo $NODE_ENV")
    - Several arguments are run as an argument vector, quoting intact
    - Exit code propagation
    - Falls back to an interactive $SHELL when no command is given
    """

    def __init__(self, target_name: str, command: Sequence[str], verbose: bool = False):
        super().__init__(target_name, verbose=verbose)
        self.command = list(command) or [os.environ.get("SHELL", "/bin/sh")]

    def execute(self) -> None:
        env = self.composer.exec_env()
        shell = len(self.command) == 1
        args = self.command[0] if shell else self.command

        if self.verbose:
            shown = args if shell else shlex.join(args)
            self.print_dim(f"{shown}  ({len(self.target.env)} variable(s) from {self.target_name})")

        result = subprocess.run(args, shell=shell, env=env, cwd=self.project_root)

        if result.returncode != 0:
            raise SystemExit(result.returncode)


@click.command(
    name="exec",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option("--verbose", "-v", is_flag=True, help="Show the command being run")
@click.argument("target")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
def exec_(target, command, verbose):
    """
    Run a local command with a target's environment

    Examples:
        squirrel exec production node scripts/migrate.js
        squirrel exec production git commit -m "fix login bug"
        squirrel exec staging "echo $NODE_ENV"
        squirrel exec staging            # interactive $SHELL
    """
    ExecCommand(target, command, verbose=verbose).run()
