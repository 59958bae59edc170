"""
Remote Task Commands

init, start, stop, abort, monitor and log: compose one command sequence
and run it on every host of the target.
"""

import click

from squirrel.base import TargetCommand


class RemoteTaskCommand(TargetCommand):
    """
    Compose a sequence for one operation and fan it out.

    The sequence is composed before anything is spawned, so a bad
    configuration never reaches a host.
    """

    TITLES = {
        "init": "Prepare Target",
        "start": "Start Server",
        "stop": "Stop Server",
        "abort": "Abort Deploy",
        "monitor": "Monitor",
        "log": "Tail Logs",
    }

    def __init__(self, target_name: str, operation: str, verbose: bool = False):
        super().__init__(target_name, verbose=verbose)
        if operation not in self.TITLES:
            raise ValueError(f"Unknown remote operation: {operation}")
        self.operation = operation

    def execute(self) -> None:
        sequence = getattr(self.composer, self.operation)()

        self.show_header(
            title=self.TITLES[self.operation],
            target=self.target_name,
            details={
                "Hosts": ", ".join(self.target.hosts),
                "Path": self.config.app_path(self.target),
            },
        )

        self.init_logger(self.target_name, self.operation)
        self.dispatch(sequence)


def _remote_task(operation: str, target: str, verbose: bool) -> None:
    RemoteTaskCommand(target, operation, verbose=verbose).run()


@click.command()
@click.argument("target")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
def init(target, verbose):
    """
    Prepare a target to accept deployments

    Creates the deploy directory, clones the repository and installs
    dependencies on every host.

    Examples:
        squirrel init production
    """
    _remote_task("init", target, verbose)


@click.command()
@click.argument("target")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
def start(target, verbose):
    """Start the server on every host of a target"""
    _remote_task("start", target, verbose)


@click.command()
@click.argument("target")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
def stop(target, verbose):
    """Stop the server on every host of a target"""
    _remote_task("stop", target, verbose)


@click.command()
@click.argument("target")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
def abort(target, verbose):
    """Abort a hanging deploy"""
    _remote_task("abort", target, verbose)


@click.command()
@click.argument("target")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
def monitor(target, verbose):
    """
    Tail logs on every host of a target

    Runs commands.monitor from the config, or `tail -f *.log`.
    Press Ctrl-C to stop.
    """
    _remote_task("monitor", target, verbose)


@click.command()
@click.argument("target")
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
def log(target, verbose):
    """
    Follow the application log on every host of a target

    Runs commands.log, falling back to commands.monitor, then `tail -f *.log`.
    """
    _remote_task("log", target, verbose)
