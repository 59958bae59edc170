"""squirrel - deployment orchestrator for git projects on ssh targets."""

__version__ = "1.0.0"
