"""Shared fixtures for squirrel tests."""

import textwrap

import pytest

from squirrel.models.config import (
    CommandsConfig,
    ProjectConfig,
    RepositoryConfig,
    SSHConfig,
    Target,
)


@pytest.fixture
def target():
    return Target(
        name="production",
        ssh=SSHConfig(hosts=("web1", "web2", "web3"), user="deploy", port=2222),
        env={"NODE_ENV": "production", "SECRET": 'a"b\\c', "EMPTY": None},
    )


@pytest.fixture
def project_config(target, tmp_path):
    return ProjectConfig(
        name="myapp",
        repository=RepositoryConfig(type="git", url="git@github.com:me/myapp.git"),
        targets={target.name: target},
        root=tmp_path,
    )


@pytest.fixture
def config_file(tmp_path):
    """Write a squirrel.yml into tmp_path and return its directory."""
    (tmp_path / "squirrel.yml").write_text(
        textwrap.dedent(
            """\
            project:
              name: myapp
              repository:
                type: git
                url: git@github.com:me/myapp.git
            commands:
              monitor: tail -f logs/*.log
            targets:
              production:
                ssh:
                  hosts: [web1, web2]
                  user: deploy
                  port: 2222
                env:
                  NODE_ENV: production
                  PORT: 80
                  DEBUG: false
              staging:
                ssh:
                  hosts: staging1
                  user: deploy
            """
        )
    )
    return tmp_path


@pytest.fixture
def no_config_override(monkeypatch):
    monkeypatch.delenv("SQUIRREL_CONFIG", raising=False)


@pytest.fixture
def monitor_config(project_config):
    return ProjectConfig(
        name=project_config.name,
        repository=project_config.repository,
        targets=project_config.targets,
        commands=CommandsConfig(monitor="tail -f logs/app.log"),
        root=project_config.root,
    )
