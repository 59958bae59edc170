"""Unit tests for ConfigService."""

import json

import pytest

from squirrel.exceptions import ConfigurationError, TargetNotFoundError
from squirrel.services.config_service import ConfigService

pytestmark = pytest.mark.usefixtures("no_config_override")


def _raw(**target):
    target.setdefault("ssh", {"hosts": ["web1"], "user": "deploy"})
    return {
        "project": {"name": "myapp", "repository": {"type": "git", "url": "git@x:y.git"}},
        "targets": {"production": target},
    }


class TestLoad:
    def test_yaml(self, config_file):
        config = ConfigService(config_file).load()

        assert config.name == "myapp"
        assert config.repository.is_supported
        assert config.root == config_file
        assert config.target_names == ["production", "staging"]
        assert config.commands.monitor == "tail -f logs/*.log"

        production = config.targets["production"]
        assert production.hosts == ("web1", "web2")
        assert production.ssh.port == 2222

    def test_env_values_stringified(self, config_file):
        env = ConfigService(config_file).get_target("production").env
        assert env == {"NODE_ENV": "production", "PORT": "80", "DEBUG": "false"}

    def test_single_host_string(self, config_file):
        staging = ConfigService(config_file).get_target("staging")
        assert staging.hosts == ("staging1",)
        assert staging.ssh.port == 22

    def test_package_json_fallback(self, tmp_path):
        (tmp_path / "package.json").write_text(
            json.dumps(
                {
                    "name": "myapp",
                    "repository": "git@github.com:me/myapp.git",
                    "squirrel": {
                        "targets": {
                            "production": {"ssh": {"hosts": ["web1"], "user": "deploy"}}
                        }
                    },
                }
            )
        )

        config = ConfigService(tmp_path).load()

        assert config.name == "myapp"
        assert config.repository.type == "git"
        assert config.repository.url == "git@github.com:me/myapp.git"
        assert config.target_names == ["production"]

    def test_yaml_preferred_over_package_json(self, config_file):
        (config_file / "package.json").write_text(json.dumps({"name": "other"}))
        assert ConfigService(config_file).load().name == "myapp"

    def test_package_json_without_section(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({"name": "myapp"}))
        with pytest.raises(ConfigurationError, match="no 'squirrel' section"):
            ConfigService(tmp_path).load()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="No squirrel configuration found"):
            ConfigService(tmp_path).load()

    def test_env_var_override(self, config_file, tmp_path_factory, monkeypatch):
        elsewhere = tmp_path_factory.mktemp("elsewhere")
        monkeypatch.setenv("SQUIRREL_CONFIG", str(config_file / "squirrel.yml"))

        config = ConfigService(elsewhere).load()

        assert config.name == "myapp"
        assert config.root == config_file

    def test_env_var_override_missing(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SQUIRREL_CONFIG", str(tmp_path / "nope.yml"))
        with pytest.raises(ConfigurationError, match="Config file not found"):
            ConfigService(tmp_path).load()

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "squirrel.yml").write_text("targets: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigService(tmp_path).load()

    def test_cached(self, config_file):
        service = ConfigService(config_file)
        assert service.load() is service.load()


class TestTargets:
    def test_unknown_target(self, config_file):
        with pytest.raises(TargetNotFoundError) as exc_info:
            ConfigService(config_file).get_target("qa")

        error = exc_info.value
        assert error.target_name == "qa"
        assert error.available_targets == ["production", "staging"]
        assert "production, staging" in str(error)


class TestParse:
    """Validation of the raw mapping."""

    def test_missing_project_name(self):
        raw = _raw()
        del raw["project"]["name"]
        with pytest.raises(ConfigurationError, match="project.name"):
            ConfigService().parse(raw)

    def test_no_targets(self):
        raw = _raw()
        raw["targets"] = {}
        with pytest.raises(ConfigurationError, match="targets"):
            ConfigService().parse(raw)

    @pytest.mark.parametrize(
        "ssh, message",
        [
            (None, "no ssh configuration"),
            ({"hosts": [], "user": "deploy"}, "at least one host"),
            ({"hosts": ["web1"]}, "missing ssh.user"),
            ({"hosts": ["web1"], "user": "deploy", "port": "ssh"}, "invalid ssh.port"),
        ],
    )
    def test_bad_ssh(self, ssh, message):
        with pytest.raises(ConfigurationError, match=message):
            ConfigService().parse(_raw(ssh=ssh))

    def test_env_must_be_mapping(self):
        with pytest.raises(ConfigurationError, match="env must be a mapping"):
            ConfigService().parse(_raw(env=["A=1"]))

    def test_null_env_value_kept(self):
        config = ConfigService().parse(_raw(env={"EMPTY": None}))
        assert config.targets["production"].env == {"EMPTY": None}

    def test_explicit_path(self):
        config = ConfigService().parse(_raw(path="/srv/myapp"))
        target = config.targets["production"]
        assert config.app_path(target) == "/srv/myapp"

    def test_notifications(self):
        raw = _raw()
        raw["notifications"] = {
            "chat": {"url": "https://chat.example.com/hook", "channel": "#deploys"},
            "annotations": {"url": "https://metrics.example.com/annotations", "user": "u", "token": "t"},
        }

        notifications = ConfigService().parse(raw).notifications

        assert notifications.enabled
        assert notifications.chat.channel == "#deploys"
        assert notifications.annotations.token == "t"

    def test_notification_sink_requires_url(self):
        raw = _raw()
        raw["notifications"] = {"chat": {"channel": "#deploys"}}
        with pytest.raises(ConfigurationError, match="requires a 'url'"):
            ConfigService().parse(raw)

    def test_defaults(self):
        config = ConfigService().parse(_raw())
        assert not config.notifications.enabled
        assert config.diff_format == "%h %an: %s"
        assert config.targets["production"].ssh.strict_host_key_checking == "no"
