"""
Tests for settings resolution — defaults, macsetup.yml and environment.
"""

import textwrap
from pathlib import Path

import pytest

from macsetup.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config_file,
    load_settings,
)


def _env(home: Path, **extra: str) -> dict[str, str]:
    return {"HOME": str(home), "SHELL": "/bin/zsh", "USER": "tester", **extra}


class TestLoadSettings:
    def test_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings(env=_env(tmp_path / "home"), search=False)

        assert settings.home == tmp_path / "home"
        assert settings.profile_path == tmp_path / "home" / ".zshrc"
        assert settings.log_dir == tmp_path
        assert settings.applications_dir == Path("/Applications")
        assert settings.user == "tester"
        assert settings.retry.max_attempts == 3
        assert settings.retry.base_delay == 2.0

    def test_bash_profile(self, tmp_path: Path):
        env = _env(tmp_path, SHELL="/bin/bash")
        settings = load_settings(env=env, search=False)
        assert settings.profile_path == tmp_path / ".bash_profile"

    def test_env_overrides(self, tmp_path: Path):
        env = _env(
            tmp_path,
            MACSETUP_PROFILE=str(tmp_path / "custom_rc"),
            MACSETUP_LOG_DIR=str(tmp_path / "logs"),
            MACSETUP_PLATFORM="linux",
        )
        settings = load_settings(env=env, search=False)
        assert settings.profile_path == tmp_path / "custom_rc"
        assert settings.log_dir == tmp_path / "logs"
        assert settings.platform == "linux"

    def test_file_values(self, tmp_path: Path):
        config = tmp_path / "macsetup.yml"
        config.write_text(textwrap.dedent("""\
            profile_path: ~/.config/zsh/zshrc
            log_dir: /var/tmp/macsetup
            retry:
              max_attempts: 5
              base_delay: 0.5
        """))
        settings = load_settings(config, env=_env(tmp_path / "home"))

        assert settings.profile_path == tmp_path / "home" / ".config" / "zsh" / "zshrc"
        assert settings.log_dir == Path("/var/tmp/macsetup")
        policy = settings.retry.policy()
        assert policy.max_attempts == 5
        assert policy.schedule() == [0.5, 1.0, 2.0, 4.0]

    def test_env_beats_file(self, tmp_path: Path):
        config = tmp_path / "macsetup.yml"
        config.write_text("log_dir: /from/file\n")
        env = _env(tmp_path, MACSETUP_LOG_DIR="/from/env")
        assert load_settings(config, env=env).log_dir == Path("/from/env")

    def test_search_walks_up(self, tmp_path: Path, monkeypatch):
        (tmp_path / "macsetup.yml").write_text("applications_dir: /tmp/Apps\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        assert find_config_file() == tmp_path / "macsetup.yml"
        assert load_settings(env=_env(tmp_path)).applications_dir == Path("/tmp/Apps")


class TestConfigErrors:
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config_file(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        config = tmp_path / "macsetup.yml"
        config.write_text("retry: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config_file(config)

    def test_not_a_mapping(self, tmp_path: Path):
        config = tmp_path / "macsetup.yml"
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config_file(config)

    def test_invalid_value(self, tmp_path: Path):
        config = tmp_path / "macsetup.yml"
        config.write_text("retry:\n  max_attempts: 0\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config_file(config)

    def test_empty_file_is_defaults(self, tmp_path: Path):
        config = tmp_path / "macsetup.yml"
        config.write_text("")
        assert load_config_file(config).retry.max_attempts == 3
