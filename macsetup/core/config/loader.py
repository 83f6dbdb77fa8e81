"""
Configuration loader — resolves Settings once at startup.

Settings come from three layers, later ones winning:

    defaults  <  macsetup.yml (optional)  <  environment

The resolved Settings object is passed explicitly into the runner,
the profile mutator and the provisioning context. Nothing reads the
environment after this point.
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from macsetup.core.reliability.retry import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    RetryPolicy,
)
from macsetup.core.services.profile import resolve_profile_path

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "macsetup.yml"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or unreadable."""


class RetrySettings(BaseModel):
    """Retry policy knobs for external installs."""

    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    base_delay: float = Field(default=DEFAULT_BASE_DELAY, ge=0)

    def policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.max_attempts, base_delay=self.base_delay)


class Settings(BaseModel):
    """Everything resolved from the environment and config file."""

    home: Path
    shell: str = ""
    user: str = ""
    profile_path: Path
    log_dir: Path
    applications_dir: Path = Path("/Applications")
    platform: str = "darwin"
    is_root: bool = False
    retry: RetrySettings = Field(default_factory=RetrySettings)


class FileSettings(BaseModel):
    """The subset of Settings a config file may set."""

    profile_path: Path | None = None
    log_dir: Path | None = None
    applications_dir: Path | None = None
    retry: RetrySettings = Field(default_factory=RetrySettings)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for macsetup.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to macsetup.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config_file(path: Path) -> FileSettings:
    """Parse and validate a macsetup.yml file.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return FileSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def default_log_dir(cwd: Path | None = None) -> Path:
    """Current directory when writable, else the system temp directory."""
    candidate = cwd or Path.cwd()
    if os.access(candidate, os.W_OK):
        return candidate
    return Path(tempfile.gettempdir())


def _expand(path: Path, home: Path) -> Path:
    text = str(path)
    if text.startswith("~"):
        return home / text.lstrip("~").lstrip("/")
    return path


def load_settings(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    *,
    search: bool = True,
) -> Settings:
    """Resolve Settings from defaults, an optional file and the environment.

    Args:
        config_path: Explicit macsetup.yml. When None and ``search`` is
            set, the file is looked up from the current directory upward.
        env: Environment mapping (default: ``os.environ``).
        search: Whether to search for a config file when none is given.

    Raises:
        ConfigError: If the config file is invalid.
    """
    env = os.environ if env is None else env

    if config_path is None and search:
        config_path = find_config_file()
    file_settings = load_config_file(config_path) if config_path else FileSettings()

    home = Path(env.get("HOME") or Path.home())
    shell = env.get("SHELL", "")

    profile_path = file_settings.profile_path or resolve_profile_path(shell, home)
    if env.get("MACSETUP_PROFILE"):
        profile_path = Path(env["MACSETUP_PROFILE"])

    log_dir = file_settings.log_dir or default_log_dir()
    if env.get("MACSETUP_LOG_DIR"):
        log_dir = Path(env["MACSETUP_LOG_DIR"])

    settings = Settings(
        home=home,
        shell=shell,
        user=env.get("USER", env.get("LOGNAME", "")),
        profile_path=_expand(profile_path, home),
        log_dir=_expand(log_dir, home),
        applications_dir=file_settings.applications_dir or Path("/Applications"),
        platform=env.get("MACSETUP_PLATFORM", _platform()),
        is_root=_is_root(),
        retry=file_settings.retry,
    )
    logger.debug("Resolved settings: profile=%s log_dir=%s", settings.profile_path, settings.log_dir)
    return settings


def _platform() -> str:
    return sys.platform


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return bool(geteuid and geteuid() == 0)

