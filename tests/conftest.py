"""
Shared test fixtures and configuration.
"""

import logging
from datetime import datetime
from pathlib import Path

import pytest

from macsetup.adapters.mock import MockRunner
from macsetup.core.config.loader import Settings
from macsetup.core.engine.context import ProvisionContext


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A throwaway home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path: Path, home: Path) -> Settings:
    """Settings for a zsh user on macOS, rooted in tmp_path."""
    apps = tmp_path / "Applications"
    apps.mkdir()
    return Settings(
        home=home,
        shell="/bin/zsh",
        user="tester",
        profile_path=home / ".zshrc",
        log_dir=tmp_path / "logs",
        applications_dir=apps,
        platform="darwin",
        is_root=False,
    )


@pytest.fixture
def mock_runner() -> MockRunner:
    """Runner where every command succeeds and every executable exists."""
    return MockRunner()


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2024-05-01 12:30:45."""
    return lambda: datetime(2024, 5, 1, 12, 30, 45)


@pytest.fixture
def ctx(settings: Settings, mock_runner: MockRunner, fixed_clock) -> ProvisionContext:
    return ProvisionContext(settings=settings, runner=mock_runner, clock=fixed_clock)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo setup_logging() calls made by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
