"""
Provisioning context — everything a component operation may touch.

One context is built per run from the resolved Settings and the
chosen Runner. Component operations never reach for the environment,
``subprocess`` or the filesystem directly; they go through here, which
is what lets ``--dry-run`` suppress every write in one place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from macsetup.adapters.base import Runner
from macsetup.core.config.loader import Settings
from macsetup.core.services import config_files
from macsetup.core.services.config_files import Clock
from macsetup.core.services.homebrew import Homebrew
from macsetup.core.services.profile import ProfileMutator
from macsetup.core.services.templating import default_brew_prefix, render_template

logger = logging.getLogger(__name__)


@dataclass
class ProvisionContext:
    """Settings, runner and mutators shared by every component in a run."""

    settings: Settings
    runner: Runner
    dry_run: bool = False
    clock: Clock = datetime.now
    brew: Homebrew = field(init=False)
    profile: ProfileMutator = field(init=False)
    _brew_prefix: str | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.brew = Homebrew(self.runner)
        self.profile = ProfileMutator(self.settings.profile_path, clock=self.clock)

    @property
    def home(self) -> Path:
        return self.settings.home

    # ── Templates ───────────────────────────────────────────────

    def brew_prefix(self) -> str:
        """``brew --prefix``, falling back to the architecture default."""
        if self._brew_prefix is None:
            self._brew_prefix = self.brew.prefix() or default_brew_prefix()
        return self._brew_prefix

    def render(self, template: str) -> str:
        values = {
            "home": self.settings.home,
            "user": self.settings.user,
        }
        if "{brew_prefix}" in template:
            values["brew_prefix"] = self.brew_prefix()
        return render_template(template, values)

    def path(self, template: str) -> Path:
        return Path(self.render(template))

    # ── Probes ──────────────────────────────────────────────────

    def app_installed(self, app: str) -> bool:
        """Whether ``<applications_dir>/<app>.app`` exists."""
        return (self.settings.applications_dir / f"{app}.app").is_dir()

    def mutator(self, target: Path | None = None) -> ProfileMutator:
        """The run's profile mutator, or one bound to another rc file."""
        if target is None or target == self.profile.path:
            return self.profile
        return ProfileMutator(target, clock=self.clock)

    # ── Writes (suppressed in dry-run) ──────────────────────────

    def ensure_profile_block(
        self,
        description: str,
        content: str,
        target: Path | None = None,
    ) -> bool:
        mutator = self.mutator(target)
        if self.dry_run:
            if not mutator.has_block(description):
                logger.info("[dry-run] would add %s block to %s", description, mutator.path)
            return False
        return mutator.ensure_block(description, self.render(content))

    def set_profile_line(self, prefix: str, line: str, target: Path | None = None) -> bool:
        mutator = self.mutator(target)
        if self.dry_run:
            logger.info("[dry-run] would set %r in %s", line, mutator.path)
            return False
        return mutator.set_line(prefix, line)

    def remove_profile_lines(self, pattern: str, target: Path | None = None) -> Path | None:
        """Back up and strip lines matching ``pattern``; no-op when none match."""
        mutator = self.mutator(target)
        if not mutator.has_block(pattern):
            logger.debug("No lines matching %r in %s", pattern, mutator.path)
            return None
        if self.dry_run:
            logger.info("[dry-run] would remove lines matching %r from %s", pattern, mutator.path)
            return None
        return mutator.remove_block(pattern)

    def write_config(self, path_template: str, content: str) -> bool:
        path = self.path(path_template)
        if self.dry_run:
            if not path.exists():
                logger.info("[dry-run] would create %s", path)
            return False
        return config_files.write_if_absent(path, self.render(content))

    def make_dirs(self, *path_templates: str) -> None:
        for template in path_templates:
            path = self.path(template)
            if self.dry_run:
                logger.info("[dry-run] would create directory %s", path)
                continue
            path.mkdir(parents=True, exist_ok=True)

    def remove_file(self, path_template: str) -> bool:
        path = self.path(path_template)
        if self.dry_run:
            logger.info("[dry-run] would remove %s", path)
            return False
        return config_files.remove_file(path)

    def remove_tree(self, path_template: str) -> bool:
        path = self.path(path_template)
        if self.dry_run:
            logger.info("[dry-run] would remove directory %s", path)
            return False
        return config_files.remove_tree(path)
