"""
Recipe-driven component operations — install, uninstall, verify.

Each ``*_operation`` factory turns a recipe name into a callable the
registry stores on its Component. The shared install sequence is:

    Homebrew present?  →  version probe  →  tap / install / upgrade
      →  profile block  →  config files  →  component hook

Component-specific steps live in ``hooks``; everything else is data
in ``COMPONENT_RECIPES``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from macsetup.core.data.recipes import COMPONENT_RECIPES
from macsetup.core.engine.context import ProvisionContext
from macsetup.core.models.component import Operation, Probe
from macsetup.core.models.result import CommandResult
from macsetup.core.observability.health import HEALTHY, UNHEALTHY, ComponentHealth
from macsetup.core.services.versioning import (
    UNKNOWN,
    VERSION_PATTERN,
    extract_version,
    is_current,
)

logger = logging.getLogger(__name__)

Hook = Callable[[ProvisionContext], CommandResult | None]


def _package(recipe: dict[str, Any]) -> tuple[str | None, bool]:
    """(Homebrew package name, is_cask) for a recipe."""
    if recipe.get("cask"):
        return recipe["cask"], True
    return recipe.get("formula"), False


# ── Version probing ─────────────────────────────────────────────


def installed_version(ctx: ProvisionContext, recipe: dict[str, Any]) -> str:
    """Installed version of a recipe's tool, or ``"unknown"``.

    Reads ``brew list --versions`` for ``version_source: brew``,
    otherwise runs ``version_command`` and applies ``version_pattern``
    to stdout and stderr (``java -version`` prints to stderr).
    """
    package, cask = _package(recipe)
    if recipe.get("version_source") == "brew" and package:
        return ctx.brew.installed_version(package, cask=cask)

    command = recipe.get("version_command")
    cli = recipe.get("cli")
    if not command or (cli and ctx.runner.which(cli) is None):
        return UNKNOWN

    result = ctx.runner.run_once(*command)
    if not result.ok:
        return UNKNOWN
    text = "\n".join(filter(None, [result.output, result.metadata.get("stderr", "")]))
    return extract_version(text, recipe.get("version_pattern", VERSION_PATTERN))


# ── Install ─────────────────────────────────────────────────────


def install_package(ctx: ProvisionContext, name: str, recipe: dict[str, Any]) -> CommandResult:
    """Install or upgrade the recipe's Homebrew package unless current."""
    package, cask = _package(recipe)
    label = f"{name} installation"
    if package is None:
        return CommandResult.skip(label=label, reason="no Homebrew package")

    app = recipe.get("app")
    if app and ctx.app_installed(app):
        logger.info("%s is already installed in %s", app, ctx.settings.applications_dir)
        return CommandResult.skip(label=label, reason=f"{app}.app already installed")

    current = installed_version(ctx, recipe)
    latest = ctx.brew.latest_version(package, cask=cask)
    if is_current(current, latest):
        logger.info("%s is up to date (%s)", name, current)
        return CommandResult.skip(
            label=label,
            reason=f"up to date ({current})",
            metadata={"current": current, "latest": latest},
        )

    if recipe.get("tap"):
        tapped = ctx.brew.tap(recipe["tap"])
        if tapped.failed:
            return tapped

    if current != UNKNOWN and ctx.brew.is_installed(package, cask=cask):
        logger.info("Updating %s (%s → %s)", name, current, latest)
        result = ctx.brew.upgrade(package, cask=cask, label=f"{name} update")
    else:
        logger.info("Installing %s (latest: %s)", name, latest)
        result = ctx.brew.install(package, cask=cask, label=label)
    result.metadata.update({"current": current, "latest": latest})
    return result


def configure(ctx: ProvisionContext, recipe: dict[str, Any]) -> None:
    """Apply the recipe's profile block, config files and directories."""
    profile = recipe.get("profile")
    if profile:
        cli = recipe.get("cli")
        if recipe.get("profile_if_cli_missing") and cli and ctx.runner.which(cli):
            logger.debug("%s already on PATH, skipping %s block", cli, profile["description"])
        else:
            ctx.ensure_profile_block(profile["description"], profile["content"])

    for entry in recipe.get("config_files", []):
        ctx.write_config(entry["path"], entry["content"])

    if recipe.get("dirs"):
        ctx.make_dirs(*recipe["dirs"])


def install_operation(name: str, hook: Hook | None = None) -> Operation:
    """Build the install operation for the recipe called ``name``."""
    recipe = COMPONENT_RECIPES[name]

    def install(ctx: ProvisionContext) -> CommandResult:
        missing = ctx.brew.require(f"{name} installation")
        if missing is not None:
            return missing

        result = install_package(ctx, name, recipe)
        if result.failed:
            return result

        configure(ctx, recipe)
        if hook is not None:
            hooked = hook(ctx)
            if hooked is not None and hooked.failed:
                return hooked
        logger.info("%s setup completed", name)
        return result

    install.__name__ = f"install_{name}"
    return install


# ── Uninstall ───────────────────────────────────────────────────


def uninstall_operation(name: str) -> Operation:
    """Build the uninstall operation for the recipe called ``name``.

    The Homebrew package is removed (unless the recipe keeps it), then
    every profile line matching a recipe pattern and every downstream
    config file or directory. Configuration is cleaned even when the
    package removal fails.
    """
    recipe = COMPONENT_RECIPES[name]
    removal = recipe.get("uninstall", {})

    def uninstall(ctx: ProvisionContext) -> CommandResult:
        label = f"{name} removal"
        missing = ctx.brew.require(label)
        if missing is not None:
            return missing

        package, cask = _package(recipe)
        if package and not removal.get("keep_package"):
            if ctx.brew.is_installed(package, cask=cask):
                result = ctx.brew.uninstall(package, cask=cask)
            else:
                logger.info("%s is not installed", package)
                result = CommandResult.skip(label=label, reason=f"{package} not installed")
        else:
            result = CommandResult.success(label=label, output="configuration only")

        patterns = list(removal.get("patterns", []))
        profile = recipe.get("profile")
        if profile and profile["description"] not in patterns:
            patterns.insert(0, profile["description"])
        for pattern in patterns:
            ctx.remove_profile_lines(pattern)

        for path in removal.get("files", []):
            ctx.remove_file(path)
        for path in removal.get("dirs", []):
            ctx.remove_tree(path)

        if not result.failed:
            logger.info("%s removed", name)
        return result

    uninstall.__name__ = f"uninstall_{name}"
    return uninstall


# ── Verify ──────────────────────────────────────────────────────


def verify_operation(name: str) -> Probe:
    """Build the smoke-test probe for the recipe called ``name``."""
    recipe = COMPONENT_RECIPES[name]

    def verify(ctx: ProvisionContext) -> ComponentHealth:
        health = ComponentHealth(name=name, status=HEALTHY)
        cli = recipe.get("cli")
        app = recipe.get("app")

        cli_path = ctx.runner.which(cli) if cli else None
        app_present = bool(app) and ctx.app_installed(app)
        health.details["cli"] = cli_path
        if app:
            health.details["app"] = app_present

        if not cli_path and not app_present:
            health.status = UNHEALTHY
            health.message = f"{name} is not installed"
            return health

        if cli and not cli_path:
            health.warn(f"'{cli}' command not found on PATH")

        version = installed_version(ctx, recipe) if cli_path else UNKNOWN
        health.details["version"] = version
        if cli_path and version == UNKNOWN and recipe.get("version_pattern"):
            health.warn("version could not be determined")

        profile = recipe.get("profile")
        if profile and not recipe.get("profile_if_cli_missing"):
            if not ctx.profile.has_block(profile["description"]):
                health.warn(f"{profile['description']} block missing from {ctx.profile.path}")

        for entry in recipe.get("config_files", []):
            path = ctx.path(entry["path"])
            if not path.exists():
                health.warn(f"{path} is missing")
        for template in recipe.get("verify_paths", []):
            path = ctx.path(template)
            if not path.exists():
                health.warn(f"{path} is missing")

        health.message = f"{name} {version}" if version != UNKNOWN else f"{name} installed"
        return health

    verify.__name__ = f"verify_{name}"
    return verify
