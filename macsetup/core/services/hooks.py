"""
Component hooks — the steps a recipe cannot express as data.

A hook runs after the package is installed and the recipe's profile
block and config files are in place. Best-effort steps (git config,
npm config, pip upgrade) log a warning and carry on; a hook returns a
failed CommandResult only when the component is unusable.
"""

from __future__ import annotations

import logging

from macsetup.core.data.recipes import (
    COMPONENT_RECIPES,
    GIT_GLOBAL_SETTINGS,
    HOMEBREW_INSTALL_URL,
    HOMEBREW_MIRRORS,
    NPM_GLOBAL_DIR,
    NPM_SETTINGS,
    OH_MY_ZSH_INSTALL_URL,
    PIP_BOOTSTRAP_PACKAGES,
    ZSH_PLUGINS,
    ZSH_PLUGINS_LINE,
    ZSHRC_BLOCK,
    ZSHRC_BLOCK_DESCRIPTION,
)
from macsetup.core.engine.context import ProvisionContext
from macsetup.core.models.result import EXIT_NOT_FOUND, CommandResult

logger = logging.getLogger(__name__)


def _best_effort(result: CommandResult) -> None:
    if result.failed:
        logger.warning("⚠ %s failed: %s", result.label, result.error)


# ── Homebrew ────────────────────────────────────────────────────


def install_homebrew(ctx: ProvisionContext) -> CommandResult:
    """Install Homebrew if absent, point it at the mirrors and update.

    Homebrew is the one component that does not require itself.
    """
    recipe = COMPONENT_RECIPES["homebrew"]

    if ctx.brew.available():
        logger.info("Homebrew is already installed")
    else:
        logger.info("Installing Homebrew...")
        installed = ctx.runner.run(
            "Homebrew installation",
            "/bin/bash",
            "-c",
            f'/bin/bash -c "$(curl -fsSL {HOMEBREW_INSTALL_URL})"',
            interactive=True,
        )
        if installed.failed:
            return installed
        if not ctx.brew.available():
            return CommandResult.failure(
                label="Homebrew installation",
                error="brew is still not on PATH after installation",
                exit_code=EXIT_NOT_FOUND,
            )

    configure_homebrew_mirrors(ctx)
    profile = recipe["profile"]
    ctx.ensure_profile_block(profile["description"], profile["content"])
    return ctx.brew.update()


def configure_homebrew_mirrors(ctx: ProvisionContext) -> None:
    """Point the brew and homebrew-core git remotes at the mirrors."""
    remotes = [
        (ctx.brew.repository(), HOMEBREW_MIRRORS["brew"]),
        (ctx.runner.capture("brew", "--repo", "homebrew/core"), HOMEBREW_MIRRORS["core"]),
    ]
    for repo, url in remotes:
        if not repo:
            continue
        _best_effort(
            ctx.runner.run_once(
                "git", "-C", repo, "remote", "set-url", "origin", url,
                label=f"Set {repo} remote",
            )
        )


# ── Git ─────────────────────────────────────────────────────────


def configure_git(ctx: ProvisionContext) -> None:
    for key, value in GIT_GLOBAL_SETTINGS:
        _best_effort(
            ctx.runner.run_once("git", "config", "--global", key, value, label=f"git config {key}")
        )


# ── iTerm2 / Oh My Zsh ──────────────────────────────────────────


def setup_oh_my_zsh(ctx: ProvisionContext) -> CommandResult | None:
    """Install Oh My Zsh and its plugins, then extend ``~/.zshrc``."""
    oh_my_zsh = ctx.home / ".oh-my-zsh"
    if oh_my_zsh.is_dir():
        logger.info("Oh My Zsh is already installed")
    else:
        # KEEP_ZSHRC stops the installer from moving ~/.zshrc aside
        installed = ctx.runner.run(
            "Oh My Zsh installation",
            "/bin/sh",
            "-c",
            f"curl -fsSL {OH_MY_ZSH_INSTALL_URL} | KEEP_ZSHRC=yes sh -s -- --unattended",
        )
        if installed.failed:
            return installed

    plugins_dir = oh_my_zsh / "custom" / "plugins"
    for plugin, url in ZSH_PLUGINS.items():
        dest = plugins_dir / plugin
        if dest.is_dir():
            logger.info("%s is already installed", plugin)
            continue
        _best_effort(ctx.runner.run(f"{plugin} plugin", "git", "clone", "--depth=1", url, str(dest)))

    zshrc = ctx.home / ".zshrc"
    ctx.set_profile_line("plugins=(", ZSH_PLUGINS_LINE, target=zshrc)
    ctx.ensure_profile_block(ZSHRC_BLOCK_DESCRIPTION, ZSHRC_BLOCK, target=zshrc)
    return None


# ── Python ──────────────────────────────────────────────────────


def upgrade_pip(ctx: ProvisionContext) -> None:
    """Upgrade pip tooling; fall back to ``--user`` on managed installs."""
    base = ["python3", "-m", "pip", "install", "--upgrade"]
    result = ctx.runner.run_once(
        *base, "--break-system-packages", *PIP_BOOTSTRAP_PACKAGES, label="pip upgrade"
    )
    if result.ok:
        return
    logger.info("System pip upgrade refused, retrying with --user")
    _best_effort(ctx.runner.run_once(*base, "--user", *PIP_BOOTSTRAP_PACKAGES, label="pip upgrade (--user)"))


# ── Node.js ─────────────────────────────────────────────────────


def configure_npm(ctx: ProvisionContext) -> None:
    """Global prefix under the home directory and the registry mirror."""
    ctx.make_dirs(NPM_GLOBAL_DIR)
    for key, value in NPM_SETTINGS:
        _best_effort(
            ctx.runner.run_once("npm", "config", "set", key, ctx.render(value), label=f"npm config {key}")
        )
