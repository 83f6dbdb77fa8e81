"""
Tests for shell profile mutation and config file helpers.
"""

from pathlib import Path

import pytest

from macsetup.core.services.config_files import (
    backup_file,
    remove_file,
    remove_tree,
    write_if_absent,
)
from macsetup.core.services.profile import ProfileMutator, resolve_profile_path

# ── Profile path resolution ──────────────────────────────────────────


class TestResolveProfilePath:
    @pytest.mark.parametrize(
        "shell,expected",
        [
            ("/bin/zsh", ".zshrc"),
            ("/usr/local/bin/zsh", ".zshrc"),
            ("/bin/bash", ".bash_profile"),
            ("/usr/local/bin/fish", ".profile"),
            ("", ".profile"),
            (None, ".profile"),
        ],
    )
    def test_mapping(self, shell, expected):
        home = Path("/Users/tester")
        assert resolve_profile_path(shell, home) == home / expected


# ── ensure_block ─────────────────────────────────────────────────────


class TestEnsureBlock:
    def test_appends_to_existing(self, tmp_path: Path):
        profile = tmp_path / ".zshrc"
        profile.write_text("export A=1\n")
        mutator = ProfileMutator(profile)

        assert mutator.ensure_block("Go environment", "export GOPATH=$HOME/go")
        assert profile.read_text() == "export A=1\n\n# Go environment\nexport GOPATH=$HOME/go\n"

    def test_idempotent(self, tmp_path: Path):
        profile = tmp_path / ".zshrc"
        mutator = ProfileMutator(profile)
        mutator.ensure_block("Go environment", "export GOPATH=$HOME/go")
        first = profile.read_text()

        assert not mutator.ensure_block("Go environment", "export GOPATH=$HOME/go")
        assert profile.read_text() == first
        assert first.count("# Go environment") == 1

    def test_creates_missing_file_and_parents(self, tmp_path: Path):
        profile = tmp_path / "nested" / ".profile"
        mutator = ProfileMutator(profile)
        assert mutator.ensure_block("Rust environment", 'export CARGO_HOME="$HOME/.cargo"')
        assert profile.read_text() == '\n# Rust environment\nexport CARGO_HOME="$HOME/.cargo"\n'

    def test_missing_trailing_newline(self, tmp_path: Path):
        profile = tmp_path / ".zshrc"
        profile.write_text("export A=1")
        ProfileMutator(profile).ensure_block("Java environment", "export JAVA_HOME=/x")
        assert profile.read_text() == "export A=1\n\n# Java environment\nexport JAVA_HOME=/x\n"

    def test_marker_matched_anywhere_in_line(self, tmp_path: Path):
        profile = tmp_path / ".zshrc"
        profile.write_text("# my Go environment tweaks\n")
        mutator = ProfileMutator(profile)
        assert mutator.has_block("Go environment")
        assert not mutator.ensure_block("Go environment", "export GOPATH=$HOME/go")

    def test_never_rewrites_existing_content(self, tmp_path: Path):
        profile = tmp_path / ".zshrc"
        original = "alias ll='ls -l'\nexport EDITOR=vim\n"
        profile.write_text(original)
        ProfileMutator(profile).ensure_block("Node.js and npm environment", "export X=1")
        assert profile.read_text().startswith(original)


# ── remove_block ─────────────────────────────────────────────────────


class TestRemoveBlock:
    def test_backup_then_filter(self, tmp_path: Path, fixed_clock):
        profile = tmp_path / ".zshrc"
        original = (
            "export A=1\n"
            "# Java environment\n"
            "export JAVA_HOME=/opt/openjdk\n"
            "export PATH=$JAVA_HOME/bin:$PATH\n"
            "export B=2\n"
        )
        profile.write_text(original)
        mutator = ProfileMutator(profile, clock=fixed_clock)

        backup = mutator.remove_block("JAVA_HOME")

        assert backup == tmp_path / ".zshrc.backup.20240501_123045"
        assert backup.read_text() == original
        assert profile.read_text() == "export A=1\n# Java environment\nexport B=2\n"

    def test_preserves_order(self, tmp_path: Path, fixed_clock):
        profile = tmp_path / ".zshrc"
        profile.write_text("c\nx-drop\nb\na\nx-drop-again\n")
        ProfileMutator(profile, clock=fixed_clock).remove_block("drop")
        assert profile.read_text() == "c\nb\na\n"

    def test_each_removal_gets_its_own_backup(self, tmp_path: Path, fixed_clock):
        profile = tmp_path / ".zshrc"
        profile.write_text("# Rust environment\nexport CARGO_HOME=x\n")
        mutator = ProfileMutator(profile, clock=fixed_clock)

        first = mutator.remove_block("Rust environment")
        second = mutator.remove_block("CARGO_HOME")

        assert first != second
        assert second.name == ".zshrc.backup.20240501_123045-1"
        assert second.read_text() == "export CARGO_HOME=x\n"
        assert mutator.backups() == [first, second]
        assert profile.read_text() == ""

    def test_missing_profile_is_noop(self, tmp_path: Path):
        mutator = ProfileMutator(tmp_path / ".zshrc")
        assert mutator.remove_block("anything") is None
        assert not (tmp_path / ".zshrc").exists()
        assert mutator.backups() == []

    def test_no_match_keeps_content(self, tmp_path: Path, fixed_clock):
        profile = tmp_path / ".zshrc"
        profile.write_text("export A=1\n")
        backup = ProfileMutator(profile, clock=fixed_clock).remove_block("nothing-here")
        assert backup is not None
        assert profile.read_text() == "export A=1\n"


# ── set_line ─────────────────────────────────────────────────────────


class TestSetLine:
    def test_replaces_matching_line(self, tmp_path: Path, fixed_clock):
        zshrc = tmp_path / ".zshrc"
        zshrc.write_text("ZSH_THEME=robbyrussell\nplugins=(git)\nsource $ZSH/oh-my-zsh.sh\n")
        mutator = ProfileMutator(zshrc, clock=fixed_clock)

        assert mutator.set_line("plugins=(", "plugins=(git docker)")
        assert zshrc.read_text() == (
            "ZSH_THEME=robbyrussell\nplugins=(git docker)\nsource $ZSH/oh-my-zsh.sh\n"
        )
        assert len(mutator.backups()) == 1

    def test_appends_when_absent(self, tmp_path: Path):
        zshrc = tmp_path / ".zshrc"
        zshrc.write_text("export A=1\n")
        assert ProfileMutator(zshrc).set_line("plugins=(", "plugins=(git)")
        assert zshrc.read_text() == "export A=1\nplugins=(git)\n"

    def test_already_set(self, tmp_path: Path):
        zshrc = tmp_path / ".zshrc"
        zshrc.write_text("plugins=(git)\n")
        mutator = ProfileMutator(zshrc)
        assert not mutator.set_line("plugins=(", "plugins=(git)")
        assert mutator.backups() == []


# ── Config files ─────────────────────────────────────────────────────


class TestConfigFiles:
    def test_write_if_absent(self, tmp_path: Path):
        path = tmp_path / ".pip" / "pip.conf"
        assert write_if_absent(path, "[global]\n")
        assert path.read_text() == "[global]\n"

    def test_never_overwrites(self, tmp_path: Path):
        path = tmp_path / "pip.conf"
        path.write_text("mine\n")
        assert not write_if_absent(path, "theirs\n")
        assert path.read_text() == "mine\n"

    def test_backup_name(self, tmp_path: Path, fixed_clock):
        path = tmp_path / "config.json"
        path.write_text("{}")
        backup = backup_file(path, clock=fixed_clock)
        assert backup.name == "config.json.backup.20240501_123045"
        assert backup.read_text() == "{}"

    def test_remove_file_and_tree(self, tmp_path: Path):
        f = tmp_path / "a.conf"
        f.write_text("x")
        d = tmp_path / "sing-box"
        (d / "sub").mkdir(parents=True)

        assert remove_file(f)
        assert not remove_file(f)
        assert remove_tree(d)
        assert not d.exists()
        assert not remove_tree(d)
