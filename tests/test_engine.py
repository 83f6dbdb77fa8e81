"""
Tests for the component registry, driver and run summary.
"""

import pytest

from macsetup.adapters.mock import MockRunner
from macsetup.core.engine.context import ProvisionContext
from macsetup.core.engine.driver import Provisioner, Selection, SelectionKind
from macsetup.core.engine.errors import (
    InvalidSelectionError,
    PreconditionError,
    ProvisionError,
)
from macsetup.core.engine.registry import (
    COMPONENT_ORDER,
    ComponentRegistry,
    build_default_registry,
)
from macsetup.core.models.component import Component
from macsetup.core.models.result import CommandResult
from macsetup.core.models.summary import InstallAttempt, RunSummary, SummaryFinishedError


def _component(name: str, install=None, uninstall=None) -> Component:
    def ok(ctx):
        return CommandResult.success(label=name)

    return Component(name=name, description=f"{name} tool", install=install or ok, uninstall=uninstall)


@pytest.fixture
def provisioner(ctx) -> Provisioner:
    return Provisioner(build_default_registry(), ctx)


# ── Registry ─────────────────────────────────────────────────────────


class TestRegistry:
    def test_default_order(self):
        registry = build_default_registry()
        assert registry.names == [
            "homebrew", "git", "iterm2", "go", "python",
            "java", "rust", "nodejs", "singbox", "vscode",
        ]
        assert registry.names == COMPONENT_ORDER

    def test_every_component_has_description_and_verify(self):
        for component in build_default_registry():
            assert component.description
            assert component.verify is not None

    def test_removable(self):
        registry = build_default_registry()
        removable = [c.name for c in registry if c.removable]
        assert removable == ["python", "java", "rust", "nodejs", "singbox", "vscode"]

    def test_select_uses_registry_order(self):
        registry = build_default_registry()
        assert [c.name for c in registry.select(["vscode", "go", "git"])] == ["git", "go", "vscode"]

    def test_select_reverse(self):
        registry = build_default_registry()
        assert [c.name for c in registry.select(["java", "vscode"], reverse=True)] == ["vscode", "java"]

    def test_duplicates_collapse(self):
        registry = build_default_registry()
        assert [c.name for c in registry.select(["go", "go"])] == ["go"]

    def test_validate_names_every_unknown(self):
        registry = build_default_registry()
        with pytest.raises(InvalidSelectionError) as exc:
            registry.validate(["go", "bogus", "nope"])
        assert exc.value.unknown == ["bogus", "nope"]
        assert "bogus" in str(exc.value)
        assert "nope" in str(exc.value)

    def test_errors_share_a_base(self):
        assert issubclass(InvalidSelectionError, ProvisionError)
        assert issubclass(PreconditionError, ProvisionError)


# ── Selection ────────────────────────────────────────────────────────


class TestSelection:
    def test_constructors(self):
        assert Selection.all().kind == SelectionKind.ALL
        assert Selection.named(["go"]).names == ("go",)
        assert Selection.interactive().kind == SelectionKind.INTERACTIVE


# ── Driver: install ──────────────────────────────────────────────────


class TestInstallRun:
    def test_unknown_name_aborts_before_work(self, provisioner, mock_runner):
        with pytest.raises(InvalidSelectionError) as exc:
            provisioner.install(Selection.named(["go", "bogus"]))
        assert exc.value.unknown == ["bogus"]
        assert mock_runner.call_count == 0

    def test_named_runs_in_registry_order(self, provisioner):
        summary = provisioner.install(Selection.named(["rust", "go"]))
        assert summary.requested == ["go", "rust"]
        assert [a.component for a in summary.attempts] == ["go", "rust"]
        assert summary.status == "ok"
        assert summary.finished

    def test_all_with_one_failure_continues(self, provisioner, mock_runner):
        mock_runner.set_failure("brew install openjdk")

        summary = provisioner.install(Selection.all())

        assert summary.total == 10
        assert summary.failed == ["java"]
        assert summary.succeeded == [n for n in COMPONENT_ORDER if n != "java"]
        assert summary.status == "partial"
        assert summary.rerun_command("java") == "macsetup install java"
        java = next(a for a in summary.attempts if a.component == "java")
        assert java.attempts == 3
        go = next(a for a in summary.attempts if a.component == "go")
        assert go.attempts == 1
        assert "Mock failure" in java.error

    def test_exception_is_recorded_and_queue_continues(self, ctx):
        def boom(ctx):
            raise RuntimeError("kaput")

        registry = ComponentRegistry([_component("a"), _component("b", install=boom), _component("c")])
        summary = Provisioner(registry, ctx).install(Selection.all())

        assert summary.succeeded == ["a", "c"]
        assert summary.failed == ["b"]
        assert "kaput" in summary.attempts[1].error

    def test_attempts_count_runner_attempts(self, ctx, mock_runner):
        mock_runner.set_failure("flaky")

        def flaky(ctx):
            return ctx.runner.run("flaky", "flaky")

        registry = ComponentRegistry([_component("flaky", install=flaky)])
        summary = Provisioner(registry, ctx).install(Selection.all())

        assert summary.attempts[0].attempts == 3
        assert summary.status == "failed"

    def test_interactive_selection(self, provisioner):
        seen = []

        def chooser(components):
            seen.extend(c.name for c in components)
            return ["vscode", "git"]

        summary = provisioner.install(Selection.interactive(), chooser=chooser)

        assert seen == COMPONENT_ORDER
        assert summary.requested == ["git", "vscode"]

    def test_interactive_cancel(self, provisioner, mock_runner):
        summary = provisioner.install(Selection.interactive(), chooser=lambda components: None)
        assert summary.cancelled
        assert summary.status == "cancelled"
        assert summary.attempts == []
        assert mock_runner.call_count == 0

    def test_interactive_unknown_names_rejected(self, provisioner):
        with pytest.raises(InvalidSelectionError):
            provisioner.install(Selection.interactive(), chooser=lambda components: ["zig"])


# ── Driver: preflight ────────────────────────────────────────────────


class TestPreflight:
    def _provisioner(self, settings, runner=None, **overrides) -> Provisioner:
        settings = settings.model_copy(update=overrides)
        ctx = ProvisionContext(settings=settings, runner=runner or MockRunner())
        return Provisioner(build_default_registry(), ctx)

    def test_not_macos(self, settings):
        p = self._provisioner(settings, platform="linux")
        with pytest.raises(PreconditionError, match="macOS"):
            p.install(Selection.named(["go"]))

    def test_root(self, settings):
        p = self._provisioner(settings, is_root=True)
        with pytest.raises(PreconditionError, match="root"):
            p.install(Selection.named(["go"]))

    def test_brew_missing(self, settings):
        runner = MockRunner(available=set())
        p = self._provisioner(settings, runner)
        with pytest.raises(PreconditionError, match="Homebrew"):
            p.install(Selection.named(["go"]))
        assert runner.call_count == 0

    def test_brew_missing_but_selected(self, settings):
        p = self._provisioner(settings, MockRunner(available=set()))
        p.preflight(p.registry.select(["homebrew", "go"]))

    def test_xcode_tools_missing(self, settings):
        runner = MockRunner()
        runner.set_failure("xcode-select -p")
        p = self._provisioner(settings, runner)
        with pytest.raises(PreconditionError, match="xcode-select --install"):
            p.install(Selection.named(["go"]))
        assert "brew install go" not in runner.commands()

    def test_xcode_tools_not_needed_for_uninstall(self, settings):
        runner = MockRunner()
        runner.set_failure("xcode-select -p")
        p = self._provisioner(settings, runner)
        assert p.uninstall(Selection.named(["rust"])).status == "ok"

    def test_skip_checks_skips_xcode_probe(self, settings):
        ctx = ProvisionContext(settings=settings, runner=MockRunner())
        p = Provisioner(build_default_registry(), ctx, check_preconditions=False)
        p.install(Selection.named(["go"]))
        assert "xcode-select -p" not in ctx.runner.commands()

    def test_skip_checks(self, settings):
        settings = settings.model_copy(update={"platform": "linux"})
        ctx = ProvisionContext(settings=settings, runner=MockRunner())
        p = Provisioner(build_default_registry(), ctx, check_preconditions=False)
        assert p.install(Selection.named(["go"])).status == "ok"


# ── Driver: uninstall / verify ───────────────────────────────────────


class TestUninstallRun:
    def test_default_set_in_reverse_order(self, provisioner, mock_runner):
        summary = provisioner.uninstall(Selection.all())

        assert summary.action == "uninstall"
        assert summary.requested == ["vscode", "singbox", "nodejs", "rust", "java"]
        assert mock_runner.commands()[-2:] == ["brew autoremove", "brew cleanup"]

    def test_fixed_component_rejected(self, provisioner, mock_runner):
        with pytest.raises(InvalidSelectionError, match="Cannot uninstall"):
            provisioner.uninstall(Selection.named(["homebrew", "go"]))
        assert mock_runner.call_count == 0

    def test_python_on_request(self, provisioner):
        summary = provisioner.uninstall(Selection.named(["python"]))
        assert summary.requested == ["python"]
        assert summary.rerun_command("python") == "macsetup uninstall python"


class TestVerifyRun:
    def test_verify_selected(self, provisioner, mock_runner):
        mock_runner.set_output("git --version", "git version 2.44.0")
        system = provisioner.verify(Selection.named(["git"]))
        assert [c.name for c in system.components] == ["git"]
        assert system.components[0].details["version"] == "2.44.0"

    def test_verify_all_reports_xcode_tools(self, provisioner, mock_runner):
        mock_runner.set_output("xcode-select -p", "/Library/Developer/CommandLineTools")
        system = provisioner.verify(Selection.all())
        xcode = system.components[0]
        assert xcode.name == "xcode-tools"
        assert xcode.status == "healthy"
        assert xcode.details["path"] == "/Library/Developer/CommandLineTools"
        assert len(system.components) == 11

    def test_verify_all_flags_missing_xcode_tools(self, provisioner, mock_runner):
        mock_runner.set_failure("xcode-select -p")
        system = provisioner.verify(Selection.all())
        assert system.components[0].status == "unhealthy"
        assert "xcode-select --install" in system.components[0].message
        assert system.status == "unhealthy"

    def test_verify_unknown(self, provisioner):
        with pytest.raises(InvalidSelectionError):
            provisioner.verify(Selection.named(["bogus"]))


# ── RunSummary ───────────────────────────────────────────────────────


class TestRunSummary:
    def test_counts(self):
        summary = RunSummary(requested=["a", "b"])
        summary.record(InstallAttempt(component="a", attempts=1))
        summary.record(InstallAttempt(component="b", attempts=3, outcome="failed", error="x"))
        summary.finish()

        assert summary.total == 2
        assert summary.succeeded == ["a"]
        assert summary.failed == ["b"]
        assert not summary.all_ok
        data = summary.to_dict()
        assert data["status"] == "partial"
        assert data["rerun"] == {"b": "macsetup install b"}

    def test_record_after_finish_raises(self):
        summary = RunSummary(requested=["a"]).finish()
        with pytest.raises(SummaryFinishedError):
            summary.record(InstallAttempt(component="a"))

    def test_all_failed(self):
        summary = RunSummary(requested=["a"])
        summary.record(InstallAttempt(component="a", outcome="failed"))
        assert summary.status == "failed"

    def test_empty_is_ok(self):
        assert RunSummary().finish().status == "ok"
