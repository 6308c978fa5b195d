"""
Tests for the environment check — aggregation, reporting, memoization.
"""

from pathlib import Path

import pytest

from zephir_installer.core.environment.detectors import Platform, PlatformDetector
from zephir_installer.core.environment.orchestrator import (
    EnvironmentCheck,
    EnvironmentReport,
    RequirementStatus,
)
from zephir_installer.core.environment.requirement import Requirement, status_line
from zephir_installer.core.errors import (
    EnvironmentDetectionError,
    PlatformNotImplementedError,
)
from zephir_installer.core.models.settings import InstallerSettings
from tests.fakes import LINUX_TOOLS, FakeRunner, RecordingReporter, make_bin_dir


class StubDetector:
    """Detector double with a fixed requirement list."""

    name = "Stub"

    def __init__(self, requirements: list[Requirement]) -> None:
        self._requirements = requirements

    def requirements(self) -> list[Requirement]:
        return self._requirements


def _factory(requirements: list[Requirement], calls: list | None = None):
    def factory(os_identifier, environ=None, settings=None):
        if calls is not None:
            calls.append(os_identifier)
        return StubDetector(requirements)

    return factory


@pytest.fixture(autouse=True)
def _as_root(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        "zephir_installer.core.environment.remediation.os.geteuid",
        lambda: 0,
        raising=False,
    )


class TestEnvironmentReport:
    def test_ok_when_all_pass(self):
        r = EnvironmentReport("Linux", [RequirementStatus("a", True), RequirementStatus("b", True)])
        assert r.ok is True
        assert r.failed == []

    def test_not_ok_when_any_fails(self):
        r = EnvironmentReport("Linux", [RequirementStatus("a", True), RequirementStatus("b", False)])
        assert r.ok is False
        assert r.failed == ["b"]

    def test_to_dict(self):
        d = EnvironmentReport("Linux", [RequirementStatus("gcc", True)]).to_dict()
        assert d == {
            "platform": "Linux",
            "ok": True,
            "requirements": [{"name": "gcc", "passed": True}],
        }


class TestAggregation:
    def test_all_pass(self, reporter: RecordingReporter, runner: FakeRunner):
        reqs = [Requirement("a", lambda: True), Requirement("b", lambda: True)]
        check = EnvironmentCheck(reporter, runner, detector_factory=_factory(reqs))
        assert check.check_once() is True

    def test_one_failure_fails_all(self, reporter, runner):
        reqs = [Requirement("a", lambda: True), Requirement("b", lambda: False)]
        check = EnvironmentCheck(reporter, runner, detector_factory=_factory(reqs))
        assert check.check_once() is False
        assert check.report.failed == ["b"]

    def test_no_short_circuit(self, reporter, runner):
        evaluated = []

        def detect(name, result):
            def inner():
                evaluated.append(name)
                return result
            return inner

        reqs = [
            Requirement("first", detect("first", False)),
            Requirement("second", detect("second", True)),
            Requirement("third", detect("third", False)),
        ]
        check = EnvironmentCheck(reporter, runner, detector_factory=_factory(reqs))
        assert check.check_once() is False
        assert evaluated == ["first", "second", "third"]
        statuses = [(s.name, s.passed) for s in check.report.requirements]
        assert statuses == [("first", False), ("second", True), ("third", False)]

    def test_remediated_requirement_passes(self, reporter, runner):
        reqs = [Requirement("a", lambda: False).on_error(lambda rep, run: True)]
        check = EnvironmentCheck(reporter, runner, detector_factory=_factory(reqs))
        assert check.check_once() is True

    def test_status_line_per_requirement(self, reporter, runner):
        reqs = [Requirement("gcc", lambda: True), Requirement("make", lambda: False)]
        EnvironmentCheck(reporter, runner, detector_factory=_factory(reqs)).check_once()
        assert reporter.events == [
            ("write", "Checking Stub environment..."),
            ("write", status_line("gcc", "checking...")),
            ("overwrite", status_line("gcc", "OK")),
            ("write", status_line("make", "checking...")),
            ("overwrite", status_line("make", "Fail")),
        ]


class TestMemoization:
    def test_detection_runs_once(self, reporter, runner):
        calls = {"detect": 0}

        def detect():
            calls["detect"] += 1
            return True

        factory_calls: list = []
        check = EnvironmentCheck(
            reporter, runner,
            detector_factory=_factory([Requirement("gcc", detect)], factory_calls),
        )
        assert check.check_once() is True
        assert check.check_once() is True
        assert calls["detect"] == 1
        assert len(factory_calls) == 1

    def test_cached_failure_stays_failure(self, reporter, runner):
        check = EnvironmentCheck(
            reporter, runner,
            detector_factory=_factory([Requirement("gcc", lambda: False)]),
        )
        assert check.check_once() is False
        assert check.check_once() is False

    def test_no_output_on_second_call(self, reporter, runner):
        check = EnvironmentCheck(
            reporter, runner,
            detector_factory=_factory([Requirement("gcc", lambda: True)]),
        )
        check.check_once()
        count = len(reporter.events)
        check.check_once()
        assert len(reporter.events) == count

    def test_report_before_and_after(self, reporter, runner):
        check = EnvironmentCheck(
            reporter, runner,
            detector_factory=_factory([Requirement("gcc", lambda: True)]),
        )
        assert check.checked is False
        assert check.report is None
        check.check_once()
        assert check.checked is True
        assert check.report.platform == "Stub"


class TestDetectionErrors:
    def test_unknown_os_propagates(self, reporter, runner):
        check = EnvironmentCheck(reporter, runner, os_identifier="plan9")
        with pytest.raises(EnvironmentDetectionError, match="plan9"):
            check.check_once()
        assert check.checked is False
        assert reporter.events == []

    def test_darwin_propagates(self, reporter, runner):
        check = EnvironmentCheck(reporter, runner, os_identifier="Darwin", environ={})
        with pytest.raises(PlatformNotImplementedError):
            check.check_once()
        assert check.checked is False


class TestLinuxScenarios:
    def test_full_toolchain(self, tmp_path: Path, reporter, runner):
        bin_dir = make_bin_dir(tmp_path, LINUX_TOOLS)
        check = EnvironmentCheck(
            reporter, runner, os_identifier="Linux", environ={"PATH": str(bin_dir)},
        )
        assert check.check_once() is True
        assert reporter.texts("overwrite") == [status_line(n, "OK") for n in LINUX_TOOLS]
        assert runner.calls == []

    def test_missing_re2c_installed_by_package_manager(self, tmp_path: Path):
        tools = [t for t in LINUX_TOOLS if t != "re2c"] + ["apt-get"]
        bin_dir = make_bin_dir(tmp_path, tools)
        reporter = RecordingReporter(answers=["y"])
        runner = FakeRunner(exit_code=0)
        check = EnvironmentCheck(
            reporter, runner, os_identifier="Linux", environ={"PATH": str(bin_dir)},
        )
        assert check.check_once() is True
        assert runner.commands == ["apt-get install -y re2c"]
        re2c = next(s for s in check.report.requirements if s.name == "re2c")
        assert re2c.passed is True

    def test_missing_re2c_install_fails(self, tmp_path: Path):
        tools = [t for t in LINUX_TOOLS if t != "re2c"] + ["apt-get"]
        bin_dir = make_bin_dir(tmp_path, tools)
        check = EnvironmentCheck(
            RecordingReporter(answers=["y"]), FakeRunner(exit_code=1),
            os_identifier="Linux", environ={"PATH": str(bin_dir)},
        )
        assert check.check_once() is False
        assert check.report.failed == ["re2c"]

    def test_verify_remediation_catches_false_success(self, tmp_path: Path):
        tools = [t for t in LINUX_TOOLS if t != "re2c"] + ["apt-get"]
        bin_dir = make_bin_dir(tmp_path, tools)
        check = EnvironmentCheck(
            RecordingReporter(answers=["y"]), FakeRunner(exit_code=0),
            os_identifier="Linux", environ={"PATH": str(bin_dir)},
            settings=InstallerSettings(verify_remediation=True),
        )
        # The fake runner "succeeds" without creating re2c
        assert check.check_once() is False

    def test_missing_zephir_reports_guidance(self, tmp_path: Path, reporter, runner):
        bin_dir = make_bin_dir(tmp_path, [t for t in LINUX_TOOLS if t != "zephir"])
        check = EnvironmentCheck(
            reporter, runner, os_identifier="Linux", environ={"PATH": str(bin_dir)},
        )
        assert check.check_once() is False
        assert "zephir-lang.com" in reporter.output
        assert runner.calls == []

    def test_empty_path_everything_fails(self, reporter, runner):
        check = EnvironmentCheck(reporter, runner, os_identifier="Linux", environ={})
        assert check.check_once() is False
        assert check.report.failed == LINUX_TOOLS
