"""Tests for gomaker doctor diagnostic command."""

import json
import subprocess
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from typer.testing import CliRunner

from gomaker.doctor import (
    _FAIL,
    _PASS,
    _WARN,
    CheckResult,
    DoctorReport,
    app,
    check_config,
    check_directory,
    check_git,
    check_go_sources,
    check_go_toolchain,
    run_doctor,
)

runner = CliRunner()


def _make_go_project(tmp_path: Path, package: str = "main") -> Path:
    (tmp_path / "main.go").write_text(f"package {package}\n", encoding="utf-8")
    return tmp_path


def _fake_go(monkeypatch: pytest.MonkeyPatch, *, go: bool = True, git: bool = True) -> None:
    found = {"go": "/usr/bin/go" if go else None, "git": "/usr/bin/git" if git else None}
    monkeypatch.setattr("gomaker.doctor.shutil.which", lambda name: found.get(name))

    def fake_run(cmd: list[str], **kwargs: Any) -> SimpleNamespace:
        return SimpleNamespace(returncode=0, stdout="go version go1.22.0 linux/amd64\n", stderr="")

    monkeypatch.setattr("gomaker.doctor.subprocess.run", fake_run)


class TestCheckResult:
    def test_to_dict_minimal(self) -> None:
        d = CheckResult(name="test", status=_PASS, message="ok").to_dict()
        assert d == {"name": "test", "status": _PASS, "message": "ok"}

    def test_to_dict_with_fix(self) -> None:
        d = CheckResult(name="test", status=_FAIL, message="bad", fix="do X").to_dict()
        assert d["fix"] == "do X"


class TestDoctorReport:
    def test_empty_report_passes(self) -> None:
        r = DoctorReport()
        assert r.passed is True
        assert r.pass_count == 0

    def test_one_fail(self) -> None:
        r = DoctorReport(
            checks=[
                CheckResult(name="a", status=_PASS, message="ok"),
                CheckResult(name="b", status=_FAIL, message="bad"),
            ]
        )
        assert r.passed is False
        assert r.fail_count == 1
        assert r.blockers == ["b"]

    def test_warn_still_passes(self) -> None:
        r = DoctorReport(checks=[CheckResult(name="a", status=_WARN, message="hmm")])
        assert r.passed is True
        assert r.warn_count == 1

    def test_to_dict(self) -> None:
        r = DoctorReport(directory="/x", checks=[CheckResult(name="a", status=_PASS, message="ok")])
        d = r.to_dict()
        assert d["directory"] == "/x"
        assert d["summary"]["pass"] == 1
        assert d["blockers"] == []


class TestChecks:
    def test_directory_missing(self, tmp_path: Path) -> None:
        result, root = check_directory(str(tmp_path / "nope"))
        assert result.status == _FAIL
        assert root is None

    def test_directory_ok(self, tmp_path: Path) -> None:
        result, root = check_directory(str(tmp_path))
        assert result.status == _PASS
        assert root == tmp_path.resolve()

    def test_go_sources_main(self, tmp_path: Path) -> None:
        assert check_go_sources(_make_go_project(tmp_path)).status == _PASS

    def test_go_sources_missing(self, tmp_path: Path) -> None:
        assert check_go_sources(tmp_path).status == _FAIL

    def test_go_sources_library(self, tmp_path: Path) -> None:
        result = check_go_sources(_make_go_project(tmp_path, package="lib"))
        assert result.status == _FAIL
        assert "main" in result.fix

    def test_config_absent(self, tmp_path: Path) -> None:
        result, cfg = check_config(tmp_path)
        assert result.status == _PASS
        assert cfg is not None

    def test_config_invalid(self, tmp_path: Path) -> None:
        (tmp_path / "gomaker.toml").write_text("[makefile\n")
        result, cfg = check_config(tmp_path)
        assert result.status == _FAIL
        assert cfg is None

    def test_config_not_utf8(self, tmp_path: Path) -> None:
        (tmp_path / "gomaker.toml").write_bytes(b"[makefile]\nversion = \"\xfe\"\n")
        result, cfg = check_config(tmp_path)
        assert result.status == _FAIL
        assert cfg is None

    def test_config_unknown_option(self, tmp_path: Path) -> None:
        (tmp_path / "gomaker.toml").write_text('[makefile]\noptions = "static,turbo"\n')
        result, _ = check_config(tmp_path)
        assert result.status == _WARN
        assert "turbo" in result.message

    def test_go_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _fake_go(monkeypatch, go=False)
        assert check_go_toolchain().status == _FAIL

    def test_go_version(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _fake_go(monkeypatch)
        result = check_go_toolchain()
        assert result.status == _PASS
        assert "go1.22.0" in result.message

    def test_go_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _fake_go(monkeypatch)

        def slow(cmd: list[str], **kwargs: Any) -> None:
            raise subprocess.TimeoutExpired(cmd, 30)

        monkeypatch.setattr("gomaker.doctor.subprocess.run", slow)
        assert check_go_toolchain().status == _WARN

    def test_git_missing_with_commit(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _fake_go(monkeypatch, git=False)
        _, cfg = check_config(tmp_path)
        assert check_git(cfg).status == _WARN

    def test_git_missing_without_commit(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _fake_go(monkeypatch, git=False)
        (tmp_path / "gomaker.toml").write_text('[makefile]\noptions = "lite"\n')
        _, cfg = check_config(tmp_path)
        assert check_git(cfg).status == _PASS


class TestRunDoctor:
    def test_healthy(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _fake_go(monkeypatch)
        report = run_doctor(str(_make_go_project(tmp_path)))
        assert report.passed
        assert [c.name for c in report.checks] == [
            "Directory",
            "Go sources",
            "gomaker.toml",
            "Go toolchain",
            "git",
        ]

    def test_stops_at_missing_directory(self, tmp_path: Path) -> None:
        report = run_doctor(str(tmp_path / "nope"))
        assert not report.passed
        assert len(report.checks) == 1


class TestDoctorCommand:
    def test_exit_zero_when_healthy(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _fake_go(monkeypatch)
        result = runner.invoke(app, [str(_make_go_project(tmp_path))])
        assert result.exit_code == 0, result.output
        assert "Ready to generate" in result.output

    def test_exit_one_on_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _fake_go(monkeypatch, go=False)
        result = runner.invoke(app, [str(_make_go_project(tmp_path))])
        assert result.exit_code == 1
        assert "Blocked by: Go toolchain" in result.output

    def test_json(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _fake_go(monkeypatch)
        result = runner.invoke(app, ["--json", str(_make_go_project(tmp_path))])
        data = json.loads(result.stdout)
        assert data["passed"] is True
        assert data["summary"]["fail"] == 0
