"""doctor.py – Diagnostic command for a Go project and its toolchain.

Checks everything ``gomaker generate`` and the generated Makefile rely on:
the project directory, Go sources, the ``main`` package, ``gomaker.toml``,
the ``go`` toolchain and ``git`` (used by the ``commit`` option).  Prints a
checklist with actionable fix suggestions.

Usage::

    gomaker doctor
    gomaker doctor ./cmd/tool
    gomaker doctor --json
"""

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer

from gomaker.cli import ProjectDirArgument, json_print
from gomaker.config import CONFIG_NAME, ConfigError, GomakerConfig, load_config
from gomaker.options import OPTIONS, parse_options
from gomaker.project import ProjectError, go_files, inspect_project, resolve_project_dir

# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------

_PASS = "pass"
_FAIL = "fail"
_WARN = "warn"


@dataclass
class CheckResult:
    """One line of the doctor checklist.

    A ``fail`` means ``gomaker generate`` (or ``make`` on its output) will
    not work until *fix* is applied; a ``warn`` only degrades the build,
    e.g. an unknown option that ``generate`` skips.
    """

    name: str
    status: str
    message: str
    fix: str = ""

    def to_dict(self) -> dict[str, str]:
        d = {"name": self.name, "status": self.status, "message": self.message}
        if self.fix:
            d["fix"] = self.fix
        return d


@dataclass
class DoctorReport:
    """Checklist for one Go project directory, in the order checks ran."""

    directory: str = ""
    checks: list[CheckResult] = field(default_factory=list)

    @property
    def blockers(self) -> list[str]:
        """Names of the checks that stop a Makefile from being generated."""
        return [c.name for c in self.checks if c.status == _FAIL]

    @property
    def passed(self) -> bool:
        return not self.blockers

    def _count(self, status: str) -> int:
        return sum(c.status == status for c in self.checks)

    @property
    def pass_count(self) -> int:
        return self._count(_PASS)

    @property
    def fail_count(self) -> int:
        return self._count(_FAIL)

    @property
    def warn_count(self) -> int:
        return self._count(_WARN)

    def to_dict(self) -> dict[str, Any]:
        return {
            "directory": self.directory,
            "passed": self.passed,
            "blockers": self.blockers,
            "summary": {status: self._count(status) for status in (_PASS, _FAIL, _WARN)},
            "checks": [c.to_dict() for c in self.checks],
        }


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_directory(arg: str) -> tuple[CheckResult, Path | None]:
    """Check that the project directory exists."""
    try:
        root = resolve_project_dir(arg)
    except ProjectError as e:
        return (
            CheckResult(
                name="Directory",
                status=_FAIL,
                message=str(e),
                fix="Pass the path of a Go main package, or cd into one and use '.'.",
            ),
            None,
        )
    return CheckResult(name="Directory", status=_PASS, message=str(root)), root


def check_go_sources(root: Path) -> CheckResult:
    """Check that the directory holds Go sources in package main."""
    files = go_files(root)
    if not files:
        return CheckResult(
            name="Go sources",
            status=_FAIL,
            message=f"No .go files in {root}",
            fix="Run gomaker in the directory that holds your main package.",
        )
    try:
        project = inspect_project(root)
    except ProjectError as e:
        return CheckResult(
            name="Go sources",
            status=_FAIL,
            message=str(e),
            fix="Only 'package main' directories produce a binary; point gomaker at one.",
        )
    return CheckResult(
        name="Go sources",
        status=_PASS,
        message=f"{len(project.go_files)} file(s), package {project.package}, binary '{project.name}'",
    )


def check_config(root: Path) -> tuple[CheckResult, GomakerConfig | None]:
    """Check that gomaker.toml, if present, parses and uses known options."""
    try:
        cfg = load_config(root)
    except ConfigError as e:
        return (
            CheckResult(
                name=CONFIG_NAME,
                status=_FAIL,
                message=str(e),
                fix=f"Fix {CONFIG_NAME} or regenerate it with 'gomaker init --force'.",
            ),
            None,
        )
    if cfg.source is None:
        return (
            CheckResult(name=CONFIG_NAME, status=_PASS, message="Not present (using defaults)"),
            cfg,
        )
    unknown = [t for t in parse_options(cfg.options) if t not in OPTIONS]
    if unknown:
        return (
            CheckResult(
                name=CONFIG_NAME,
                status=_WARN,
                message=f"Unknown option(s): {', '.join(unknown)}",
                fix=f"Known options: {', '.join(OPTIONS)}",
            ),
            cfg,
        )
    return CheckResult(name=CONFIG_NAME, status=_PASS, message=f"options={cfg.options}"), cfg


def check_go_toolchain() -> CheckResult:
    """Check that ``go`` is on PATH and reports a version."""
    go = shutil.which("go")
    if go is None:
        return CheckResult(
            name="Go toolchain",
            status=_FAIL,
            message="'go' not found in PATH",
            fix="Install Go from https://go.dev/dl/ and make sure 'go' is on PATH.",
        )
    try:
        proc = subprocess.run([go, "version"], capture_output=True, text=True, timeout=30)
    except subprocess.TimeoutExpired:
        return CheckResult(
            name="Go toolchain",
            status=_WARN,
            message=f"{go} (timed out on 'go version')",
        )
    except OSError as e:
        return CheckResult(
            name="Go toolchain",
            status=_FAIL,
            message=f"Failed to run {go}: {e}",
            fix="Check the Go installation.",
        )
    if proc.returncode != 0:
        return CheckResult(
            name="Go toolchain",
            status=_FAIL,
            message=f"'go version' exited {proc.returncode}: {proc.stderr.strip()}",
            fix="Check the Go installation.",
        )
    return CheckResult(name="Go toolchain", status=_PASS, message=proc.stdout.strip())


def check_git(cfg: GomakerConfig | None) -> CheckResult:
    """Check that ``git`` is available when the commit option is in use."""
    uses_commit = cfg is not None and "commit" in parse_options(cfg.options)
    if shutil.which("git") is not None:
        return CheckResult(name="git", status=_PASS, message="Found in PATH")
    if uses_commit:
        return CheckResult(
            name="git",
            status=_WARN,
            message="Not found; the 'commit' option calls 'git rev-parse'",
            fix="Install git, or drop 'commit' from the options.",
        )
    return CheckResult(name="git", status=_PASS, message="Not found (not needed)")


# ---------------------------------------------------------------------------
# Main diagnostic runner
# ---------------------------------------------------------------------------


def run_doctor(directory: str = ".") -> DoctorReport:
    """Run all diagnostic checks and return a report."""
    report = DoctorReport(directory=directory)

    dir_result, root = check_directory(directory)
    report.checks.append(dir_result)
    if root is None:
        return report
    report.directory = str(root)

    report.checks.append(check_go_sources(root))

    config_result, cfg = check_config(root)
    report.checks.append(config_result)

    report.checks.append(check_go_toolchain())
    report.checks.append(check_git(cfg))

    return report


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

_EPILOG = """\
[bold]Example:[/bold]

gomaker doctor                   Check the current directory

gomaker doctor ./cmd/tool        Check another package

gomaker doctor --json            Machine-readable output

[dim]Validates: directory, Go sources and package, gomaker.toml, go toolchain and git.[/dim]"""

_STATUS_ICONS = {
    _PASS: "✅",
    _FAIL: "❌",
    _WARN: "⚠️",
}

app = typer.Typer(
    help="Diagnostic checks for a Go project and toolchain.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


@app.callback(invoke_without_command=True)
def main(
    directory: str = ProjectDirArgument,
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """Run diagnostic checks on a Go project directory."""
    report = run_doctor(directory)

    if json_output:
        json_print(report.to_dict())
    else:
        print(f"\nGomaker Doctor — {report.directory}")
        print("=" * 60)

        for check in report.checks:
            icon = _STATUS_ICONS.get(check.status, "?")
            print(f"  {icon}  {check.name}: {check.message}")
            if check.fix:
                print(f"       Fix: {check.fix}")

        print("=" * 60)
        parts = []
        if report.pass_count:
            parts.append(f"{report.pass_count} passed")
        if report.fail_count:
            parts.append(f"{report.fail_count} failed")
        if report.warn_count:
            parts.append(f"{report.warn_count} warnings")
        print(f"  {', '.join(parts)}")

        if report.passed:
            print("\n  Ready to generate a Makefile.\n")
        else:
            print(f"\n  Blocked by: {', '.join(report.blockers)}. Fix them and re-run.\n")

    if not report.passed:
        raise typer.Exit(code=1)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
