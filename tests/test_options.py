"""Tests for option parsing and fragment accumulation."""

import json

import pytest
from typer.testing import CliRunner

from gomaker.options import DEFAULT_OPTIONS, OPTIONS, BuildFlags, app, interpret, parse_options

runner = CliRunner()

# ---------------------------------------------------------------------------
# parse_options()
# ---------------------------------------------------------------------------


class TestParseOptions:
    def test_splits_in_order(self) -> None:
        assert parse_options("static,commit,lite") == ["static", "commit", "lite"]

    def test_strips_whitespace(self) -> None:
        assert parse_options(" static , lite ") == ["static", "lite"]

    @pytest.mark.parametrize("raw", ["", None, ",", " , "])
    def test_empty_means_none(self, raw: str | None) -> None:
        assert parse_options(raw) == ["none"]

    def test_none_wins(self) -> None:
        assert parse_options("static,none,lite") == ["none"]

    def test_duplicates_keep_first_position(self) -> None:
        assert parse_options("lite,static,lite") == ["lite", "static"]

    def test_unknown_tokens_are_kept(self) -> None:
        assert parse_options("static,bogus") == ["static", "bogus"]

    def test_default_string(self) -> None:
        assert parse_options(DEFAULT_OPTIONS) == ["static", "verbose", "lite", "commit"]


# ---------------------------------------------------------------------------
# interpret()
# ---------------------------------------------------------------------------


class TestInterpret:
    def test_static(self) -> None:
        flags = interpret(["static"])
        assert flags.prelude == ["export CGO_ENABLED=0"]
        assert flags.ldflags == []
        assert flags.buildflags == []

    def test_lite(self) -> None:
        assert interpret(["lite"]).ldflags == ["-s"]

    def test_verbose(self) -> None:
        assert interpret(["verbose"]).buildflags == ["-x"]

    def test_commit(self) -> None:
        flags = interpret(["commit"])
        assert flags.prelude[0].startswith("COMMIT=$(shell git rev-parse")
        assert flags.prelude[1] == "RELEASE=${VERSION}${COMMIT}"
        assert flags.ldflags == ["-X main.version=${RELEASE}"]
        assert flags.has_commit is True

    def test_none_is_empty(self) -> None:
        flags = interpret(["none"])
        assert flags.prelude == []
        assert flags.buildflags == []
        assert flags.ldflags == []
        assert flags.has_commit is False

    def test_order_follows_tokens(self) -> None:
        flags = interpret(["static", "commit", "lite"])
        assert flags.prelude[0] == "export CGO_ENABLED=0"
        assert flags.prelude[-1] == "RELEASE=${VERSION}${COMMIT}"
        assert flags.ldflags == ["-X main.version=${RELEASE}", "-s"]

    def test_reversed_order(self) -> None:
        flags = interpret(["lite", "commit"])
        assert flags.ldflags == ["-s", "-X main.version=${RELEASE}"]

    def test_unknown_warns_and_skips(self, capsys: pytest.CaptureFixture[str]) -> None:
        flags = interpret(["static", "bogus"])
        assert flags.skipped == ["bogus"]
        assert flags.tokens == ["static"]
        assert flags.prelude == ["export CGO_ENABLED=0"]
        err = capsys.readouterr().err
        assert "bogus" in err
        assert "WARNING" in err

    def test_returns_buildflags(self) -> None:
        assert isinstance(interpret([]), BuildFlags)


class TestOptionTable:
    def test_known_tokens(self) -> None:
        assert set(OPTIONS) == {"none", "verbose", "lite", "static", "commit"}

    @pytest.mark.parametrize("name", list(OPTIONS))
    def test_name_matches_key(self, name: str) -> None:
        assert OPTIONS[name].name == name


class TestOptionsCommand:
    def test_table_lists_every_option(self) -> None:
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        for name in OPTIONS:
            assert name in result.stdout

    def test_json(self) -> None:
        result = runner.invoke(app, ["--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [d["name"] for d in data] == list(OPTIONS)
        lite = next(d for d in data if d["name"] == "lite")
        assert lite["ldflags"] == ["-s"]
