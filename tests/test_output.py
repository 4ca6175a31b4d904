"""Tests for specmount.output -- report rendering and stream discipline."""

from __future__ import annotations

import json

import pytest

from specmount.base_path import BasePath, resolve_base_paths
from specmount.models import SchemaError
from specmount.output import (
    OutputFormat,
    OutputManager,
    get_output,
    print_base_paths,
    reset_output,
    set_output,
)


@pytest.fixture
def base_paths() -> list[BasePath]:
    return resolve_base_paths(
        [
            {"url": "/{v}/api", "variables": {"v": {"default": "v1", "enum": ["v1", "v2"]}}},
            {"url": "https://example.com"},
        ]
    )


# ---------------------------------------------------------------------------
# Format resolution
# ---------------------------------------------------------------------------


class TestFormatResolution:
    def test_auto_is_plain_when_piped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        # pytest captures stdout, so it is never a TTY here
        assert OutputManager().format == OutputFormat.PLAIN

    def test_explicit_format_kept(self) -> None:
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON

    def test_no_color_env_strips_styling(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        OutputManager().error("boom")
        assert capsys.readouterr().err == "Error: boom\n"


# ---------------------------------------------------------------------------
# Base-path reports
# ---------------------------------------------------------------------------


class TestBasePathReport:
    def test_plain_summary(
        self, base_paths: list[BasePath], capsys: pytest.CaptureFixture[str]
    ) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_base_paths(base_paths)
        assert capsys.readouterr().out.splitlines() == [
            "Template\tExpress Path\tPaths",
            "/{v}/api\t/:v/api\t/v1/api, /v2/api",
            "/\t/\t/",
        ]

    def test_json_expanded(
        self, base_paths: list[BasePath], capsys: pytest.CaptureFixture[str]
    ) -> None:
        OutputManager(format=OutputFormat.JSON).print_base_paths(base_paths, expand=True)
        assert json.loads(capsys.readouterr().out) == [
            {"Express Path": "/:v/api", "Path": "/v1/api"},
            {"Express Path": "/:v/api", "Path": "/v2/api"},
            {"Express Path": "/", "Path": "/"},
        ]

    def test_rich_title_carries_api_name(
        self, base_paths: list[BasePath], capsys: pytest.CaptureFixture[str]
    ) -> None:
        OutputManager(format=OutputFormat.RICH, no_color=True).print_base_paths(
            base_paths, api_title="Petstore"
        )
        assert "Petstore -- Base paths (2)" in capsys.readouterr().out

    def test_module_helper_uses_installed_manager(
        self, base_paths: list[BasePath], capsys: pytest.CaptureFixture[str]
    ) -> None:
        set_output(OutputManager(format=OutputFormat.JSON))
        print_base_paths(base_paths[1:])
        assert json.loads(capsys.readouterr().out) == [
            {"Template": "/", "Express Path": "/", "Paths": "/"}
        ]


# ---------------------------------------------------------------------------
# Schema-error reports
# ---------------------------------------------------------------------------


class TestSchemaErrorReport:
    def test_plain_rows(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_schema_errors(
            [
                SchemaError(message="'info' is a required property"),
                SchemaError(message="bad type", path="/paths/~1pets"),
            ]
        )
        assert capsys.readouterr().out.splitlines() == [
            "Path\tMessage",
            "/\t'info' is a required property",
            "/paths/~1pets\tbad type",
        ]


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


class TestDiagnostics:
    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).error("boom")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: boom" in captured.err

    def test_quiet_drops_success_keeps_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        output = OutputManager(no_color=True, quiet=True)
        output.success("hidden")
        output.error("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "Error: shown" in err

    def test_debug_only_when_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).debug("quiet")
        OutputManager(no_color=True, verbose=True).debug("loud")
        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "[debug] loud" in err


class TestGlobalInstance:
    def test_lazy_default(self) -> None:
        assert isinstance(get_output(), OutputManager)

    def test_set_and_reset(self) -> None:
        custom = OutputManager(format=OutputFormat.JSON)
        set_output(custom)
        assert get_output() is custom
        reset_output()
        assert get_output() is not custom
