"""Shared test fixtures for specmount.

Provides reusable fixtures for spec documents, stub strategies for the
dereferencer and meta-schema validator, isolated config environments, and
a CLI runner. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

import pytest

from specmount.models import SchemaError, ValidationResult
from specmount.output import reset_output
from specmount.parser.dereferencer import Dereferencer
from specmount.validation import MetaSchemaValidator


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Stub strategies
# ---------------------------------------------------------------------------


class StubDereferencer(Dereferencer):
    """Returns a deep copy of a canned document and records every call."""

    def __init__(self, document: Optional[dict[str, Any]] = None, error: Optional[Exception] = None):
        self.document = document
        self.error = error
        self.calls: list[Any] = []

    async def dereference(self, source: Union[str, Mapping[str, Any]]) -> dict[str, Any]:
        self.calls.append(source)
        if self.error is not None:
            raise self.error
        if self.document is not None:
            return copy.deepcopy(self.document)
        return copy.deepcopy(dict(source))


class StubValidator(MetaSchemaValidator):
    """Reports a fixed list of error messages and records every call."""

    def __init__(self, messages: Optional[list[str]] = None):
        self.messages = messages or []
        self.calls: list[tuple[dict[str, Any], Optional[str]]] = []

    def validate(self, document: dict[str, Any], version: Optional[str]) -> ValidationResult:
        self.calls.append((document, version))
        return ValidationResult(
            errors=[SchemaError(message=m, path=f"/{i}") for i, m in enumerate(self.messages)]
        )


@pytest.fixture
def stub_validator() -> StubValidator:
    """A validator that accepts every document."""
    return StubValidator()


@pytest.fixture
def failing_validator() -> StubValidator:
    """A validator that rejects every document with two errors."""
    return StubValidator(["'info' is a required property", "'paths' is a required property"])


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def minimal_doc() -> dict[str, Any]:
    """The smallest document the OpenAPI 3.0 meta-schema accepts."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Minimal", "version": "1.0.0"},
        "paths": {},
    }


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def split_spec_path() -> Path:
    """Entry document whose schemas live in a sibling ``common.yaml``."""
    return FIXTURES_DIR / "split" / "openapi.yaml"


@pytest.fixture
def invalid_spec_path() -> Path:
    """A 3.0 document missing its required ``info`` object."""
    return FIXTURES_DIR / "invalid.json"


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Clears all SPECMOUNT_* environment variables and changes the working
    directory to tmp_path so that no ``specmount.json`` leaks in.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in ["SPECMOUNT_SPEC", "SPECMOUNT_VALIDATE_SPEC"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
