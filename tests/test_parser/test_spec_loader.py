"""Tests for specmount.parser.spec_loader and specmount.parser.dereferencer."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any

import pytest

from conftest import StubDereferencer
from specmount.exceptions import RefResolutionError, SpecNotFoundError
from specmount.parser.dereferencer import RefDereferencer
from specmount.parser.spec_loader import SpecLoader


class TestSpecLoader:
    """Test path resolution and delegation to the dereferencer."""

    @pytest.mark.asyncio
    async def test_relative_path_resolved_against_cwd(
        self, tmp_path: Path, petstore_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        shutil.copy(petstore_path, tmp_path / "openapi.yaml")
        monkeypatch.chdir(tmp_path)
        stub = StubDereferencer(document={"openapi": "3.0.3"})

        await SpecLoader(stub).load("openapi.yaml")

        assert stub.calls == [str(tmp_path / "openapi.yaml")]

    @pytest.mark.asyncio
    async def test_path_like_accepted(self, petstore_path: Path) -> None:
        stub = StubDereferencer(document={"openapi": "3.0.3"})
        await SpecLoader(stub).load(petstore_path)
        assert stub.calls == [str(petstore_path)]

    @pytest.mark.asyncio
    async def test_missing_file_raises_not_found(self, tmp_path: Path) -> None:
        stub = StubDereferencer(document={})
        missing = str(tmp_path / "nope.yaml")

        with pytest.raises(SpecNotFoundError) as exc_info:
            await SpecLoader(stub).load(missing)

        assert exc_info.value.path == missing
        assert missing in str(exc_info.value)
        assert exc_info.value.exit_code == 4
        assert stub.calls == []

    @pytest.mark.asyncio
    async def test_directory_is_not_a_spec(self, tmp_path: Path) -> None:
        with pytest.raises(SpecNotFoundError):
            await SpecLoader(StubDereferencer(document={})).load(str(tmp_path))

    @pytest.mark.asyncio
    async def test_url_passed_through(self) -> None:
        stub = StubDereferencer(document={"openapi": "3.0.3"})
        await SpecLoader(stub).load("https://example.com/openapi.json")
        assert stub.calls == ["https://example.com/openapi.json"]

    @pytest.mark.asyncio
    async def test_in_memory_document_passed_through(self, minimal_doc: dict[str, Any]) -> None:
        stub = StubDereferencer()
        result = await SpecLoader(stub).load(minimal_doc)
        assert stub.calls == [minimal_doc]
        assert result == minimal_doc

    @pytest.mark.asyncio
    async def test_dereferencer_errors_propagate_unchanged(self, minimal_doc: dict[str, Any]) -> None:
        error = RefResolutionError("dangling $ref '#/nowhere'")
        with pytest.raises(RefResolutionError) as exc_info:
            await SpecLoader(StubDereferencer(error=error)).load(minimal_doc)
        assert exc_info.value is error

    def test_defaults_to_ref_dereferencer(self) -> None:
        assert isinstance(SpecLoader().dereferencer, RefDereferencer)


class TestRefDereferencer:
    """Test the default dereferencer end to end."""

    @pytest.mark.asyncio
    async def test_dereferences_file(self, petstore_path: Path) -> None:
        doc = await RefDereferencer().dereference(str(petstore_path))
        items = doc["paths"]["/pets"]["get"]["responses"]["200"]["content"][
            "application/json"
        ]["schema"]["items"]
        assert items["required"] == ["id", "name"]

    @pytest.mark.asyncio
    async def test_dereferences_external_file(self, split_spec_path: Path) -> None:
        doc = await RefDereferencer().dereference(str(split_spec_path))
        schema = doc["paths"]["/orders"]["get"]["responses"]["404"]["content"][
            "application/json"
        ]["schema"]
        assert schema["properties"]["code"] == {"type": "integer"}

    @pytest.mark.asyncio
    async def test_in_memory_document_not_mutated(self) -> None:
        source = {
            "tags": [{"name": "b"}, {"name": "a"}],
            "x": {"$ref": "#/defs/y"},
            "defs": {"y": {"type": "string"}},
        }
        doc = await RefDereferencer().dereference(source)
        assert doc["x"] == {"type": "string"}
        assert source["x"] == {"$ref": "#/defs/y"}
        assert doc["tags"] is not source["tags"]

    @pytest.mark.asyncio
    async def test_broken_ref_raises(self) -> None:
        with pytest.raises(RefResolutionError):
            await RefDereferencer().dereference({"x": {"$ref": "#/defs/missing"}})
