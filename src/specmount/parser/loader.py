"""Read OpenAPI documents from a local file or a URL.

This module handles the raw I/O for fetching a document and converting it
into a Python dictionary. Both JSON and YAML are supported with automatic
format detection.

The public functions are:

* :func:`load_spec` -- Load and parse a document from a file path or URL.
* :func:`is_url` -- Tell an ``http(s)`` URL apart from a file path.

``$ref`` pointers are left untouched here; the raw dict is handed to
:func:`~specmount.parser.resolver.resolve_refs` afterwards.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import yaml

from specmount.exceptions import SpecParseError


def is_url(source: str) -> bool:
    """Return ``True`` if *source* is an ``http://`` or ``https://`` URL."""
    return source.startswith(("http://", "https://"))


def load_spec(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from a URL or file path.

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https) or file path.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if is_url(source):
        return _load_from_url(source)
    return _load_from_file(source)


def _format_hint(name: str) -> str:
    """Guess ``"json"`` or ``"yaml"`` from a file suffix or a content type."""
    lowered = name.lower()
    if "json" in lowered:
        return "json"
    if "yaml" in lowered or "yml" in lowered:
        return "yaml"
    return ""


def _load_from_url(url: str) -> dict[str, Any]:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    hint = _format_hint(response.headers.get("content-type", ""))
    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Read and parse a local file; the suffix, if known, picks the parser.

    A missing file surfaces as a read failure. Callers that need to tell
    "not there" apart check first, as
    :class:`~specmount.parser.spec_loader.SpecLoader` does.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")
    return _parse_content(content, hint=_format_hint(Path(path).suffix))


def _as_document(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        kind = "empty document" if value is None else type(value).__name__
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return value


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as a JSON or YAML mapping.

    JSON is tried first unless *hint* says ``"yaml"``; a ``"json"`` hint
    makes a JSON syntax error final. Otherwise YAML gets the last word,
    since every JSON document is also YAML.

    Raises:
        SpecParseError: If neither parser accepts the content, or the
            result is not a mapping.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _as_document(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _as_document(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError("\n  ".join(["Failed to parse spec as JSON or YAML", *errors]))
