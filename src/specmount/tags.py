"""Deterministic ordering of an OpenAPI document's ``tags`` list."""

from __future__ import annotations

from typing import Any


def _tag_name(tag: Any) -> str:
    if isinstance(tag, dict):
        name = tag.get("name")
        if isinstance(name, str):
            return name
    return ""


def normalize_tags(document: dict[str, Any]) -> None:
    """Sort ``document["tags"]`` ascending by tag ``name``.

    Names are compared by code point, which matches byte-wise ordering of
    their UTF-8 encoding. Tags without a string name sort first. The sort
    is stable, so tags sharing a name keep their relative order.

    The sorted list replaces ``document["tags"]``; the original list object
    is left as it was. A missing or non-list ``tags`` is left untouched.
    """
    tags = document.get("tags")
    if isinstance(tags, list):
        document["tags"] = sorted(tags, key=_tag_name)
