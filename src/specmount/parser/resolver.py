"""Resolve ``$ref`` JSON Reference pointers in OpenAPI documents.

This module performs a recursive deep-copy traversal of a document, replacing
every ``$ref`` with the object it points to. Two kinds of reference are
supported:

* **Internal** -- ``#/components/schemas/Pet``, resolved against the document
  that contains the reference.
* **External** -- ``common.yaml#/components/schemas/Error`` or
  ``https://example.com/shared.json#/Error``, resolved relative to the
  location of the referencing document. External documents are loaded once
  per resolution run via :func:`~specmount.parser.loader.load_spec`.

Circular references are detected via a ``seen`` set and left unresolved to
prevent infinite recursion: a schema that references itself keeps its
``$ref`` dict at the cycle point.

The single public function is :func:`resolve_refs`.
"""

from __future__ import annotations

import copy
import os
from typing import Any, Callable, Optional
from urllib.parse import unquote, urljoin

from specmount.exceptions import RefResolutionError, SpecParseError
from specmount.parser.loader import is_url, load_spec


def resolve_refs(
    spec: dict[str, Any],
    base_uri: Optional[str] = None,
    loader: Callable[[str], dict[str, Any]] = load_spec,
) -> dict[str, Any]:
    """Resolve all ``$ref`` JSON Reference pointers in the document.

    Creates a deep copy of the input and recursively replaces every ``$ref``
    dict with the object it points to.

    Args:
        spec: The raw OpenAPI document, as returned by
            :func:`~specmount.parser.loader.load_spec`.
        base_uri: Absolute file path or URL the document was loaded from.
            External references are resolved relative to it. ``None`` for
            in-memory documents, which may only use internal references.
        loader: Callable used to fetch external documents.

    Returns:
        A **new** dictionary (deep copy) with all resolvable ``$ref``
        pointers replaced by their target objects.

    Raises:
        RefResolutionError: If a ``$ref`` points to a non-existent location,
            is malformed, is external without a ``base_uri``, or its target
            document cannot be loaded.

    Example::

        raw = load_spec("/srv/api/openapi.yaml")
        resolved = resolve_refs(raw, base_uri="/srv/api/openapi.yaml")
    """
    root = copy.deepcopy(spec)
    documents = _DocumentCache(loader)
    if base_uri is not None:
        documents.add(base_uri, root)
    return _deep_resolve(root, root, base_uri, documents, frozenset())


class _DocumentCache:
    """External documents loaded during one :func:`resolve_refs` run, keyed by location."""

    def __init__(self, loader: Callable[[str], dict[str, Any]]) -> None:
        self._loader = loader
        self._documents: dict[str, dict[str, Any]] = {}

    def add(self, location: str, document: dict[str, Any]) -> None:
        self._documents[location] = document

    def get(self, location: str) -> dict[str, Any]:
        if location not in self._documents:
            try:
                self._documents[location] = self._loader(location)
            except SpecParseError as exc:
                raise RefResolutionError(
                    f"Cannot load external $ref target {location}: {exc}"
                ) from exc
        return self._documents[location]


def _join_location(base_uri: str, location: str) -> str:
    """Resolve an external reference *location* against the referencing document."""
    if is_url(location):
        return location
    if is_url(base_uri):
        return urljoin(base_uri, location)
    return os.path.normpath(os.path.join(os.path.dirname(base_uri), location))


def _resolve_pointer(fragment: str, root: Any, ref: str) -> Any:
    """Resolve a JSON Pointer *fragment* (the part after ``#``) against *root*.

    Handles RFC 6901 escaping (``~0`` for ``~``, ``~1`` for ``/``) and
    percent-encoding of the URI fragment.

    Raises:
        RefResolutionError: If the pointer is malformed or any segment does
            not exist in the document.
    """
    if fragment == "":
        return root
    if not fragment.startswith("/"):
        raise RefResolutionError(
            f"Cannot resolve $ref '{ref}': fragment must be a JSON pointer"
        )

    current: Any = root
    for segment in fragment[1:].split("/"):
        segment = unquote(segment).replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise RefResolutionError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise RefResolutionError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise RefResolutionError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def _deep_resolve(
    obj: Any,
    root: dict[str, Any],
    base_uri: Optional[str],
    documents: _DocumentCache,
    seen: frozenset[str],
) -> Any:
    """Recursively resolve all ``$ref`` pointers within *obj*.

    Walks dicts and lists depth-first. When a dict containing a ``$ref``
    key is found, the reference is resolved and the result is processed in
    turn against the document it came from, since resolved targets may
    themselves contain ``$ref`` pointers.

    ``seen`` holds the absolute ``location#pointer`` keys currently on the
    resolution stack. It is immutable so sibling branches do not interfere
    with each other.
    """
    if isinstance(obj, dict):
        if "$ref" in obj:
            ref = obj["$ref"]
            if not isinstance(ref, str):
                raise RefResolutionError(
                    f"$ref must be a string (got {type(ref).__name__})"
                )

            location, _, fragment = ref.partition("#")
            if location:
                if base_uri is None and not is_url(location):
                    raise RefResolutionError(
                        f"Cannot resolve external $ref '{ref}' "
                        "from an in-memory document"
                    )
                target_uri: Optional[str] = (
                    _join_location(base_uri, location) if base_uri else location
                )
                target_root = documents.get(target_uri)
            else:
                target_uri, target_root = base_uri, root

            key = f"{target_uri or ''}#{fragment}"
            if key in seen:
                # Circular reference
                return obj
            resolved = _resolve_pointer(fragment, target_root, ref)
            return _deep_resolve(
                resolved, target_root, target_uri, documents, seen | {key}
            )

        return {
            key: _deep_resolve(value, root, base_uri, documents, seen)
            for key, value in obj.items()
        }

    if isinstance(obj, list):
        return [_deep_resolve(item, root, base_uri, documents, seen) for item in obj]

    return obj
