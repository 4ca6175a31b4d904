"""Dereferencer strategy: load a document and replace every ``$ref`` with its target.

:class:`Dereferencer` is the injection seam used by
:class:`~specmount.parser.spec_loader.SpecLoader`. Callers who already have
a reference-resolution library can wrap it in a subclass; everyone else gets
:class:`RefDereferencer`, built on :mod:`specmount.parser.loader` and
:mod:`specmount.parser.resolver`.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Union

from specmount.parser.loader import load_spec
from specmount.parser.resolver import resolve_refs

logger = logging.getLogger(__name__)


class Dereferencer(ABC):
    """Turns a document source into a fully dereferenced document.

    Implementations must not return a document that still contains
    resolvable ``$ref`` pointers, and should raise
    :class:`~specmount.exceptions.RefResolutionError` for broken ones.
    """

    @abstractmethod
    async def dereference(
        self, source: Union[str, Mapping[str, Any]]
    ) -> dict[str, Any]:
        """Load (if *source* is a path or URL) and dereference a document.

        Args:
            source: An absolute file path, an ``http(s)`` URL, or an
                in-memory document.

        Returns:
            The dereferenced document.
        """
        ...


class RefDereferencer(Dereferencer):
    """Default dereferencer backed by :func:`~specmount.parser.resolver.resolve_refs`.

    File and network I/O is blocking, so the work runs in a worker thread
    via :func:`asyncio.to_thread` to keep the event loop free. The returned
    document is always a fresh deep copy; in-memory inputs are never
    mutated.
    """

    async def dereference(
        self, source: Union[str, Mapping[str, Any]]
    ) -> dict[str, Any]:
        return await asyncio.to_thread(self._dereference, source)

    def _dereference(self, source: Union[str, Mapping[str, Any]]) -> dict[str, Any]:
        if isinstance(source, str):
            logger.debug("Loading spec from %s", source)
            return resolve_refs(load_spec(source), base_uri=source)
        return resolve_refs(dict(source))
