"""Locate an OpenAPI document and hand it to a :class:`Dereferencer`."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from specmount.exceptions import SpecNotFoundError
from specmount.parser.dereferencer import Dereferencer, RefDereferencer
from specmount.parser.loader import is_url

logger = logging.getLogger(__name__)


class SpecLoader:
    """Load a document from a path, URL, or in-memory mapping, fully dereferenced.

    Relative paths are resolved against the current working directory at
    call time. A path that does not point at an existing file fails
    immediately with :class:`~specmount.exceptions.SpecNotFoundError`;
    everything else is delegated to the dereferencer, whose errors propagate
    unchanged.

    Args:
        dereferencer: Strategy used to load and dereference the document.
            Defaults to :class:`~specmount.parser.dereferencer.RefDereferencer`.
    """

    def __init__(self, dereferencer: Optional[Dereferencer] = None) -> None:
        self._dereferencer = dereferencer or RefDereferencer()

    @property
    def dereferencer(self) -> Dereferencer:
        return self._dereferencer

    async def load(
        self, api_doc: Union[str, os.PathLike[str], Mapping[str, Any]]
    ) -> dict[str, Any]:
        """Load and dereference *api_doc*.

        Raises:
            SpecNotFoundError: If *api_doc* is a path and no file exists there.
        """
        if isinstance(api_doc, os.PathLike):
            api_doc = os.fspath(api_doc)

        if isinstance(api_doc, str):
            if is_url(api_doc):
                return await self._dereferencer.dereference(api_doc)
            absolute_path = Path(os.path.abspath(Path.cwd() / api_doc))
            if not absolute_path.is_file():
                raise SpecNotFoundError(api_doc)
            logger.debug("Resolved spec path %s to %s", api_doc, absolute_path)
            return await self._dereferencer.dereference(str(absolute_path))

        return await self._dereferencer.dereference(api_doc)
