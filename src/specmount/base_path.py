"""Expand OpenAPI server URL templates into mountable base paths.

Each entry of a document's ``servers`` array describes a deployment root such
as ``https://api.example.com/{version}/api``. Request routing only cares
about the path portion, in two forms:

* an **express path** -- the template with every ``{name}`` placeholder
  rewritten as ``:name``. It depends only on the template's shape, never on
  variable values, so it is a cheap key for structural route matching;
* the **concrete paths** -- every literal path the template can produce,
  obtained by substituting each placeholder's candidate values (its ``enum``,
  or else its ``default``) in Cartesian product.

:func:`resolve_base_paths` builds one :class:`BasePath` per distinct express
path, keeping the first server seen for each.
"""

from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Sequence
from typing import Any, Optional

from pydantic import ValidationError

from specmount.exceptions import ServerTemplateError
from specmount.models import ServerDefinition

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def url_path(url: str) -> str:
    """Return the path portion of a server *url*, without a trailing slash.

    Scheme and host are stripped when present, as are query string and
    fragment. The root path normalises to ``""`` so that ``""``, ``"/"``
    and ``"https://example.com"`` all mount at the root.

    Example::

        url_path("https://api.example.com/v1/")   # "/v1"
        url_path("/{version}/api")                 # "/{version}/api"
    """
    path = url
    if "://" in path:
        path = path.split("://", 1)[1]
        slash = path.find("/")
        path = "" if slash == -1 else path[slash:]
    elif path.startswith("//"):
        slash = path.find("/", 2)
        path = "" if slash == -1 else path[slash:]

    for marker in ("?", "#"):
        path = path.split(marker, 1)[0]

    if path and not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/")


class BasePath:
    """A route-mount prefix derived from one server definition.

    Immutable once constructed. Two instances compare equal when they have
    the same template, express path and concrete paths.

    Args:
        server: The server definition to expand.

    Raises:
        ServerTemplateError: If the path template references a variable
            missing from ``server.variables``, or a variable that has
            neither ``enum`` nor ``default``.
    """

    __slots__ = ("_template", "_express_path", "_paths")

    def __init__(self, server: ServerDefinition) -> None:
        self._template = url_path(server.url)
        # Literal colons would read as route params in the express form.
        escaped = self._template.replace(":", "\\:")
        self._express_path = _PLACEHOLDER.sub(lambda m: f":{m.group(1)}", escaped)
        self._paths = self._expand(server)

    @classmethod
    def root(cls) -> BasePath:
        """The base path used when a document declares no servers."""
        return cls(ServerDefinition(url=""))

    @property
    def template(self) -> str:
        return self._template

    @property
    def express_path(self) -> str:
        return self._express_path

    def all(self) -> list[str]:
        """Every concrete literal path this server can resolve to, in order."""
        return list(self._paths)

    def _expand(self, server: ServerDefinition) -> tuple[str, ...]:
        names = list(dict.fromkeys(_PLACEHOLDER.findall(self._template)))
        if not names:
            return (self._template,)

        candidate_sets: list[list[str]] = []
        for name in names:
            try:
                variable = server.variable(name)
            except ValidationError as exc:
                raise ServerTemplateError(
                    f"Invalid server variable '{name}' in '{server.url}': {exc}"
                ) from exc
            if variable is None:
                raise ServerTemplateError(
                    f"Server url '{server.url}' references variable '{name}' "
                    "which is not declared in 'variables'"
                )
            candidates = variable.candidates()
            if not candidates:
                raise ServerTemplateError(
                    f"Server variable '{name}' in '{server.url}' "
                    "has neither 'enum' nor 'default'"
                )
            candidate_sets.append(candidates)

        paths: dict[str, None] = {}
        for combination in itertools.product(*candidate_sets):
            values = dict(zip(names, combination))
            paths[_PLACEHOLDER.sub(lambda m: values[m.group(1)], self._template)] = None
        return tuple(paths)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BasePath):
            return NotImplemented
        return (self._template, self._express_path, self._paths) == (
            other._template,
            other._express_path,
            other._paths,
        )

    def __hash__(self) -> int:
        return hash((self._template, self._express_path, self._paths))

    def __repr__(self) -> str:
        return (
            f"BasePath(template={self._template!r}, "
            f"express_path={self._express_path!r}, all={list(self._paths)!r})"
        )


def resolve_base_paths(servers: Optional[Sequence[Any]]) -> list[BasePath]:
    """Build the ordered, de-duplicated base paths for a ``servers`` array.

    With no servers, returns a single root :class:`BasePath`. Otherwise one
    entry per distinct express path is kept; when several servers share an
    express path the first one wins and its concrete paths are not merged
    with the others'.

    Args:
        servers: The document's ``servers`` value (raw dicts or
            :class:`~specmount.models.ServerDefinition` instances).

    Returns:
        Base paths in first-seen order.

    Raises:
        ServerTemplateError: If ``servers`` is not a list, an entry is not
            a valid server object, or a template cannot be expanded.
    """
    if not servers:
        return [BasePath.root()]
    if isinstance(servers, (str, bytes)) or not isinstance(servers, Sequence):
        raise ServerTemplateError(
            f"'servers' must be a list (got {type(servers).__name__})"
        )

    by_express_path: dict[str, BasePath] = {}
    for index, raw in enumerate(servers):
        try:
            server = (
                raw if isinstance(raw, ServerDefinition) else ServerDefinition.model_validate(raw)
            )
        except ValidationError as exc:
            raise ServerTemplateError(f"Invalid server at servers[{index}]: {exc}") from exc

        base_path = BasePath(server)
        if base_path.express_path in by_express_path:
            logger.debug(
                "Dropping servers[%d] (%s): express path %r already mounted",
                index,
                server.url,
                base_path.express_path,
            )
            continue
        by_express_path[base_path.express_path] = base_path

    return list(by_express_path.values())
