"""Initialization orchestration: load, derive base paths, validate, normalize, publish.

:class:`OpenAPIFramework` runs the steps below in a fixed order, once per
:meth:`~OpenAPIFramework.initialize` call:

1. Load and dereference the document (:class:`~specmount.parser.SpecLoader`).
2. Derive base paths from its ``servers``
   (:func:`~specmount.base_path.resolve_base_paths`).
3. Validate it against the OpenAPI meta-schema, unless disabled
   (:class:`~specmount.validation.DocumentValidator`).
4. Sort its tags (:func:`~specmount.tags.normalize_tags`).
5. Hand ``{base_paths, get_api_doc}`` to the visitor, if one was supplied.
6. Return a :class:`FrameworkInit` snapshot.

Any failure aborts the call: the state moves to :attr:`InitState.FAILED`,
the exception propagates unchanged, and neither the visitor nor the caller
sees the document or base paths.

Example::

    class Mount(FrameworkVisitor):
        def visit_api(self, context: VisitorContext) -> None:
            for base_path in context.base_paths:
                router.mount(base_path.express_path, context.get_api_doc())

    framework = OpenAPIFramework({"apiDoc": "openapi.yaml"})
    result = await framework.initialize(Mount())
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from specmount.base_path import BasePath, resolve_base_paths
from specmount.exceptions import ConfigError
from specmount.models import FrameworkArgs
from specmount.parser.dereferencer import Dereferencer
from specmount.parser.spec_loader import SpecLoader
from specmount.tags import normalize_tags
from specmount.validation import DocumentValidator, MetaSchemaValidator

logger = logging.getLogger(__name__)


class InitState(str, enum.Enum):
    """Progress of an :meth:`OpenAPIFramework.initialize` call."""

    IDLE = "idle"
    LOADING = "loading"
    PATHS_COMPUTED = "paths_computed"
    VALIDATING = "validating"
    TAGS_NORMALIZED = "tags_normalized"
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass(frozen=True)
class VisitorContext:
    """What a :class:`FrameworkVisitor` receives.

    ``get_api_doc`` returns the final, tag-normalized document.
    """

    base_paths: list[BasePath]
    get_api_doc: Callable[[], dict[str, Any]]


@dataclass(frozen=True)
class FrameworkInit:
    """Result of a successful :meth:`OpenAPIFramework.initialize` call."""

    api_doc: dict[str, Any]
    base_paths: list[BasePath]


class FrameworkVisitor(ABC):
    """One-shot callback receiving the initialization result.

    Any object with a callable ``visit_api(context)`` attribute is accepted
    by :meth:`OpenAPIFramework.initialize`; subclassing is optional.
    """

    @abstractmethod
    def visit_api(self, context: VisitorContext) -> None:
        """Called exactly once, synchronously, after the document is final."""
        ...


class OpenAPIFramework:
    """Turns an OpenAPI document into published routing metadata.

    Args:
        args: A :class:`~specmount.models.FrameworkArgs`, or a mapping with
            ``apiDoc`` (required) and ``validateApiSpec`` (default ``True``).
        dereferencer: Strategy used to load and resolve ``$ref`` pointers.
            Defaults to :class:`~specmount.parser.RefDereferencer`.
        validator: Meta-schema strategy. Defaults to
            :class:`~specmount.validation.OpenAPISpecValidator`.

    Raises:
        ConfigError: If *args* is a mapping that does not validate.
    """

    def __init__(
        self,
        args: Union[FrameworkArgs, Mapping[str, Any]],
        dereferencer: Optional[Dereferencer] = None,
        validator: Optional[MetaSchemaValidator] = None,
    ) -> None:
        if not isinstance(args, FrameworkArgs):
            try:
                args = FrameworkArgs.model_validate(dict(args))
            except ValidationError as exc:
                raise ConfigError(f"Invalid framework arguments: {exc}") from exc
        self.args = args
        self._loader = SpecLoader(dereferencer)
        self._validator = DocumentValidator(validator, enabled=args.validate_api_spec)
        self._state = InitState.IDLE

    @property
    def state(self) -> InitState:
        """The last state reached by :meth:`initialize`."""
        return self._state

    def _transition(self, state: InitState) -> None:
        logger.debug("initialize: %s -> %s", self._state.value, state.value)
        self._state = state

    async def initialize(self, visitor: Optional[Any] = None) -> FrameworkInit:
        """Load, validate and normalize the document, then publish it.

        Args:
            visitor: Optional object with a ``visit_api(context)`` method,
                invoked once with a :class:`VisitorContext` before this
                coroutine returns.

        Returns:
            The published :class:`FrameworkInit`.

        Raises:
            SpecNotFoundError: If ``api_doc`` is a path with no file behind it.
            RefResolutionError: If the dereferencer cannot resolve a ``$ref``.
            SpecParseError: If the document cannot be parsed.
            ServerTemplateError: If a ``servers`` entry cannot be expanded.
            SpecInvalidError: If validation is enabled and the document is
                structurally invalid.
        """
        self._state = InitState.IDLE
        try:
            self._transition(InitState.LOADING)
            api_doc = await self._loader.load(self.args.api_doc)

            base_paths = resolve_base_paths(api_doc.get("servers"))
            self._transition(InitState.PATHS_COMPUTED)

            if self._validator.enabled:
                self._transition(InitState.VALIDATING)
                self._validator.validate(api_doc)

            normalize_tags(api_doc)
            self._transition(InitState.TAGS_NORMALIZED)

            def get_api_doc() -> dict[str, Any]:
                return api_doc

            visit_api = getattr(visitor, "visit_api", None)
            if callable(visit_api):
                visit_api(VisitorContext(base_paths=base_paths, get_api_doc=get_api_doc))
        except BaseException:
            self._transition(InitState.FAILED)
            raise

        self._transition(InitState.PUBLISHED)
        logger.debug(
            "Published %d base path(s): %s",
            len(base_paths),
            ", ".join(repr(bp.express_path) for bp in base_paths),
        )
        return FrameworkInit(api_doc=api_doc, base_paths=base_paths)
