"""Canonical Pydantic models shared across all specmount modules.

The models fall into three groups:

**Document models** -- typed views over parts of the OpenAPI document that
the core interprets: :class:`ServerVariable` and :class:`ServerDefinition`.
Everything else in the document is treated as an opaque ``dict``.

**Validation models** -- produced by a
:class:`~specmount.validation.MetaSchemaValidator`: :class:`SchemaError`
and :class:`ValidationResult`.

**Configuration models** -- :class:`FrameworkArgs`, accepted by
:class:`~specmount.framework.OpenAPIFramework` and produced by
:func:`~specmount.config.resolve_framework_args`.

All models use Pydantic v2. Models that mirror OpenAPI objects use
``extra="allow"`` so that ``x-`` extensions and unknown keys are preserved
in ``model_extra``.
"""

from __future__ import annotations

import os
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Document models ---


def _scalar_to_str(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class ServerVariable(BaseModel):
    """An OpenAPI *Server Variable Object*.

    When ``enum`` is a non-empty list, every listed value is a candidate for
    the placeholder; otherwise ``default`` is the only candidate. Unquoted
    YAML scalars (``8443``, ``true``) are read as their string form.
    """

    model_config = ConfigDict(extra="allow")

    default: Optional[str] = None
    enum: Optional[list[str]] = None

    @field_validator("default", mode="before")
    @classmethod
    def _scalar_default(cls, value: Any) -> Any:
        return _scalar_to_str(value)

    @field_validator("enum", mode="before")
    @classmethod
    def _scalar_enum(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_scalar_to_str(item) for item in value]
        return value

    def candidates(self) -> list[str]:
        """Return the ordered candidate values for this variable.

        Returns:
            The ``enum`` values when ``enum`` is non-empty, otherwise a
            single-element list holding ``default``. An empty list means
            the variable cannot be expanded.
        """
        if self.enum:
            return list(self.enum)
        if self.default is not None:
            return [self.default]
        return []


class ServerDefinition(BaseModel):
    """An OpenAPI *Server Object*: a URL template plus its variable declarations.

    ``url`` defaults to ``"/"``, matching the server OpenAPI assumes when a
    document declares none. ``variables`` is kept raw; only the entries a
    path template references are read, through :meth:`variable`.
    """

    model_config = ConfigDict(extra="allow")

    url: str = "/"
    description: Optional[str] = None
    variables: dict[str, Any] = Field(default_factory=dict)

    @field_validator("variables", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def variable(self, name: str) -> Optional[ServerVariable]:
        """Return the declared variable *name*, or ``None`` if undeclared.

        Raises:
            pydantic.ValidationError: If the declaration is malformed.
        """
        if name not in self.variables:
            return None
        return ServerVariable.model_validate(self.variables[name])


# --- Validation models ---


class SchemaError(BaseModel):
    """A single structural error reported by the meta-schema validator."""

    message: str
    path: str = Field(
        default="", description="JSON pointer to the offending node, '' for the root"
    )

    def __str__(self) -> str:
        location = self.path or "/"
        return f"{location}: {self.message}"


class ValidationResult(BaseModel):
    """Outcome of a meta-schema validation run. Empty ``errors`` means valid."""

    errors: list[SchemaError] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


# --- Configuration models ---


class FrameworkArgs(BaseModel):
    """Arguments for :class:`~specmount.framework.OpenAPIFramework`.

    Accepts both the Python field names and the camelCase keys used in
    ``specmount.json`` project files::

        FrameworkArgs(api_doc="openapi.yaml")
        FrameworkArgs.model_validate({"apiDoc": "openapi.yaml", "validateApiSpec": False})

    ``api_doc`` is either a path (relative paths resolve against the current
    working directory), an ``http(s)`` URL, or an in-memory document dict.
    """

    model_config = ConfigDict(populate_by_name=True)

    api_doc: Union[str, dict[str, Any]] = Field(
        alias="apiDoc", description="Path, URL, or in-memory OpenAPI document"
    )
    validate_api_spec: bool = Field(
        default=True,
        alias="validateApiSpec",
        description="Check the document against the OpenAPI meta-schema",
    )

    @field_validator("api_doc", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Any:
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        return value
