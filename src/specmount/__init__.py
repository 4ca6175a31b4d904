"""specmount -- Derive mountable base paths and a resolved document from OpenAPI specs.

This package turns an OpenAPI 3.0/3.1 document into the routing metadata a
request-validation layer needs: the fully ``$ref``-resolved document (with its
tags sorted) plus the ordered list of concrete base paths at which the API may
be mounted, derived from the document's ``servers`` URL templates.

Typical usage::

    from specmount import OpenAPIFramework

    framework = OpenAPIFramework({"apiDoc": "openapi.yaml"})
    result = await framework.initialize()
    for base_path in result.base_paths:
        print(base_path.express_path, base_path.all())

Modules:
    framework: Initialization orchestration and visitor publication.
    base_path: Server URL template expansion into :class:`BasePath` entries.
    validation: Meta-schema validation contract and default validator.
    tags: Deterministic ordering of the document's tag list.
    parser: Loading, parsing, and ``$ref`` dereferencing of documents.
    models: Pydantic models shared across the package.
    config: Precedence-based resolution of framework arguments.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

from specmount.base_path import BasePath, resolve_base_paths
from specmount.framework import (
    FrameworkInit,
    FrameworkVisitor,
    InitState,
    OpenAPIFramework,
    VisitorContext,
)
from specmount.models import FrameworkArgs
from specmount.tags import normalize_tags

__version__ = "0.1.0"

__all__ = [
    "BasePath",
    "FrameworkArgs",
    "FrameworkInit",
    "FrameworkVisitor",
    "InitState",
    "OpenAPIFramework",
    "VisitorContext",
    "normalize_tags",
    "resolve_base_paths",
]
