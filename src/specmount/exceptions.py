"""Exception hierarchy for specmount.

All exceptions inherit from :class:`SpecmountError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specmount.exit_codes`.
The CLI entry point :func:`specmount.app.main` catches ``SpecmountError``
and exits with the appropriate code. Library callers catch the specific
subclass they care about.

Subclass hierarchy::

    SpecmountError          (exit 1)
    +-- ConfigError         (exit 1)
    +-- SpecNotFoundError   (exit 4)
    +-- SpecParseError      (exit 7)
    +-- RefResolutionError  (exit 7)
    +-- SpecInvalidError    (exit 8)
    +-- ServerTemplateError (exit 9)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from specmount.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_SERVER_TEMPLATE_ERROR,
    EXIT_SPEC_INVALID,
    EXIT_SPEC_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
)

if TYPE_CHECKING:
    from specmount.models import SchemaError


class SpecmountError(Exception):
    """Base exception for all specmount errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specmount.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(SpecmountError):
    """Raised for configuration problems (missing ``apiDoc``, invalid JSON, bad env values)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecNotFoundError(SpecmountError):
    """Raised when the supplied document path does not resolve to an existing file.

    Args:
        path: The path exactly as the caller supplied it (before resolution
            against the working directory).
    """

    exit_code = EXIT_SPEC_NOT_FOUND

    def __init__(self, path: str):
        super().__init__(f"Spec could not be read at {path}")
        self.path = path


class SpecParseError(SpecmountError):
    """Raised when a document cannot be read or parsed as JSON/YAML."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class RefResolutionError(SpecmountError):
    """Raised when a ``$ref`` pointer is malformed, dangling, or its target cannot be loaded."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class SpecInvalidError(SpecmountError):
    """Raised when the document fails meta-schema validation.

    Carries every structural error reported by the validator, in order,
    so the caller can diagnose the document without re-running.

    Args:
        errors: The full ordered list of :class:`~specmount.models.SchemaError`.
    """

    exit_code = EXIT_SPEC_INVALID

    def __init__(self, errors: list[SchemaError]):
        count = len(errors)
        noun = "error" if count == 1 else "errors"
        super().__init__(
            f"apiDoc was invalid: {count} validation {noun}. See the output."
        )
        self.errors = list(errors)


class ServerTemplateError(SpecmountError):
    """Raised when a ``servers`` entry cannot be expanded into base paths.

    Covers a placeholder with no matching entry in ``variables``, a variable
    with neither ``enum`` nor ``default``, and malformed server objects.
    """

    exit_code = EXIT_SERVER_TEMPLATE_ERROR
