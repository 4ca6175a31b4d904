"""Meta-schema validation of OpenAPI documents.

Three layers:

* :class:`MetaSchemaValidator` -- the strategy interface. Given a document
  and its declared ``openapi`` version it returns a
  :class:`~specmount.models.ValidationResult` listing every structural
  error, in order.
* :class:`OpenAPISpecValidator` -- the default strategy, backed by
  ``openapi-spec-validator``.
* :class:`DocumentValidator` -- the pass/fail gate used by
  :class:`~specmount.framework.OpenAPIFramework`. It logs each error and
  raises :class:`~specmount.exceptions.SpecInvalidError` carrying the full
  list when the document is invalid.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from openapi_spec_validator import OpenAPIV30SpecValidator, OpenAPIV31SpecValidator

from specmount.exceptions import SpecInvalidError
from specmount.models import SchemaError, ValidationResult

logger = logging.getLogger(__name__)


class MetaSchemaValidator(ABC):
    """Checks a document against the OpenAPI meta-schema for its version."""

    @abstractmethod
    def validate(self, document: dict[str, Any], version: Optional[str]) -> ValidationResult:
        """Validate *document* and return every structural error found.

        Args:
            document: The dereferenced OpenAPI document.
            version: The document's ``openapi`` field, or ``None`` when the
                field is missing.

        Returns:
            A :class:`~specmount.models.ValidationResult`; an empty
            ``errors`` list means the document is valid.
        """
        ...


class OpenAPISpecValidator(MetaSchemaValidator):
    """Default validator using the ``openapi-spec-validator`` package.

    Picks the 3.0 or 3.1 meta-schema from the declared version. A missing or
    unsupported version is reported as a single error rather than raised.
    """

    def validate(self, document: dict[str, Any], version: Optional[str]) -> ValidationResult:
        if version is None:
            return ValidationResult(
                errors=[
                    SchemaError(
                        message="Missing 'openapi' field. Is this an OpenAPI 3.x document?"
                    )
                ]
            )

        version_str = str(version)
        if version_str.startswith("3.1."):
            validator_cls = OpenAPIV31SpecValidator
        elif version_str.startswith("3.0."):
            validator_cls = OpenAPIV30SpecValidator
        else:
            return ValidationResult(
                errors=[
                    SchemaError(
                        message=f"Unsupported OpenAPI version: {version_str}. "
                        "Only OpenAPI 3.0.x and 3.1.x are supported.",
                        path="/openapi",
                    )
                ]
            )

        errors = [_to_schema_error(err) for err in validator_cls(document).iter_errors()]
        return ValidationResult(errors=errors)


def _to_schema_error(err: Any) -> SchemaError:
    """Convert a ``jsonschema``-style validation error into a :class:`SchemaError`."""
    message = getattr(err, "message", None) or str(err)
    segments = getattr(err, "absolute_path", None) or ()
    path = "".join(
        "/" + str(seg).replace("~", "~0").replace("/", "~1") for seg in segments
    )
    return SchemaError(message=message, path=path)


class DocumentValidator:
    """Pass/fail gate over a :class:`MetaSchemaValidator`.

    Args:
        validator: The meta-schema strategy. Defaults to
            :class:`OpenAPISpecValidator`.
        enabled: When ``False``, :meth:`validate` trusts every document
            without calling the strategy.
    """

    def __init__(
        self,
        validator: Optional[MetaSchemaValidator] = None,
        enabled: bool = True,
    ) -> None:
        self._validator = validator or OpenAPISpecValidator()
        self.enabled = enabled

    def validate(self, document: dict[str, Any]) -> None:
        """Validate *document* against the meta-schema for its ``openapi`` version.

        Raises:
            SpecInvalidError: If the strategy reports one or more errors.
        """
        if not self.enabled:
            logger.debug("Spec validation disabled, skipping meta-schema check")
            return

        result = self._validator.validate(document, document.get("openapi"))
        if result.errors:
            logger.error("Validating schema")
            for schema_error in result.errors:
                logger.error("validation error at %s", schema_error)
            raise SpecInvalidError(result.errors)
