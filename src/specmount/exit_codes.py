"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specmount.exceptions.SpecmountError` subclass.
Deployment scripts can inspect the exit code of ``specmount check`` to tell
a missing document from an invalid one without parsing stderr.

Example::

    $ specmount check openapi.yaml
    $ echo $?
    8   # EXIT_SPEC_INVALID -- the document failed meta-schema validation
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_NOT_FOUND = 4
"""The OpenAPI document path does not resolve to an existing file."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be parsed or one of its ``$ref`` pointers could not be resolved."""

EXIT_SPEC_INVALID = 8
"""The OpenAPI document failed meta-schema validation."""

EXIT_SERVER_TEMPLATE_ERROR = 9
"""A ``servers`` entry could not be expanded into base paths."""
