"""Typer application and CLI entry point for specmount.

Two read-only commands wrap :class:`~specmount.framework.OpenAPIFramework`:

* ``specmount paths [SPEC]`` -- show the base paths the document mounts at.
* ``specmount check [SPEC]`` -- validate the document and list every error.

When SPEC is omitted it is resolved via
:func:`~specmount.config.resolve_framework_args` (``SPECMOUNT_SPEC``, then
``./specmount.json``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import Any, Optional

import typer

from specmount import __version__
from specmount.exceptions import SpecInvalidError, SpecmountError
from specmount.exit_codes import EXIT_GENERIC_FAILURE
from specmount.framework import FrameworkInit, OpenAPIFramework
from specmount.models import FrameworkArgs


app = typer.Typer(
    name="specmount",
    help="Derive mountable base paths from OpenAPI 3.0/3.1 specs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specmount {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~specmount.output.OutputManager` from
    CLI flags and configures logging (DEBUG with ``--verbose``, WARNING
    otherwise).
    """
    from specmount.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _initialize(args: FrameworkArgs) -> FrameworkInit:
    """Run the framework to completion, mapping failures to a clean CLI exit.

    Raises:
        typer.Exit: With the failing error's ``exit_code``.
    """
    from specmount.output import debug, error, print_schema_errors

    debug(f"Initializing from {args.api_doc}")
    try:
        return asyncio.run(OpenAPIFramework(args).initialize())
    except SpecInvalidError as exc:
        print_schema_errors(exc.errors)
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except SpecmountError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _resolve_args(spec: Optional[str], validate: Optional[bool]) -> FrameworkArgs:
    from specmount.config import resolve_framework_args
    from specmount.output import error

    try:
        return resolve_framework_args(api_doc=spec, validate_api_spec=validate)
    except SpecmountError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@app.command("paths")
def paths_command(
    spec: Optional[str] = typer.Argument(
        None, help="Path or URL of the OpenAPI document."
    ),
    no_validate: bool = typer.Option(
        False, "--no-validate", help="Skip meta-schema validation."
    ),
    expand: bool = typer.Option(
        False, "--expand", "-e", help="One row per concrete path."
    ),
) -> None:
    """List the base paths the API can be mounted at.

    Example::

        specmount paths openapi.yaml
        specmount --json paths openapi.yaml --expand
    """
    from specmount.output import print_base_paths

    args = _resolve_args(spec, False if no_validate else None)
    result = _initialize(args)

    info = result.api_doc.get("info")
    title = info.get("title") if isinstance(info, dict) else None
    print_base_paths(
        result.base_paths,
        api_title=title if isinstance(title, str) else "API",
        expand=expand,
    )


@app.command("check")
def check_command(
    spec: Optional[str] = typer.Argument(
        None, help="Path or URL of the OpenAPI document."
    ),
) -> None:
    """Validate the document against the OpenAPI meta-schema.

    Exits with code 8 and lists every error when the document is invalid.

    Example::

        specmount check openapi.yaml
    """
    from specmount.output import success

    args = _resolve_args(spec, True)
    _initialize(args)
    success(f"{args.api_doc} is a valid OpenAPI document.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``specmount`` console script.

    Unhandled :class:`~specmount.exceptions.SpecmountError` instances
    cause a clean exit with the error's ``exit_code``; any other exception
    exits with :data:`~specmount.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specmount.output import error

        if isinstance(exc, SpecmountError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
