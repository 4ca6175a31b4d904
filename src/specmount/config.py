"""Resolve :class:`~specmount.models.FrameworkArgs` from flags, environment, and project file.

Precedence (high to low):

1. Explicit arguments (CLI flags, or keyword arguments from library callers)
2. Environment variables (``SPECMOUNT_SPEC``, ``SPECMOUNT_VALIDATE_SPEC``)
3. Project config (``./specmount.json``, camelCase keys ``apiDoc`` /
   ``validateApiSpec``)
4. Defaults (validation enabled; there is no default document)
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specmount.exceptions import ConfigError
from specmount.models import FrameworkArgs

_PROJECT_CONFIG_FILENAME = "specmount.json"

ENV_SPEC = "SPECMOUNT_SPEC"
ENV_VALIDATE_SPEC = "SPECMOUNT_VALIDATE_SPEC"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specmount.json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _parse_bool(var_name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"Environment variable '{var_name}' must be a boolean (got {value!r})"
    )


def resolve_framework_args(
    api_doc: Optional[str] = None,
    validate_api_spec: Optional[bool] = None,
) -> FrameworkArgs:
    """Resolve framework arguments through the full precedence chain.

    Args:
        api_doc: Explicit document path or URL (highest precedence).
        validate_api_spec: Explicit validation toggle (highest precedence).

    Returns:
        The effective :class:`~specmount.models.FrameworkArgs`.

    Raises:
        ConfigError: If no document is configured anywhere, an environment
            value is malformed, or the project config fails validation.
    """
    merged: dict[str, Any] = {}

    # 3. Project-local config
    project = load_project_config()
    if project is not None:
        merged.update(project)

    # 2. Environment variables
    env_spec = os.environ.get(ENV_SPEC)
    if env_spec:
        merged["apiDoc"] = env_spec
    env_validate = os.environ.get(ENV_VALIDATE_SPEC)
    if env_validate:
        merged["validateApiSpec"] = _parse_bool(ENV_VALIDATE_SPEC, env_validate)

    # 1. Explicit arguments
    if api_doc is not None:
        merged["apiDoc"] = api_doc
    if validate_api_spec is not None:
        merged["validateApiSpec"] = validate_api_spec

    if "apiDoc" not in merged and "api_doc" not in merged:
        raise ConfigError(
            f"No OpenAPI document configured. Pass a spec path, set {ENV_SPEC}, "
            f"or add 'apiDoc' to ./{_PROJECT_CONFIG_FILENAME}"
        )

    try:
        return FrameworkArgs.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid framework arguments: {exc}") from exc
