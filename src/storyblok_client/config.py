"""Configuration loading with precedence resolution.

This module turns the scattered sources of client settings into one
validated :class:`~storyblok_client.models.ClientConfig`:

* **Project-local config** -- an optional ``./storyblok.json`` file in the
  current working directory. See :func:`load_project_config`.
* **Environment variables** -- ``STORYBLOK_TOKEN``,
  ``STORYBLOK_AUTO_CACHE_INVALIDATION``, ``STORYBLOK_BASE_URL`` and
  ``STORYBLOK_TIMEOUT``. See :func:`load_env_config`.
* **Precedence resolution** -- :func:`resolve_config` merges explicit
  keyword arguments, environment variables, and the project file on top
  of the model defaults.

Nothing here is written to disk; the library only reads configuration.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from storyblok_client.exceptions import ConfigError
from storyblok_client.models import ClientConfig

_PROJECT_CONFIG_FILENAME = "storyblok.json"

ENV_TOKEN = "STORYBLOK_TOKEN"
ENV_AUTO_CACHE_INVALIDATION = "STORYBLOK_AUTO_CACHE_INVALIDATION"
ENV_BASE_URL = "STORYBLOK_BASE_URL"
ENV_TIMEOUT = "STORYBLOK_TIMEOUT"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


# --- Value parsing ---


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean environment value (``1/0``, ``true/false``, ``yes/no``, ``on/off``).

    Raises:
        ConfigError: If *value* is none of the accepted spellings.
    """
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def parse_timeout(value: str, name: str) -> float:
    """Parse a positive number of seconds."""
    try:
        timeout = float(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if timeout <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return timeout


# --- Sources ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./storyblok.json``.

    Project-local config sits below environment variables in the
    precedence chain. It typically pins ``base_url`` or
    ``auto_cache_invalidation`` for a repository; committing a preview
    token there is discouraged.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def load_env_config() -> dict[str, Any]:
    """Collect the settings given through ``STORYBLOK_*`` environment variables.

    Empty variables are treated as unset.
    """
    values: dict[str, Any] = {}
    token = os.environ.get(ENV_TOKEN)
    if token:
        values["token"] = token
    auto = os.environ.get(ENV_AUTO_CACHE_INVALIDATION)
    if auto:
        values["auto_cache_invalidation"] = parse_bool(auto, ENV_AUTO_CACHE_INVALIDATION)
    base_url = os.environ.get(ENV_BASE_URL)
    if base_url:
        values["base_url"] = base_url
    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        values["timeout"] = parse_timeout(timeout, ENV_TIMEOUT)
    return values


# --- Precedence resolution ---


def resolve_config(
    token: Optional[str] = None,
    auto_cache_invalidation: Optional[bool] = None,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> ClientConfig:
    """Resolve client settings with the full precedence chain.

    Precedence (high to low):
        1. Keyword arguments that are not ``None``
        2. Environment variables (``STORYBLOK_*``)
        3. Project config (``./storyblok.json``)
        4. Defaults of :class:`~storyblok_client.models.ClientConfig`

    Returns:
        The validated :class:`~storyblok_client.models.ClientConfig`.

    Raises:
        ConfigError: If no token is found in any source, or a source holds
            an invalid value.
    """
    merged: dict[str, Any] = {}

    # 3. Project-local config
    project = load_project_config()
    if project is not None:
        merged.update(project)

    # 2. Environment variables
    merged.update(load_env_config())

    # 1. Explicit arguments (highest precedence)
    overrides = {
        "token": token,
        "auto_cache_invalidation": auto_cache_invalidation,
        "base_url": base_url,
        "timeout": timeout,
    }
    merged.update({key: value for key, value in overrides.items() if value is not None})

    if not merged.get("token"):
        raise ConfigError(
            f"No API token configured. Pass --token, set {ENV_TOKEN}, "
            f"or add \"token\" to ./{_PROJECT_CONFIG_FILENAME}"
        )

    try:
        return ClientConfig.model_validate(merged)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = ".".join(str(part) for part in err["loc"]) or "config"
        raise ConfigError(f"Invalid configuration value for '{field}': {err['msg']}") from exc
