"""Environment and ``.env`` configuration surface.

Purpose
-------
Resolve :class:`~lib_log_gelf.settings.WriterConfig` from explicit
properties overlaid with ``LOG_GELF_*`` environment variables, optionally
loading a nearby ``.env`` file first.

Contents
--------
* :data:`ENV_PROPERTIES` - environment variable to property key table.
* :func:`load_writer_config` - properties + environment to configuration.
* :func:`enable_dotenv` / :func:`should_use_dotenv` - ``.env`` support.

System Role
-----------
Used by the CLI and by hosts that configure the writer through the process
environment (containers, systemd units).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from lib_log_gelf.settings import WriterConfig

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LIB_LOG_GELF_USE_DOTENV"
_TRUTHY = {"1", "true", "yes", "on"}

ENV_PROPERTIES: dict[str, str] = {
    "LOG_GELF_SERVER": "server",
    "LOG_GELF_PORT": "port",
    "LOG_GELF_TRANSPORT": "transport",
    "LOG_GELF_HOSTNAME": "hostname",
    "LOG_GELF_ADDITIONAL_VALUES": "additionalLogEntryValues",
    "LOG_GELF_STATIC_FIELDS": "staticFields",
    "LOG_GELF_QUEUE_SIZE": "queueSize",
    "LOG_GELF_CONNECT_TIMEOUT": "connectTimeout",
    "LOG_GELF_RECONNECT_DELAY": "reconnectDelay",
    "LOG_GELF_SEND_BUFFER_SIZE": "sendBufferSize",
    "LOG_GELF_TCP_NO_DELAY": "tcpNoDelay",
}

_loaded_dotenv: Path | None = None


def load_writer_config(
    properties: Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> WriterConfig:
    """Build a :class:`WriterConfig` from ``properties`` and the environment.

    Environment variables take precedence over ``properties`` so deployments
    can retarget a writer without code changes. Empty variables are ignored.
    ``overrides`` (values an operator passed explicitly, e.g. CLI flags) are
    applied last and beat both.

    Examples
    --------
    >>> config = load_writer_config({"server": "gray.example", "hostname": "api01"}, environ={"LOG_GELF_PORT": "12202"})
    >>> config.server, config.port
    ('gray.example', 12202)
    """
    merged: dict[str, Any] = dict(properties or {})
    env = os.environ if environ is None else environ
    for env_name, key in ENV_PROPERTIES.items():
        value = env.get(env_name)
        if value is not None and value.strip():
            merged[key] = value
    merged.update(overrides or {})
    return WriterConfig.from_properties(merged)


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is requested.

    An explicit CLI flag wins; otherwise ``env_value`` (the content of
    :data:`DOTENV_ENV_VAR`) is interpreted as a boolean.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    """
    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv() -> Path | None:
    """Load the nearest ``.env`` walking upwards from the working directory.

    Existing environment variables are never overridden. The lookup runs once
    per process; later calls return the cached path.
    """
    global _loaded_dotenv
    if _loaded_dotenv is not None:
        return _loaded_dotenv

    found = find_dotenv(usecwd=True)
    if not found:
        return None
    candidate = Path(found).resolve()
    load_dotenv(candidate, override=False)
    _loaded_dotenv = candidate
    LOGGER.debug("Loaded environment from %s", candidate)
    return candidate


def _reset_dotenv_state_for_testing() -> None:
    global _loaded_dotenv
    _loaded_dotenv = None


__all__ = [
    "DOTENV_ENV_VAR",
    "ENV_PROPERTIES",
    "enable_dotenv",
    "load_writer_config",
    "should_use_dotenv",
]
