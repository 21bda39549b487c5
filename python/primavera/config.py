"""Configuration loading for primavera.

Settings come from ``PRIMAVERA_*`` environment variables, with explicit
keyword overrides taking precedence, and are validated by ``FlowConfig``.

Example:
    >>> from primavera.config import configure, load_config
    >>>
    >>> config = load_config(log_level="debug")
    >>> configure(config)
"""

from __future__ import annotations

import os
from typing import Any

from .logging import log_debug, set_level
from .types import FlowConfig

ENV_PLACEHOLDER_MARKER = "PRIMAVERA_PLACEHOLDER_MARKER"
ENV_LOG_LEVEL = "PRIMAVERA_LOG_LEVEL"
ENV_PUBLISH_EVENTS = "PRIMAVERA_PUBLISH_EVENTS"


def load_config(**overrides: Any) -> FlowConfig:
    """Build a FlowConfig from the environment and explicit overrides.

    Args:
        **overrides: FlowConfig fields that take precedence over the
            environment.

    Returns:
        Validated FlowConfig.

    Raises:
        pydantic.ValidationError: If a value is invalid (e.g. unknown log
            level, or a publish flag pydantic cannot read as a bool).

    Example:
        >>> os.environ["PRIMAVERA_LOG_LEVEL"] = "debug"
        >>> load_config().log_level
        'debug'
        >>> load_config(log_level="warn").log_level
        'warn'
    """
    values: dict[str, Any] = {}

    marker = os.environ.get(ENV_PLACEHOLDER_MARKER)
    if marker:
        values["placeholder_marker"] = marker

    level = os.environ.get(ENV_LOG_LEVEL)
    if level:
        values["log_level"] = level.lower()

    publish = os.environ.get(ENV_PUBLISH_EVENTS)
    if publish is not None:
        values["publish_events"] = publish.strip().lower()

    values.update(overrides)
    return FlowConfig.model_validate(values)


def configure(config: FlowConfig | None = None) -> FlowConfig:
    """Apply a configuration to the process (currently the log level).

    Args:
        config: Configuration to apply. Loaded from the environment if omitted.

    Returns:
        The applied configuration.
    """
    config = config or load_config()
    set_level(config.log_level)
    log_debug("Applied primavera configuration", config.model_dump())
    return config


__all__ = [
    "ENV_PLACEHOLDER_MARKER",
    "ENV_LOG_LEVEL",
    "ENV_PUBLISH_EVENTS",
    "load_config",
    "configure",
]
