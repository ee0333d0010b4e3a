"""Library configuration: BulkyConfig, init() and get_config()."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from bulky._logging import configure_logging

__all__ = [
    'BulkyConfig',
    'get_config',
    'init',
]

_LOG_FORMATS = ('json', 'console')


@dataclass(frozen=True)
class BulkyConfig:
    """Configuration for bulky.

    Attributes:
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
        json_output: Render logs as JSON when True, as console output otherwise.
    """

    log_level: str | None = None
    json_output: bool = True


# Global configuration (set by init())
_config: BulkyConfig | None = None


def _detect_log_level() -> str | None:
    """Read the log level from BULKY_LOG_LEVEL, if set."""
    level = os.environ.get('BULKY_LOG_LEVEL', '').strip()
    return level.upper() or None


def _detect_json_output() -> bool:
    """Read the output format from BULKY_LOG_FORMAT ("json" or "console")."""
    fmt = os.environ.get('BULKY_LOG_FORMAT', '').lower()
    if fmt and fmt not in _LOG_FORMATS:
        logging.warning("Unknown BULKY_LOG_FORMAT value '%s', defaulting to json", fmt)
    return fmt != 'console'


def init(
    log_level: str | None = None,
    json_output: bool | None = None,
) -> BulkyConfig:
    """Initialize bulky with the given configuration.

    Unset arguments are read from the environment (``BULKY_LOG_LEVEL`` and
    ``BULKY_LOG_FORMAT``). Logging is configured only when a level is set.

    Args:
        log_level: Logging level ("DEBUG", "INFO", etc.). None = from env, else silent.
        json_output: JSON logs if True, console logs if False. None = from env.

    Returns:
        The BulkyConfig that was set.

    Example:
        ```python
        import bulky

        bulky.init(log_level="DEBUG", json_output=False)
        ```
    """
    global _config  # noqa: PLW0603

    resolved_level = log_level.upper() if log_level is not None else _detect_log_level()
    resolved_json = json_output if json_output is not None else _detect_json_output()

    _config = BulkyConfig(log_level=resolved_level, json_output=resolved_json)

    if resolved_level is not None:
        configure_logging(resolved_level, json_output=resolved_json)

    return _config


def get_config() -> BulkyConfig:
    """Get the current configuration.

    Returns:
        The current BulkyConfig.

    Raises:
        RuntimeError: If init() has not been called.
    """
    if _config is None:
        msg = 'bulky not initialized. Call bulky.init() first.'
        raise RuntimeError(msg)
    return _config
