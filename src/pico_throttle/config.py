"""Environment-derived settings for pico-throttle.

``load_settings()`` reads ``MAX_CONCURRENT_PARSES`` and ``LOG_LEVEL``,
validates them with ``SettingsValidator`` and substitutes the defaults for
any value that fails validation.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .logging import get_logger
from .validation import Severity, SettingsValidator

logger = get_logger(__name__)

MAX_CONCURRENT_PARSES_ENV = "MAX_CONCURRENT_PARSES"
LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_MAX_CONCURRENT_PARSES = 20
DEFAULT_LOG_LEVEL = "info"

_ENV_BY_FIELD = {
    "max_concurrent_parses": MAX_CONCURRENT_PARSES_ENV,
    "log_level": LOG_LEVEL_ENV,
}


@dataclass
class ThrottleSettings:
    """Settings consumed by ``ParseScheduler`` and ``configure_logging``.

    Attributes:
        max_concurrent_parses: Maximum number of file parses allowed to run
            at once.
        log_level: Lower-case logging level name.
    """

    max_concurrent_parses: int = DEFAULT_MAX_CONCURRENT_PARSES
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ThrottleSettings:
    """Build ``ThrottleSettings`` from environment variables.

    Unset or empty variables use their defaults silently.  Invalid values
    are logged and replaced by the default; a concurrency limit above
    ``HIGH_CONCURRENCY_THRESHOLD`` is kept but logged as a warning.

    Args:
        environ: Mapping to read from (default: ``os.environ``).

    Returns:
        The validated settings.
    """
    env = os.environ if environ is None else environ
    defaults = ThrottleSettings()

    raw_limit = (env.get(MAX_CONCURRENT_PARSES_ENV) or "").strip()
    try:
        limit = int(raw_limit) if raw_limit else defaults.max_concurrent_parses
    except ValueError:
        logger.warning(
            "Invalid %s found, defaulting to %d. Value: %s",
            MAX_CONCURRENT_PARSES_ENV,
            defaults.max_concurrent_parses,
            raw_limit,
        )
        limit = defaults.max_concurrent_parses

    log_level = (env.get(LOG_LEVEL_ENV) or "").strip().lower() or defaults.log_level
    settings = ThrottleSettings(max_concurrent_parses=limit, log_level=log_level)

    report = SettingsValidator().validate(settings)
    for field_name, env_name in _ENV_BY_FIELD.items():
        if report.errors_for(field_name):
            default = getattr(defaults, field_name)
            logger.warning("Invalid %s found, defaulting to %s. Value: %s", env_name, default, env.get(env_name))
            setattr(settings, field_name, default)

    for issue in report.issues:
        if issue.severity == Severity.WARNING:
            logger.warning("%s: %s", _ENV_BY_FIELD[issue.field], issue.message)

    return settings
