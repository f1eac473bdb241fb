from .config import ThrottleSettings, load_settings
from .scheduler import TaskScheduler, ParseScheduler, SchedulerStatus
from .validation import SettingsValidator, ValidationReport, ValidationIssue, Severity
from .logging import configure_logging, get_logger
from .exceptions import ThrottleError, InvalidConfiguration

__all__ = [
    "ThrottleSettings",
    "load_settings",
    "TaskScheduler",
    "ParseScheduler",
    "SchedulerStatus",
    "SettingsValidator",
    "ValidationReport",
    "ValidationIssue",
    "Severity",
    "configure_logging",
    "get_logger",
    "ThrottleError",
    "InvalidConfiguration"
]
