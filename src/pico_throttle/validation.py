from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List
from enum import Enum

if TYPE_CHECKING:
    from .config import ThrottleSettings

HIGH_CONCURRENCY_THRESHOLD = 100

KNOWN_LOG_LEVELS = ("debug", "info", "warn", "warning", "error", "critical")

class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"

@dataclass
class ValidationIssue:
    field: str
    message: str
    severity: Severity

@dataclass
class ValidationReport:
    valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(i.severity == Severity.ERROR for i in self.issues)

    def errors_for(self, field_name: str) -> List[ValidationIssue]:
        return [i for i in self.issues if i.field == field_name and i.severity == Severity.ERROR]

class SettingsValidator:
    def validate(self, settings: "ThrottleSettings") -> ValidationReport:
        issues = []

        limit = settings.max_concurrent_parses
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            issues.append(ValidationIssue("max_concurrent_parses", "Concurrency limit must be a positive integer", Severity.ERROR))
        elif limit > HIGH_CONCURRENCY_THRESHOLD:
            issues.append(ValidationIssue(
                "max_concurrent_parses",
                f"Concurrency limit {limit} is very high and may cause 'too many open files' errors",
                Severity.WARNING,
            ))

        if (settings.log_level or "").lower() not in KNOWN_LOG_LEVELS:
            issues.append(ValidationIssue("log_level", f"Unknown log level '{settings.log_level}'", Severity.ERROR))

        return ValidationReport(valid=not any(i.severity == Severity.ERROR for i in issues), issues=issues)
