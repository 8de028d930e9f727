"""Accumulator for configuration errors and warnings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DiagnosticKind(str, Enum):
    MISSING_REQUIRED_FIELD = "missing_required_field"
    MUTUALLY_EXCLUSIVE = "mutually_exclusive"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    OUT_OF_RANGE = "out_of_range"
    DEPENDENT_CONSTRAINT = "dependent_constraint"
    MALFORMED_URL = "malformed_url"
    UNSUPPORTED_URL_SCHEME = "unsupported_url_scheme"
    UNPARSABLE_TLS_VERSION = "unparsable_tls_version"
    MALFORMED_FILTER = "malformed_filter"
    MISSING_PLACEHOLDER = "missing_placeholder"
    UNPARSABLE_DURATION = "unparsable_duration"
    DUPLICATE_VALUE = "duplicate_value"
    DEPRECATED_FIELD_USED = "deprecated_field_used"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str

    def __str__(self) -> str:
        return self.message


class ConfigurationError(ValueError):
    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        summary = "; ".join(self.errors) if self.errors else "invalid configuration"
        super().__init__(f"configuration is invalid: {summary}")


@dataclass(slots=True)
class Diagnostics:
    """Ordered fatal errors and non-fatal warnings from one validation pass.

    Validators append to a shared instance and return normally; nothing is
    raised while checks are running so every problem can be reported at once.
    """

    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)

    def push(self, message: str, kind: DiagnosticKind) -> None:
        self.errors.append(Diagnostic(kind=kind, message=message))

    def push_warning(self, message: str, kind: DiagnosticKind = DiagnosticKind.DEPRECATED_FIELD_USED) -> None:
        self.warnings.append(Diagnostic(kind=kind, message=message))

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def error_messages(self) -> list[str]:
        return [item.message for item in self.errors]

    def warning_messages(self) -> list[str]:
        return [item.message for item in self.warnings]

    def clear(self) -> None:
        self.errors.clear()
        self.warnings.clear()

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ConfigurationError(self.error_messages())

    def as_dict(self) -> dict[str, object]:
        return {
            "ok": not self.errors,
            "errors": [{"kind": item.kind.value, "message": item.message} for item in self.errors],
            "warnings": [{"kind": item.kind.value, "message": item.message} for item in self.warnings],
        }
