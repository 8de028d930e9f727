"""Authentication backend selection and refresh interval checks."""

from __future__ import annotations

from gatehouse.config.schema import (
    PROFILE_REFRESH_ALWAYS,
    PROFILE_REFRESH_DISABLED,
    REFRESH_INTERVAL_DEFAULT,
    AuthenticationBackendConfig,
)
from gatehouse.core.durations import parse_duration_string
from gatehouse.validator.diagnostics import DiagnosticKind, Diagnostics
from gatehouse.validator.ldap import validate_ldap_backend
from gatehouse.validator.password import validate_file_backend


def validate_authentication_backend(config: AuthenticationBackendConfig, validator: Diagnostics) -> None:
    """Validate and default the backend configuration in place.

    When both backends are configured the exclusivity error is recorded and
    both backends are still checked, so the operator sees their problems too.
    """
    if config.file is None and config.ldap is None:
        validator.push(
            "Please provide `ldap` or `file` object in `authentication_backend`",
            DiagnosticKind.MISSING_REQUIRED_FIELD,
        )

    if config.file is not None and config.ldap is not None:
        validator.push(
            "You cannot provide both `ldap` and `file` objects in `authentication_backend`",
            DiagnosticKind.MUTUALLY_EXCLUSIVE,
        )

    if config.file is not None:
        validate_file_backend(config.file, validator)

    if config.ldap is not None:
        validate_ldap_backend(config.ldap, validator)

    validate_refresh_interval(config, validator)


def validate_refresh_interval(config: AuthenticationBackendConfig, validator: Diagnostics) -> None:
    if not config.refresh_interval:
        config.refresh_interval = REFRESH_INTERVAL_DEFAULT
        return

    if config.refresh_interval in (PROFILE_REFRESH_DISABLED, PROFILE_REFRESH_ALWAYS):
        return

    try:
        parse_duration_string(config.refresh_interval)
    except ValueError as exc:
        validator.push(
            f"Auth Backend `refresh_interval` is configured to '{config.refresh_interval}' but it must be "
            f"either a duration notation or one of '{PROFILE_REFRESH_DISABLED}', or "
            f"'{PROFILE_REFRESH_ALWAYS}'. Error from parser: {exc}",
            DiagnosticKind.UNPARSABLE_DURATION,
        )
