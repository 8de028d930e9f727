"""Full configuration validation pass and operator report."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from gatehouse.config.schema import AppConfig
from gatehouse.core.logging import get_logger, log_diagnostics
from gatehouse.validator.authentication import validate_authentication_backend
from gatehouse.validator.diagnostics import Diagnostics
from gatehouse.validator.oidc import validate_identity_providers


_REDACTED = "********"


def run_validation(
    config: AppConfig,
    *,
    diagnostics: Diagnostics | None = None,
    log: bool = True,
    config_path: str | None = None,
) -> Diagnostics:
    validator = diagnostics if diagnostics is not None else Diagnostics()
    validate_authentication_backend(config.authentication_backend, validator)
    validate_identity_providers(config.identity_providers, validator)
    if log:
        log_diagnostics(get_logger("gatehouse.validator"), validator, config_path=config_path)
    return validator


def effective_config(config: AppConfig, *, redact: bool = True) -> dict[str, Any]:
    payload = asdict(config)
    if not redact:
        return payload
    ldap = payload["authentication_backend"].get("ldap")
    if ldap and ldap.get("password"):
        ldap["password"] = _REDACTED
    oidc = payload["identity_providers"].get("oidc")
    if oidc:
        if oidc.get("hmac_secret"):
            oidc["hmac_secret"] = _REDACTED
        for client in oidc.get("clients", []):
            if client.get("secret"):
                client["secret"] = _REDACTED
    return payload


def build_report(config: AppConfig, diagnostics: Diagnostics) -> dict[str, Any]:
    report = diagnostics.as_dict()
    effective = effective_config(config)
    report["authentication_backend"] = effective["authentication_backend"]
    report["identity_providers"] = effective["identity_providers"]
    return report
