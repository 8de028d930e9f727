"""Configuration validators sharing one diagnostics accumulator."""

from .authentication import validate_authentication_backend
from .diagnostics import ConfigurationError, Diagnostic, DiagnosticKind, Diagnostics
from .ldap import validate_ldap_backend
from .oidc import validate_identity_providers
from .password import validate_file_backend

__all__ = [
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "validate_authentication_backend",
    "validate_file_backend",
    "validate_identity_providers",
    "validate_ldap_backend",
]
