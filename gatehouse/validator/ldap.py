"""LDAP backend normalization, deprecation shims and filter checks."""

from __future__ import annotations

from urllib.parse import SplitResult, urlsplit, urlunsplit

from gatehouse.config.schema import (
    DEFAULT_LDAP_ACTIVE_DIRECTORY_CONFIG,
    DEFAULT_LDAP_CONFIG,
    LDAP_IMPLEMENTATION_ACTIVE_DIRECTORY,
    LDAP_IMPLEMENTATION_CUSTOM,
    SCHEME_LDAP,
    SCHEME_LDAPS,
    LDAPBackendConfig,
    default_tls_config,
)
from gatehouse.core.tls import tls_version_from_string
from gatehouse.validator.diagnostics import DiagnosticKind, Diagnostics


USERNAME_ATTRIBUTE_PLACEHOLDER = "{username_attribute}"
INPUT_PLACEHOLDERS = ("{0}", "{input}")

# Fields filled from each implementation's reference record when left empty.
_IMPLEMENTATION_DEFAULTS: dict[str, tuple[LDAPBackendConfig, tuple[str, ...]]] = {
    LDAP_IMPLEMENTATION_CUSTOM: (
        DEFAULT_LDAP_CONFIG,
        (
            "username_attribute",
            "group_name_attribute",
            "mail_attribute",
            "display_name_attribute",
        ),
    ),
    LDAP_IMPLEMENTATION_ACTIVE_DIRECTORY: (
        DEFAULT_LDAP_ACTIVE_DIRECTORY_CONFIG,
        (
            "users_filter",
            "username_attribute",
            "display_name_attribute",
            "mail_attribute",
            "groups_filter",
            "group_name_attribute",
        ),
    ),
}


def validate_ldap_backend(config: LDAPBackendConfig, validator: Diagnostics) -> None:
    if not config.implementation:
        config.implementation = DEFAULT_LDAP_CONFIG.implementation

    # Captured before defaulting; afterwards an explicit block and a default
    # block look the same.
    tls_explicit = config.tls is not None
    if config.tls is None:
        config.tls = default_tls_config()
    tls = config.tls

    if config.skip_verify is not None:
        validator.push_warning(
            "DEPRECATED: LDAP Auth Backend `skip_verify` option has been replaced by "
            "`authentication_backend.ldap.tls.skip_verify`"
        )
        if not tls_explicit:
            tls.skip_verify = config.skip_verify

    if config.minimum_tls_version:
        validator.push_warning(
            "DEPRECATED: LDAP Auth Backend `minimum_tls_version` option has been replaced by "
            "`authentication_backend.ldap.tls.minimum_version`"
        )
        if not tls_explicit:
            tls.minimum_version = config.minimum_tls_version

    if not tls.minimum_version:
        tls.minimum_version = default_tls_config().minimum_version

    try:
        tls_version_from_string(tls.minimum_version)
    except ValueError as exc:
        validator.push(
            "error occurred validating the LDAP minimum_tls_version key with value "
            f"{tls.minimum_version}: {exc}",
            DiagnosticKind.UNPARSABLE_TLS_VERSION,
        )

    defaults = _IMPLEMENTATION_DEFAULTS.get(config.implementation)
    if defaults is None:
        validator.push(
            "authentication backend ldap implementation must be blank or one of the following values "
            f"`{LDAP_IMPLEMENTATION_CUSTOM}`, `{LDAP_IMPLEMENTATION_ACTIVE_DIRECTORY}`",
            DiagnosticKind.INVALID_ENUM_VALUE,
        )
    else:
        reference, field_names = defaults
        _fill_empty_fields(config, reference, field_names)

    if not config.url:
        validator.push("Please provide a URL to the LDAP server", DiagnosticKind.MISSING_REQUIRED_FIELD)
    else:
        config.url, server_name = validate_ldap_url(config.url, validator)
        if not tls.server_name:
            tls.server_name = server_name

    if not config.user:
        validator.push("Please provide a user name to connect to the LDAP server", DiagnosticKind.MISSING_REQUIRED_FIELD)

    if not config.password:
        validator.push("Please provide a password to connect to the LDAP server", DiagnosticKind.MISSING_REQUIRED_FIELD)

    if not config.base_dn:
        validator.push("Please provide a base DN to connect to the LDAP server", DiagnosticKind.MISSING_REQUIRED_FIELD)

    validate_users_filter(config.users_filter, validator)
    validate_groups_filter(config.groups_filter, validator)


def validate_ldap_url(ldap_url: str, validator: Diagnostics) -> tuple[str, str]:
    """Return the canonical URL and its host, or two empty strings on error."""
    try:
        parsed = urlsplit(ldap_url)
        # Accessing the port validates it.
        parsed.port
    except ValueError:
        parsed = None

    if parsed is None or not _is_well_formed(ldap_url, parsed):
        validator.push(
            "Unable to parse URL to ldap server. The scheme is probably missing: ldap:// or ldaps://",
            DiagnosticKind.MALFORMED_URL,
        )
        return "", ""

    if parsed.scheme not in (SCHEME_LDAP, SCHEME_LDAPS):
        validator.push(
            "Unknown scheme for ldap url, should be ldap:// or ldaps://",
            DiagnosticKind.UNSUPPORTED_URL_SCHEME,
        )
        return "", ""

    if not parsed.hostname:
        validator.push(
            "Unable to parse URL to ldap server. The host is missing: ldap://<host> or ldaps://<host>",
            DiagnosticKind.MALFORMED_URL,
        )
        return "", ""

    return urlunsplit(parsed), parsed.hostname


def validate_users_filter(users_filter: str, validator: Diagnostics) -> None:
    if not users_filter:
        validator.push(
            "Please provide a users filter with `users_filter` attribute",
            DiagnosticKind.MISSING_REQUIRED_FIELD,
        )
        return

    if not _is_enclosed(users_filter):
        validator.push(
            "The users filter should contain enclosing parenthesis. For instance "
            "{username_attribute}={input} should be ({username_attribute}={input})",
            DiagnosticKind.MALFORMED_FILTER,
        )

    if USERNAME_ATTRIBUTE_PLACEHOLDER not in users_filter:
        validator.push(
            "Unable to detect {username_attribute} placeholder in users_filter, your configuration is broken",
            DiagnosticKind.MISSING_PLACEHOLDER,
        )

    if not any(placeholder in users_filter for placeholder in INPUT_PLACEHOLDERS):
        validator.push(
            "Unable to detect {input} placeholder in users_filter, your configuration might be broken",
            DiagnosticKind.MISSING_PLACEHOLDER,
        )


def validate_groups_filter(groups_filter: str, validator: Diagnostics) -> None:
    if not groups_filter:
        validator.push(
            "Please provide a groups filter with `groups_filter` attribute",
            DiagnosticKind.MISSING_REQUIRED_FIELD,
        )
    elif not _is_enclosed(groups_filter):
        validator.push(
            "The groups filter should contain enclosing parenthesis. For instance cn={input} should be (cn={input})",
            DiagnosticKind.MALFORMED_FILTER,
        )


def _is_well_formed(ldap_url: str, parsed: SplitResult) -> bool:
    # urlsplit silently drops tabs and newlines.
    if not ldap_url.isprintable():
        return False
    if any(char.isspace() for char in parsed.netloc):
        return False
    # A scheme-less "host:port" leaves a colon in the first path segment.
    if not parsed.scheme and ":" in parsed.path.split("/", 1)[0]:
        return False
    return True


def _is_enclosed(ldap_filter: str) -> bool:
    return ldap_filter.startswith("(") and ldap_filter.endswith(")")


def _fill_empty_fields(config: LDAPBackendConfig, reference: LDAPBackendConfig, field_names: tuple[str, ...]) -> None:
    for name in field_names:
        if not getattr(config, name):
            setattr(config, name, getattr(reference, name))
