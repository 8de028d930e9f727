"""OpenID Connect provider configuration checks."""

from __future__ import annotations

from urllib.parse import urlsplit

from gatehouse.config.schema import (
    DEFAULT_OIDC_GRANT_TYPES,
    DEFAULT_OIDC_ID_TOKEN_LIFESPAN,
    DEFAULT_OIDC_RESPONSE_TYPES,
    DEFAULT_OIDC_SCOPES,
    IdentityProvidersConfig,
    OpenIDConnectClientConfig,
    OpenIDConnectConfig,
)
from gatehouse.core.durations import parse_duration_string
from gatehouse.validator.diagnostics import DiagnosticKind, Diagnostics


VALID_REDIRECT_URI_SCHEMES = {"https", "http"}


def validate_identity_providers(config: IdentityProvidersConfig, validator: Diagnostics) -> None:
    if config.oidc is not None:
        validate_oidc(config.oidc, validator)


def validate_oidc(config: OpenIDConnectConfig, validator: Diagnostics) -> None:
    if not config.hmac_secret:
        validator.push(
            "OIDC provider requires `identity_providers.oidc.hmac_secret`",
            DiagnosticKind.MISSING_REQUIRED_FIELD,
        )
    if not config.issuer_private_key_path:
        validator.push(
            "OIDC provider requires `identity_providers.oidc.issuer_private_key_path`",
            DiagnosticKind.MISSING_REQUIRED_FIELD,
        )

    if not config.id_token_lifespan:
        config.id_token_lifespan = DEFAULT_OIDC_ID_TOKEN_LIFESPAN
    else:
        try:
            parse_duration_string(config.id_token_lifespan)
        except ValueError as exc:
            validator.push(
                f"OIDC `id_token_lifespan` is invalid: {exc}",
                DiagnosticKind.UNPARSABLE_DURATION,
            )

    seen: set[str] = set()
    for index, client in enumerate(config.clients):
        if client.id and client.id in seen:
            validator.push(
                f"OIDC client id '{client.id}' is configured more than once",
                DiagnosticKind.DUPLICATE_VALUE,
            )
        seen.add(client.id)
        _validate_client(index, client, validator)


def _validate_client(index: int, client: OpenIDConnectClientConfig, validator: Diagnostics) -> None:
    label = f"'{client.id}'" if client.id else f"at index {index}"
    if not client.id:
        validator.push(f"OIDC client {label} requires an `id`", DiagnosticKind.MISSING_REQUIRED_FIELD)
    if not client.secret:
        validator.push(f"OIDC client {label} requires a `secret`", DiagnosticKind.MISSING_REQUIRED_FIELD)

    if not client.redirect_uris:
        validator.push(
            f"OIDC client {label} requires at least one `redirect_uris` entry",
            DiagnosticKind.MISSING_REQUIRED_FIELD,
        )
    for redirect_uri in client.redirect_uris:
        try:
            parsed = urlsplit(redirect_uri)
        except ValueError:
            parsed = None
        if parsed is None or parsed.scheme not in VALID_REDIRECT_URI_SCHEMES or not parsed.netloc:
            validator.push(
                f"OIDC client {label} redirect URI '{redirect_uri}' must be an absolute http or https URL",
                DiagnosticKind.MALFORMED_URL,
            )

    if not client.scopes:
        client.scopes = list(DEFAULT_OIDC_SCOPES)
    if not client.grant_types:
        client.grant_types = list(DEFAULT_OIDC_GRANT_TYPES)
    if not client.response_types:
        client.response_types = list(DEFAULT_OIDC_RESPONSE_TYPES)
