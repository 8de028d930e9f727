"""ID token session shape handed to the OpenID Connect provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from gatehouse.config.schema import DEFAULT_OIDC_ID_TOKEN_LIFESPAN, OpenIDConnectClientConfig, OpenIDConnectConfig
from gatehouse.core.durations import parse_duration_string


@dataclass(slots=True)
class OpenIDSession:
    issuer: str
    subject: str
    audience: list[str]
    expires_at: datetime
    issued_at: datetime
    requested_at: datetime
    auth_time: datetime
    extra: dict[str, Any] = field(default_factory=dict)

    def claims(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "iss": self.issuer,
            "sub": self.subject,
            "aud": list(self.audience),
            "exp": int(self.expires_at.timestamp()),
            "iat": int(self.issued_at.timestamp()),
            "rat": int(self.requested_at.timestamp()),
            "auth_time": int(self.auth_time.timestamp()),
        }
        payload.update(self.extra)
        return payload


def new_session(
    user: str,
    *,
    issuer: str,
    audience: list[str],
    lifespan: timedelta,
    email_domain: str | None = None,
    now: datetime | None = None,
) -> OpenIDSession:
    current = now or datetime.now(UTC)
    extra: dict[str, Any] = {}
    if email_domain:
        extra["email"] = f"{user}@{email_domain}"
    return OpenIDSession(
        issuer=issuer,
        subject=user,
        audience=list(audience),
        expires_at=current + lifespan,
        issued_at=current,
        requested_at=current,
        auth_time=current,
        extra=extra,
    )


def session_for_client(
    user: str,
    config: OpenIDConnectConfig,
    client: OpenIDConnectClientConfig,
    *,
    issuer: str,
    email_domain: str | None = None,
    now: datetime | None = None,
) -> OpenIDSession:
    """Build a session whose lifespan and audience come from a validated provider config."""
    lifespan = parse_duration_string(config.id_token_lifespan or DEFAULT_OIDC_ID_TOKEN_LIFESPAN)
    return new_session(
        user,
        issuer=issuer,
        audience=[client.id],
        lifespan=lifespan,
        email_domain=email_domain,
        now=now,
    )
