"""Dataclasses for the authentication backend configuration tree."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


ARGON2ID = "argon2id"
SHA512 = "sha512"
VALID_PASSWORD_ALGORITHMS = (ARGON2ID, SHA512)

LDAP_IMPLEMENTATION_CUSTOM = "custom"
LDAP_IMPLEMENTATION_ACTIVE_DIRECTORY = "activedirectory"
VALID_LDAP_IMPLEMENTATIONS = (LDAP_IMPLEMENTATION_CUSTOM, LDAP_IMPLEMENTATION_ACTIVE_DIRECTORY)

SCHEME_LDAP = "ldap"
SCHEME_LDAPS = "ldaps"

REFRESH_INTERVAL_DEFAULT = "5m"
PROFILE_REFRESH_DISABLED = "disable"
PROFILE_REFRESH_ALWAYS = "always"

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
VALID_LOG_FORMATS = {"json", "ecs_json"}
VALID_LOG_SINKS = {"stdout", "file"}


@dataclass(slots=True)
class PasswordConfig:
    algorithm: str = ""
    iterations: int = 0
    key_length: int = 0
    salt_length: int = 0
    memory: int = 0
    parallelism: int = 0


@dataclass(slots=True)
class FileBackendConfig:
    path: str = ""
    password: PasswordConfig | None = None


@dataclass(slots=True)
class TLSConfig:
    minimum_version: str = ""
    skip_verify: bool = False
    server_name: str = ""


@dataclass(slots=True)
class LDAPBackendConfig:
    implementation: str = ""
    url: str = ""
    tls: TLSConfig | None = None
    # Deprecated: superseded by tls.skip_verify and tls.minimum_version.
    skip_verify: bool | None = None
    minimum_tls_version: str = ""
    base_dn: str = ""
    additional_users_dn: str = ""
    users_filter: str = ""
    additional_groups_dn: str = ""
    groups_filter: str = ""
    group_name_attribute: str = ""
    username_attribute: str = ""
    mail_attribute: str = ""
    display_name_attribute: str = ""
    user: str = ""
    password: str = ""


@dataclass(slots=True)
class AuthenticationBackendConfig:
    file: FileBackendConfig | None = None
    ldap: LDAPBackendConfig | None = None
    refresh_interval: str = ""


@dataclass(slots=True)
class OpenIDConnectClientConfig:
    id: str = ""
    secret: str = ""
    redirect_uris: list[str] = field(default_factory=list)
    scopes: list[str] = field(default_factory=list)
    grant_types: list[str] = field(default_factory=list)
    response_types: list[str] = field(default_factory=list)


@dataclass(slots=True)
class OpenIDConnectConfig:
    hmac_secret: str = ""
    issuer_private_key_path: str = ""
    id_token_lifespan: str = ""
    clients: list[OpenIDConnectClientConfig] = field(default_factory=list)


@dataclass(slots=True)
class IdentityProvidersConfig:
    oidc: OpenIDConnectConfig | None = None


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    fmt: str = "ecs_json"
    sink: str = "stdout"
    file_path: str | None = None
    service_name: str = "gatehouse"


@dataclass(slots=True)
class AppConfig:
    authentication_backend: AuthenticationBackendConfig
    identity_providers: IdentityProvidersConfig
    logging: LoggingConfig


# Reference records. Never attach these directly to a configuration tree, use
# the copy helpers below so validators can mutate the result freely.
DEFAULT_PASSWORD_CONFIG = PasswordConfig(
    algorithm=ARGON2ID,
    iterations=1,
    key_length=32,
    salt_length=16,
    memory=1024,
    parallelism=8,
)

DEFAULT_PASSWORD_SHA512_CONFIG = PasswordConfig(
    algorithm=SHA512,
    iterations=50000,
    salt_length=16,
)

DEFAULT_TLS_CONFIG = TLSConfig(minimum_version="TLS1.2")

DEFAULT_LDAP_CONFIG = LDAPBackendConfig(
    implementation=LDAP_IMPLEMENTATION_CUSTOM,
    username_attribute="uid",
    mail_attribute="mail",
    display_name_attribute="displayName",
    group_name_attribute="cn",
    tls=DEFAULT_TLS_CONFIG,
)

DEFAULT_LDAP_ACTIVE_DIRECTORY_CONFIG = LDAPBackendConfig(
    users_filter=(
        "(&(|({username_attribute}={input})({mail_attribute}={input}))"
        "(sAMAccountType=805306368)"
        "(!(userAccountControl:1.2.840.113556.1.4.803:=2))"
        "(!(pwdLastSet=0)))"
    ),
    username_attribute="sAMAccountName",
    display_name_attribute="displayName",
    mail_attribute="mail",
    groups_filter="(&(member={dn})(objectClass=group))",
    group_name_attribute="cn",
)

DEFAULT_OIDC_ID_TOKEN_LIFESPAN = "1h"
DEFAULT_OIDC_SCOPES = ("openid",)
DEFAULT_OIDC_GRANT_TYPES = ("implicit", "refresh_token", "authorization_code")
DEFAULT_OIDC_RESPONSE_TYPES = ("code",)


def default_password_config() -> PasswordConfig:
    return replace(DEFAULT_PASSWORD_CONFIG)


def default_tls_config() -> TLSConfig:
    return replace(DEFAULT_TLS_CONFIG)


def _section(raw: Any, *, field_name: str) -> dict[str, Any] | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(f"'{field_name}' must be an object")
    return raw


def _parse_str(raw: Any, *, field_name: str, strip: bool = True) -> str:
    if raw is None:
        return ""
    if isinstance(raw, (dict, list)):
        raise ValueError(f"'{field_name}' must be a string")
    value = str(raw)
    return value.strip() if strip else value


def _parse_int(raw: Any, *, field_name: str) -> int:
    if raw is None:
        return 0
    if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
        raise ValueError(f"'{field_name}' must be an integer")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{field_name}' must be an integer") from exc


def _parse_bool_value(raw: Any, *, field_name: str, default: bool | None) -> bool | None:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"'{field_name}' must be a boolean")


def _parse_str_list(raw: Any, *, field_name: str) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"'{field_name}' must be a list")
    values: list[str] = []
    for item in raw:
        token = str(item).strip()
        if token:
            values.append(token)
    return values


def _parse_password(raw: Any) -> PasswordConfig | None:
    section = _section(raw, field_name="authentication_backend.file.password")
    if section is None:
        return None
    prefix = "authentication_backend.file.password"
    return PasswordConfig(
        algorithm=_parse_str(section.get("algorithm"), field_name=f"{prefix}.algorithm"),
        iterations=_parse_int(section.get("iterations"), field_name=f"{prefix}.iterations"),
        key_length=_parse_int(section.get("key_length"), field_name=f"{prefix}.key_length"),
        salt_length=_parse_int(section.get("salt_length"), field_name=f"{prefix}.salt_length"),
        memory=_parse_int(section.get("memory"), field_name=f"{prefix}.memory"),
        parallelism=_parse_int(section.get("parallelism"), field_name=f"{prefix}.parallelism"),
    )


def _parse_file_backend(raw: Any) -> FileBackendConfig | None:
    section = _section(raw, field_name="authentication_backend.file")
    if section is None:
        return None
    return FileBackendConfig(
        path=_parse_str(section.get("path"), field_name="authentication_backend.file.path"),
        password=_parse_password(section.get("password")),
    )


def _parse_tls(raw: Any) -> TLSConfig | None:
    section = _section(raw, field_name="authentication_backend.ldap.tls")
    if section is None:
        return None
    prefix = "authentication_backend.ldap.tls"
    return TLSConfig(
        minimum_version=_parse_str(section.get("minimum_version"), field_name=f"{prefix}.minimum_version"),
        skip_verify=bool(
            _parse_bool_value(section.get("skip_verify"), field_name=f"{prefix}.skip_verify", default=False)
        ),
        server_name=_parse_str(section.get("server_name"), field_name=f"{prefix}.server_name"),
    )


def _parse_ldap_backend(raw: Any) -> LDAPBackendConfig | None:
    section = _section(raw, field_name="authentication_backend.ldap")
    if section is None:
        return None
    prefix = "authentication_backend.ldap"

    def text(key: str) -> str:
        return _parse_str(section.get(key), field_name=f"{prefix}.{key}")

    return LDAPBackendConfig(
        implementation=text("implementation"),
        url=text("url"),
        tls=_parse_tls(section.get("tls")),
        skip_verify=_parse_bool_value(section.get("skip_verify"), field_name=f"{prefix}.skip_verify", default=None),
        minimum_tls_version=text("minimum_tls_version"),
        base_dn=text("base_dn"),
        additional_users_dn=text("additional_users_dn"),
        users_filter=text("users_filter"),
        additional_groups_dn=text("additional_groups_dn"),
        groups_filter=text("groups_filter"),
        group_name_attribute=text("group_name_attribute"),
        username_attribute=text("username_attribute"),
        mail_attribute=text("mail_attribute"),
        display_name_attribute=text("display_name_attribute"),
        user=text("user"),
        password=_parse_str(section.get("password"), field_name=f"{prefix}.password", strip=False),
    )


def parse_authentication_backend(raw: Any) -> AuthenticationBackendConfig:
    section = _section(raw, field_name="authentication_backend") or {}
    return AuthenticationBackendConfig(
        file=_parse_file_backend(section.get("file")),
        ldap=_parse_ldap_backend(section.get("ldap")),
        refresh_interval=_parse_str(
            section.get("refresh_interval"),
            field_name="authentication_backend.refresh_interval",
        ),
    )


def _parse_oidc_clients(raw: Any) -> list[OpenIDConnectClientConfig]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError("'identity_providers.oidc.clients' must be a list")
    clients: list[OpenIDConnectClientConfig] = []
    for index, item in enumerate(raw):
        prefix = f"identity_providers.oidc.clients[{index}]"
        if not isinstance(item, dict):
            raise ValueError(f"'{prefix}' must be an object")
        clients.append(
            OpenIDConnectClientConfig(
                id=_parse_str(item.get("id"), field_name=f"{prefix}.id"),
                secret=_parse_str(item.get("secret"), field_name=f"{prefix}.secret", strip=False),
                redirect_uris=_parse_str_list(item.get("redirect_uris"), field_name=f"{prefix}.redirect_uris"),
                scopes=_parse_str_list(item.get("scopes"), field_name=f"{prefix}.scopes"),
                grant_types=_parse_str_list(item.get("grant_types"), field_name=f"{prefix}.grant_types"),
                response_types=_parse_str_list(item.get("response_types"), field_name=f"{prefix}.response_types"),
            )
        )
    return clients


def parse_identity_providers(raw: Any) -> IdentityProvidersConfig:
    section = _section(raw, field_name="identity_providers") or {}
    oidc_raw = _section(section.get("oidc"), field_name="identity_providers.oidc")
    if oidc_raw is None:
        return IdentityProvidersConfig()
    prefix = "identity_providers.oidc"
    return IdentityProvidersConfig(
        oidc=OpenIDConnectConfig(
            hmac_secret=_parse_str(oidc_raw.get("hmac_secret"), field_name=f"{prefix}.hmac_secret", strip=False),
            issuer_private_key_path=_parse_str(
                oidc_raw.get("issuer_private_key_path"),
                field_name=f"{prefix}.issuer_private_key_path",
            ),
            id_token_lifespan=_parse_str(oidc_raw.get("id_token_lifespan"), field_name=f"{prefix}.id_token_lifespan"),
            clients=_parse_oidc_clients(oidc_raw.get("clients")),
        )
    )


def parse_logging(raw: Any) -> LoggingConfig:
    logging_raw = _section(raw, field_name="logging") or {}
    level = str(logging_raw.get("level", "INFO")).upper()
    if level not in VALID_LOG_LEVELS:
        raise ValueError(f"invalid log level '{level}'")
    log_format = str(logging_raw.get("format", "ecs_json"))
    if log_format not in VALID_LOG_FORMATS:
        raise ValueError(f"invalid log format '{log_format}'")
    sink = str(logging_raw.get("sink", "stdout"))
    if sink not in VALID_LOG_SINKS:
        raise ValueError(f"invalid log sink '{sink}'")
    return LoggingConfig(
        level=level,
        fmt=log_format,
        sink=sink,
        file_path=logging_raw.get("file_path"),
        service_name=str(logging_raw.get("service_name", "gatehouse")).strip() or "gatehouse",
    )


def parse_config(data: dict[str, Any]) -> AppConfig:
    """Build the record tree from a decoded mapping.

    Only structural problems raise here. Value checks and defaulting are left
    to the validators so that every misconfiguration is reported in one pass.
    """
    if not isinstance(data, dict):
        raise ValueError("configuration root must be an object")
    return AppConfig(
        authentication_backend=parse_authentication_backend(data.get("authentication_backend")),
        identity_providers=parse_identity_providers(data.get("identity_providers")),
        logging=parse_logging(data.get("logging")),
    )
