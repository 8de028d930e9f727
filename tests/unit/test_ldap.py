from gatehouse.config.schema import (
    DEFAULT_LDAP_ACTIVE_DIRECTORY_CONFIG,
    DEFAULT_LDAP_CONFIG,
    DEFAULT_TLS_CONFIG,
    LDAPBackendConfig,
    TLSConfig,
)
from gatehouse.validator.diagnostics import DiagnosticKind, Diagnostics
from gatehouse.validator.ldap import validate_ldap_backend, validate_ldap_url


def _ldap_backend(**overrides: object) -> LDAPBackendConfig:
    values: dict[str, object] = {
        "url": "ldap://127.0.0.1",
        "user": "cn=admin,dc=example,dc=com",
        "password": "password",
        "base_dn": "dc=example,dc=com",
        "users_filter": "({username_attribute}={input})",
        "groups_filter": "(cn={input})",
    }
    values.update(overrides)
    return LDAPBackendConfig(**values)


def test_valid_custom_backend_is_defaulted() -> None:
    config = _ldap_backend()
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert not validator.has_errors()
    assert not validator.has_warnings()
    assert config.implementation == "custom"
    assert config.username_attribute == "uid"
    assert config.mail_attribute == "mail"
    assert config.display_name_attribute == "displayName"
    assert config.group_name_attribute == "cn"
    assert config.tls == TLSConfig(minimum_version="TLS1.2", skip_verify=False, server_name="127.0.0.1")


def test_default_tls_block_is_a_copy_of_the_reference() -> None:
    config = _ldap_backend()
    validate_ldap_backend(config, Diagnostics())

    assert config.tls is not None
    assert config.tls is not DEFAULT_TLS_CONFIG
    assert DEFAULT_LDAP_CONFIG.tls is DEFAULT_TLS_CONFIG
    assert DEFAULT_TLS_CONFIG == TLSConfig(minimum_version="TLS1.2")


def test_explicit_attributes_are_kept() -> None:
    config = _ldap_backend(username_attribute="cn", mail_attribute="email")
    validate_ldap_backend(config, Diagnostics())

    assert config.username_attribute == "cn"
    assert config.mail_attribute == "email"
    assert config.display_name_attribute == "displayName"


def test_active_directory_defaults_fill_filters_and_attributes() -> None:
    config = _ldap_backend(implementation="activedirectory", users_filter="", groups_filter="")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert not validator.has_errors()
    assert config.users_filter == DEFAULT_LDAP_ACTIVE_DIRECTORY_CONFIG.users_filter
    assert config.groups_filter == "(&(member={dn})(objectClass=group))"
    assert config.username_attribute == "sAMAccountName"
    assert config.display_name_attribute == "displayName"
    assert config.mail_attribute == "mail"
    assert config.group_name_attribute == "cn"


def test_unknown_implementation_is_reported() -> None:
    config = _ldap_backend(implementation="openldap")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert len(validator.errors) == 1
    assert validator.errors[0].kind is DiagnosticKind.INVALID_ENUM_VALUE
    assert "`custom`, `activedirectory`" in validator.errors[0].message
    assert config.username_attribute == ""


def test_custom_implementation_requires_filters() -> None:
    config = _ldap_backend(users_filter="", groups_filter="")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert validator.error_messages() == [
        "Please provide a users filter with `users_filter` attribute",
        "Please provide a groups filter with `groups_filter` attribute",
    ]


def test_unsupported_scheme_clears_url() -> None:
    config = _ldap_backend(url="ftp://example.com")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert validator.error_messages() == ["Unknown scheme for ldap url, should be ldap:// or ldaps://"]
    assert validator.errors[0].kind is DiagnosticKind.UNSUPPORTED_URL_SCHEME
    assert config.url == ""
    assert config.tls is not None
    assert config.tls.server_name == ""


def test_unparseable_url_is_reported() -> None:
    validator = Diagnostics()

    assert validate_ldap_url("ldap://[::1", validator) == ("", "")
    assert validator.errors[0].kind is DiagnosticKind.MALFORMED_URL
    assert "scheme is probably missing" in validator.errors[0].message


def test_invalid_port_is_reported_as_malformed() -> None:
    validator = Diagnostics()

    assert validate_ldap_url("ldap://127.0.0.1:notaport", validator) == ("", "")
    assert validator.errors[0].kind is DiagnosticKind.MALFORMED_URL


def test_whitespace_in_host_is_reported_as_malformed() -> None:
    validator = Diagnostics()

    assert validate_ldap_url("ldap://exa mple.com", validator) == ("", "")
    assert validate_ldap_url("ldap://exa\tmple.com", validator) == ("", "")
    assert [item.kind for item in validator.errors] == [DiagnosticKind.MALFORMED_URL, DiagnosticKind.MALFORMED_URL]


def test_scheme_less_host_and_port_is_reported_as_malformed() -> None:
    validator = Diagnostics()

    assert validate_ldap_url("127.0.0.1:389", validator) == ("", "")
    assert len(validator.errors) == 1
    assert validator.errors[0].kind is DiagnosticKind.MALFORMED_URL
    assert "scheme is probably missing" in validator.errors[0].message


def test_url_without_host_clears_url_and_is_reported() -> None:
    config = _ldap_backend(url="ldap:///nohost")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert len(validator.errors) == 1
    assert validator.errors[0].kind is DiagnosticKind.MALFORMED_URL
    assert "host is missing" in validator.errors[0].message
    assert config.url == ""
    assert config.tls is not None
    assert config.tls.server_name == ""


def test_url_is_normalized_and_server_name_derived() -> None:
    config = _ldap_backend(url="LDAPS://Directory.Example.com:636")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert not validator.has_errors()
    assert config.url == "ldaps://Directory.Example.com:636"
    assert config.tls is not None
    assert config.tls.server_name == "directory.example.com"


def test_explicit_server_name_is_kept() -> None:
    config = _ldap_backend(url="ldaps://10.0.0.5", tls=TLSConfig(server_name="ldap.example.com"))
    validate_ldap_backend(config, Diagnostics())

    assert config.tls is not None
    assert config.tls.server_name == "ldap.example.com"
    assert config.tls.minimum_version == "TLS1.2"


def test_missing_url_user_password_and_base_dn_are_each_reported() -> None:
    config = _ldap_backend(url="", user="", password="", base_dn="")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert validator.error_messages() == [
        "Please provide a URL to the LDAP server",
        "Please provide a user name to connect to the LDAP server",
        "Please provide a password to connect to the LDAP server",
        "Please provide a base DN to connect to the LDAP server",
    ]
    assert all(item.kind is DiagnosticKind.MISSING_REQUIRED_FIELD for item in validator.errors)


def test_users_filter_without_placeholders_reports_both() -> None:
    config = _ldap_backend(users_filter="(cn=admin)")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert len(validator.errors) == 2
    assert all(item.kind is DiagnosticKind.MISSING_PLACEHOLDER for item in validator.errors)
    assert "{username_attribute}" in validator.errors[0].message
    assert "{input}" in validator.errors[1].message


def test_users_filter_accepts_legacy_input_placeholder() -> None:
    config = _ldap_backend(users_filter="(&({username_attribute}={0})(objectClass=person))")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert not validator.has_errors()


def test_users_filter_requires_enclosing_parenthesis() -> None:
    config = _ldap_backend(users_filter="{username_attribute}={input}")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert len(validator.errors) == 1
    assert validator.errors[0].kind is DiagnosticKind.MALFORMED_FILTER


def test_groups_filter_requires_enclosing_parenthesis() -> None:
    config = _ldap_backend(groups_filter="cn={input}")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert validator.error_messages() == [
        "The groups filter should contain enclosing parenthesis. For instance cn={input} should be (cn={input})"
    ]


def test_deprecated_skip_verify_is_migrated_when_tls_absent() -> None:
    config = _ldap_backend(skip_verify=True)
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert not validator.has_errors()
    assert len(validator.warnings) == 1
    assert validator.warnings[0].kind is DiagnosticKind.DEPRECATED_FIELD_USED
    assert "skip_verify" in validator.warnings[0].message
    assert config.tls is not None
    assert config.tls.skip_verify is True


def test_deprecated_fields_do_not_override_explicit_tls_block() -> None:
    config = _ldap_backend(
        skip_verify=True,
        minimum_tls_version="TLS1.3",
        tls=TLSConfig(minimum_version="TLS1.2", skip_verify=False),
    )
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert len(validator.warnings) == 2
    assert config.tls is not None
    assert config.tls.skip_verify is False
    assert config.tls.minimum_version == "TLS1.2"


def test_deprecated_minimum_tls_version_is_migrated_when_tls_absent() -> None:
    config = _ldap_backend(minimum_tls_version="TLS1.3")
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert len(validator.warnings) == 1
    assert config.tls is not None
    assert config.tls.minimum_version == "TLS1.3"


def test_unparsable_minimum_tls_version_is_reported() -> None:
    config = _ldap_backend(tls=TLSConfig(minimum_version="SSL3.0"))
    validator = Diagnostics()

    validate_ldap_backend(config, validator)

    assert len(validator.errors) == 1
    assert validator.errors[0].kind is DiagnosticKind.UNPARSABLE_TLS_VERSION
    assert "SSL3.0" in validator.errors[0].message
    assert "supplied TLS version isn't supported" in validator.errors[0].message


def test_explicit_empty_tls_minimum_version_is_defaulted() -> None:
    config = _ldap_backend(tls=TLSConfig(skip_verify=True))
    validate_ldap_backend(config, Diagnostics())

    assert config.tls is not None
    assert config.tls.minimum_version == "TLS1.2"
    assert config.tls.skip_verify is True
