"""TLS version identifiers accepted in configuration."""

from __future__ import annotations

import ssl


_TLS_VERSIONS = {
    "TLS1.3": ssl.TLSVersion.TLSv1_3,
    "TLS13": ssl.TLSVersion.TLSv1_3,
    "TLS1.2": ssl.TLSVersion.TLSv1_2,
    "TLS12": ssl.TLSVersion.TLSv1_2,
    "TLS1.1": ssl.TLSVersion.TLSv1_1,
    "TLS11": ssl.TLSVersion.TLSv1_1,
    "TLS1.0": ssl.TLSVersion.TLSv1,
    "TLS10": ssl.TLSVersion.TLSv1,
}


def tls_version_from_string(value: str) -> ssl.TLSVersion:
    try:
        return _TLS_VERSIONS[value.strip().upper()]
    except KeyError:
        raise ValueError("supplied TLS version isn't supported") from None
