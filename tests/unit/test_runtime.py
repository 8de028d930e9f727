from pathlib import Path

import pytest

from gatehouse.config.loader import DEFAULT_CONFIG_PATH
from gatehouse.config.schema import parse_config
from gatehouse.core.runtime import ConfigurationHolder
from gatehouse.validator.diagnostics import ConfigurationError


def test_holder_requires_a_loaded_configuration() -> None:
    holder = ConfigurationHolder()
    assert holder.generation == 0
    with pytest.raises(RuntimeError):
        holder.current()


def test_initial_load_validates_and_defaults() -> None:
    holder = ConfigurationHolder(parse_config({"authentication_backend": {"file": {"path": "users.yml"}}}))
    current = holder.current()
    assert holder.generation == 1
    assert current.authentication_backend.refresh_interval == "5m"
    assert current.authentication_backend.file is not None
    assert current.authentication_backend.file.password is not None


def test_initial_load_rejects_invalid_configuration() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        ConfigurationHolder(parse_config({"authentication_backend": {}}))
    assert excinfo.value.errors == ["Please provide `ldap` or `file` object in `authentication_backend`"]


def test_invalid_reload_keeps_live_configuration() -> None:
    live = parse_config({"authentication_backend": {"file": {"path": "users.yml"}}})
    holder = ConfigurationHolder(live)

    diagnostics = holder.reload(
        parse_config({"authentication_backend": {"file": {"path": "users.yml", "password": {"salt_length": 1}}}})
    )

    assert diagnostics.has_errors()
    assert holder.current() is live
    assert holder.generation == 1


def test_valid_reload_swaps_configuration(tmp_path: Path) -> None:
    holder = ConfigurationHolder(parse_config({"authentication_backend": {"file": {"path": "users.yml"}}}))
    config_path = tmp_path / "gatehouse.yml"
    config_path.write_text(DEFAULT_CONFIG_PATH.read_text(encoding="utf-8"), encoding="utf-8")

    diagnostics = holder.reload_from_path(config_path)

    assert not diagnostics.has_errors()
    assert holder.generation == 2
    file_backend = holder.current().authentication_backend.file
    assert file_backend is not None
    assert file_backend.path == "./users_database.yml"
