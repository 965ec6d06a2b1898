import pytest
from pydantic import ValidationError

from core.utils.config import load_config
from core.utils.constants import DEFAULT_DATE_FORMAT, DEFAULT_IMAGE_LOCATION


def test_defaults_when_environment_is_empty() -> None:
    config = load_config({})

    assert config.image_location == DEFAULT_IMAGE_LOCATION
    assert config.metadata_table_name is None
    assert config.require_auth is False
    assert config.allow_search is True
    assert config.trust_headers is False
    assert config.date_format == DEFAULT_DATE_FORMAT


def test_values_are_read_from_environment() -> None:
    config = load_config(
        {
            "IMAGE_LOCATION": "/srv/images",
            "IMAGE_METADATA_TABLE_NAME": "images",
            "AUTH_TOKEN_TABLE_NAME": "tokens",
            "REQUIRE_AUTH": "true",
            "ALLOW_SEARCH": "0",
            "TRUST_HEADERS": "yes",
            "DATE_FORMAT": "%d.%m.%Y",
        }
    )

    assert config.image_location == "/srv/images"
    assert config.metadata_table_name == "images"
    assert config.auth_table_name == "tokens"
    assert config.require_auth is True
    assert config.allow_search is False
    assert config.trust_headers is True
    assert config.date_format == "%d.%m.%Y"


def test_process_environment_is_used_by_default(monkeypatch) -> None:
    monkeypatch.setenv("REQUIRE_AUTH", "1")

    assert load_config().require_auth is True


def test_invalid_boolean_is_rejected() -> None:
    with pytest.raises(ValidationError):
        load_config({"REQUIRE_AUTH": "sometimes"})


def test_config_is_immutable() -> None:
    config = load_config({})

    with pytest.raises(ValidationError):
        config.require_auth = True
