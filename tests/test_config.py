import pytest

from roadside.config import Settings, is_usable_key
from roadside.errors import ConfigError


def test_is_usable_key_rejects_blank_and_placeholders():
    assert not is_usable_key(None)
    assert not is_usable_key("   ")
    assert not is_usable_key("your_google_places_api_key_here")
    assert is_usable_key("AIzaRealLookingKey")


def test_settings_read_upstream_credential_names(monkeypatch):
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", " AIzaFromEnv ")
    monkeypatch.setenv("ROADSIDE_MATRIX_BATCH_SIZE", "10")

    settings = Settings(_env_file=None)

    assert settings.require_google_api_key() == "AIzaFromEnv"
    assert settings.matrix_batch_size == 10


def test_require_kakao_key_raises_config_error(monkeypatch):
    monkeypatch.delenv("KAKAO_REST_API_KEY", raising=False)

    with pytest.raises(ConfigError):
        Settings(_env_file=None).require_kakao_api_key()


def test_allowed_origins_accept_json_list():
    settings = Settings(_env_file=None, frontend_allowed_origins='["https://a.test", "https://b.test"]')

    assert settings.frontend_allowed_origins == ("https://a.test", "https://b.test")
