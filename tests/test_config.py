"""Tests for environment-driven configuration."""

from pathlib import Path

import pytest

from docapi.config import DOCAPI_CONFIG, ClientOptions, DocapiConfig, load_env


def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DOCAPI_ENDPOINT",
        "DOCAPI_TOKEN",
        "DOCAPI_KEYSPACE",
        "DOCAPI_API_PATH",
        "DOCAPI_TIMEOUT_SEC",
        "DOCAPI_PAGE_SIZE",
        "DOCAPI_INSERT_CHUNK_SIZE",
        "DOCAPI_INSERT_CONCURRENCY",
        "DOCAPI_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    config = DocapiConfig()

    assert config.endpoint is None
    assert config.token is None
    assert config.keyspace == "default_keyspace"
    assert config.api_path == "api/json/v1"
    assert config.timeout_sec == 30.0
    assert config.page_size == 20
    assert config.insert_chunk_size == 50
    assert config.insert_concurrency == 1
    assert config.log_level == "WARNING"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCAPI_ENDPOINT", " http://db.example ")
    monkeypatch.setenv("DOCAPI_PAGE_SIZE", "7")
    monkeypatch.setenv("DOCAPI_TIMEOUT_SEC", "2.5")
    monkeypatch.setenv("DOCAPI_LOG_LEVEL", "debug")

    config = DocapiConfig()

    assert config.endpoint == "http://db.example"
    assert config.page_size == 7
    assert config.timeout_sec == 2.5
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("DOCAPI_PAGE_SIZE", "many", "must be an integer"),
        ("DOCAPI_PAGE_SIZE", "0", "must be >= 1"),
        ("DOCAPI_TIMEOUT_SEC", "soon", "must be a number"),
        ("DOCAPI_TIMEOUT_SEC", "-1", "must be > 0"),
    ],
)
def test_invalid_values_are_rejected(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=message):
        DocapiConfig()


def test_load_env_reads_dotenv_and_reloads(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, docapi_test_config: DocapiConfig
) -> None:
    monkeypatch.setenv("DOCAPI_KEYSPACE", "unset")
    monkeypatch.delenv("DOCAPI_KEYSPACE")
    env_file = tmp_path / ".env"
    env_file.write_text("DOCAPI_KEYSPACE=from_dotenv\n")

    assert load_env(env_file) is True

    assert DOCAPI_CONFIG.keyspace == "from_dotenv"


def test_test_config_fixture_restores_settings(docapi_test_config: DocapiConfig) -> None:
    assert docapi_test_config is DOCAPI_CONFIG
    assert DOCAPI_CONFIG.endpoint == "http://docapi.test"
    assert DOCAPI_CONFIG.log_level == "DEBUG"


def test_client_options_default_from_config(docapi_test_config: DocapiConfig) -> None:
    docapi_test_config.insert_chunk_size = 9

    options = ClientOptions.from_config(keyspace="other")

    assert options.endpoint == "http://docapi.test"
    assert options.token == "test-token"
    assert options.keyspace == "other"
    assert options.insert_chunk_size == 9
    assert options.base_url() == "http://docapi.test/api/json/v1/other"


def test_client_options_require_an_endpoint(docapi_test_config: DocapiConfig) -> None:
    docapi_test_config.endpoint = None

    with pytest.raises(ValueError, match="no endpoint configured"):
        ClientOptions.from_config()
