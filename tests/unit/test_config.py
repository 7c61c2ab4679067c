"""Unit tests for client configuration."""

from dataclasses import FrozenInstanceError

import pytest

from xrpl_sale.config import PRODUCTION_URL, TESTNET_URL, ClientConfig, Environment
from xrpl_sale.errors import ConfigurationError


def test_defaults():
    config = ClientConfig()

    assert config.api_key is None
    assert config.environment is Environment.PRODUCTION
    assert config.resolved_base_url == PRODUCTION_URL
    assert config.connect_timeout == 10.0
    assert config.read_timeout == 30.0
    assert config.max_retries == 3
    assert config.retry_delay == 1.0
    assert config.debug is False


@pytest.mark.parametrize("name", ["testnet", "TESTNET", "test", " Testnet "])
def test_testnet_environment(name):
    config = ClientConfig(environment=name)

    assert config.environment is Environment.TESTNET
    assert config.resolved_base_url == TESTNET_URL


def test_base_url_overrides_environment():
    config = ClientConfig(environment="testnet", base_url="http://localhost:8080/v1/")
    assert config.resolved_base_url == "http://localhost:8080/v1"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"environment": "staging"},
        {"max_retries": -1},
        {"retry_delay": -0.5},
        {"connect_timeout": 0},
        {"read_timeout": -1},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ConfigurationError):
        ClientConfig(**kwargs)


def test_from_env(monkeypatch):
    monkeypatch.setenv("XRPLSALE_API_KEY", "env-key")
    monkeypatch.setenv("XRPLSALE_ENVIRONMENT", "testnet")
    monkeypatch.setenv("XRPLSALE_MAX_RETRIES", "5")
    monkeypatch.setenv("XRPLSALE_RETRY_DELAY", "0.25")
    monkeypatch.setenv("XRPLSALE_READ_TIMEOUT", "60")
    monkeypatch.setenv("XRPLSALE_WEBHOOK_SECRET", "whsec_env")
    monkeypatch.setenv("XRPLSALE_DEBUG", "true")

    config = ClientConfig.from_env()

    assert config.api_key == "env-key"
    assert config.environment is Environment.TESTNET
    assert config.max_retries == 5
    assert config.retry_delay == 0.25
    assert config.read_timeout == 60.0
    assert config.webhook_secret == "whsec_env"
    assert config.debug is True


def test_from_env_defaults():
    config = ClientConfig.from_env()

    assert config == ClientConfig()


def test_from_env_bad_number(monkeypatch):
    monkeypatch.setenv("XRPLSALE_MAX_RETRIES", "many")

    with pytest.raises(ConfigurationError, match="MAX_RETRIES|many"):
        ClientConfig.from_env()


def test_from_dict_ignores_unknown_keys():
    config = ClientConfig.from_dict({"api_key": "k", "max_retries": 1, "color": "blue"})

    assert config.api_key == "k"
    assert config.max_retries == 1


def test_config_is_frozen():
    config = ClientConfig(api_key="k")

    with pytest.raises(FrozenInstanceError):
        config.api_key = "other"


def test_from_dict_converts_string_values():
    config = ClientConfig.from_dict(
        {
            "max_retries": "5",
            "connect_timeout": "2.5",
            "retry_delay": "0",
            "debug": "false",
            "environment": "testnet",
        }
    )

    assert config.max_retries == 5
    assert config.connect_timeout == 2.5
    assert config.retry_delay == 0.0
    assert config.debug is False
    assert config.environment is Environment.TESTNET


@pytest.mark.parametrize(
    "values",
    [
        {"max_retries": "3", "connect_timeout": "abc"},
        {"max_retries": "three"},
        {"max_retries": 2.5},
        {"read_timeout": None},
        {"retry_delay": "-1"},
    ],
)
def test_from_dict_rejects_bad_values(values):
    with pytest.raises(ConfigurationError):
        ClientConfig.from_dict(values)


def test_wrong_type_passed_directly():
    with pytest.raises(ConfigurationError, match="connect_timeout"):
        ClientConfig(connect_timeout="10")
