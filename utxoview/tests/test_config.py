"""
Tests for settings loading.
"""

import pytest
from pydantic import ValidationError

from utxoview.config import Settings, get_default_api_url


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("NETWORK", "MEMPOOL_API_URL", "MAX_CONCURRENCY", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = Settings()
    assert settings.network == "mainnet"
    assert settings.max_concurrency == 8
    assert settings.max_retries == 2
    assert settings.get_api_url() == "https://mempool.space/api"


def test_network_selects_default_url():
    assert Settings(network="signet").get_api_url() == "https://mempool.space/signet/api"
    assert get_default_api_url("testnet") == "https://mempool.space/testnet/api"


def test_explicit_url_wins():
    settings = Settings(network="testnet", mempool_api_url="http://localhost:3002/api/")
    assert settings.get_api_url() == "http://localhost:3002/api"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("NETWORK", "regtest")
    monkeypatch.setenv("max_concurrency", "2")
    settings = Settings()
    assert settings.network == "regtest"
    assert settings.max_concurrency == 2


def test_unknown_network():
    with pytest.raises(ValueError):
        get_default_api_url("litecoin")
    with pytest.raises(ValidationError):
        Settings(network="litecoin")


def test_max_concurrency_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(max_concurrency=0)
