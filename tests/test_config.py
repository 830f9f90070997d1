"""Tests for provider configuration."""

import pytest

from squadcast_provider.config import ProviderConfig
from squadcast_provider.errors import ConfigError


class TestProviderConfig:
    def test_region_hosts(self):
        assert ProviderConfig(refresh_token="t").api_base_v3 == "https://api.squadcast.com/v3"
        eu = ProviderConfig(region="eu", refresh_token="t")
        assert eu.api_base_v4 == "https://api.eu.squadcast.com/v4"
        assert eu.auth_base == "https://auth.eu.squadcast.com"
        assert eu.graphql_url == "https://api.eu.squadcast.com/v3/graphql"

    def test_host_override(self):
        config = ProviderConfig(refresh_token="t", host="example.test")
        assert config.api_base_v3 == "https://api.example.test/v3"

    def test_token_is_not_in_repr(self):
        assert "secret" not in repr(ProviderConfig(refresh_token="secret"))


class TestLoad:
    def test_from_values(self):
        config = ProviderConfig.load({"region": "staging", "refresh_token": "t"})
        assert config.api_host == "squadcast.tech"

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("SQUADCAST_REFRESH_TOKEN", "env-token")
        monkeypatch.setenv("SQUADCAST_REGION", "eu")
        config = ProviderConfig.load()
        assert config.refresh_token == "env-token"
        assert config.region == "eu"

    def test_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("SQUADCAST_REGION", "eu")
        monkeypatch.setenv("SQUADCAST_REFRESH_TOKEN", "env-token")
        config = ProviderConfig.load({"region": "us", "refresh_token": "t", "host": None})
        assert config.region == "us"
        assert config.refresh_token == "t"

    def test_missing_token(self):
        with pytest.raises(ConfigError, match="refresh_token"):
            ProviderConfig.load({"region": "us"})

    def test_invalid_region(self):
        with pytest.raises(ConfigError, match="Invalid provider configuration"):
            ProviderConfig.load({"region": "mars", "refresh_token": "t"})
