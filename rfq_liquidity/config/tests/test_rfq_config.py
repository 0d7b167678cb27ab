"""
Test suite for the configuration system.

Covers environment parsing helpers, RFQ defaults and the cross-section
checks of the configuration manager.
"""
import pytest

from rfq_liquidity.config import (
    AUGUSTUS_SWAPPER_ADDRESS,
    BaseConfig,
    CacheConfig,
    ChainConfig,
    ConfigError,
    ConfigManager,
    RfqConfig,
    get_config,
    reload_config,
)


class TestEnvironmentHelpers:

    def test_get_env_default(self, monkeypatch):
        monkeypatch.delenv("RFQ_TEST_VALUE", raising=False)
        assert BaseConfig.get_env("RFQ_TEST_VALUE", "fallback") == "fallback"

    def test_get_env_required(self, monkeypatch):
        monkeypatch.delenv("RFQ_TEST_VALUE", raising=False)
        with pytest.raises(ConfigError, match="RFQ_TEST_VALUE"):
            BaseConfig.get_env("RFQ_TEST_VALUE", required=True)

    def test_get_env_int(self, monkeypatch):
        monkeypatch.setenv("RFQ_TEST_VALUE", "150")
        assert BaseConfig.get_env_int("RFQ_TEST_VALUE") == 150

    def test_get_env_int_invalid(self, monkeypatch):
        monkeypatch.setenv("RFQ_TEST_VALUE", "fast")
        with pytest.raises(ConfigError, match="must be an integer"):
            BaseConfig.get_env_int("RFQ_TEST_VALUE")

    def test_get_env_list(self, monkeypatch):
        monkeypatch.setenv("RFQ_TEST_VALUE", "mm1, mm2,,mm3 ")
        assert BaseConfig.get_env_list("RFQ_TEST_VALUE") == ["mm1", "mm2", "mm3"]

    def test_get_env_address_list_default(self, monkeypatch):
        monkeypatch.delenv("RFQ_TEST_VALUE", raising=False)
        assert BaseConfig.get_env_address_list("RFQ_TEST_VALUE", ["0xABC"]) == ["0xabc"]

    def test_invalid_environment(self):
        with pytest.raises(ConfigError, match="Invalid environment"):
            BaseConfig(ENVIRONMENT="moon")

    def test_invalid_log_level(self):
        with pytest.raises(ConfigError, match="Invalid log level"):
            BaseConfig(LOG_LEVEL="LOUD")


class TestRfqConfig:

    def test_call_timeout_in_seconds(self):
        assert RfqConfig(ASYNC_CALL_TIMEOUT_MS=150).async_call_timeout == 0.15

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ConfigError):
            RfqConfig(ASYNC_CALL_TIMEOUT_MS=0)

    def test_router_address(self):
        config = RfqConfig(NETWORK=137)
        assert config.router_address == "0xf6a94dfd0e6ea9ddfdffe4762ad4236576136613"

    def test_unknown_network_router(self):
        with pytest.raises(ValueError, match="No router configured"):
            RfqConfig().get_router_address(999)

    def test_default_trusted_taker(self):
        config = RfqConfig(TRUSTED_TAKERS=[AUGUSTUS_SWAPPER_ADDRESS])
        assert config.TRUSTED_TAKERS == [AUGUSTUS_SWAPPER_ADDRESS]


class TestCacheAndChains:

    def test_redis_kwargs_without_password(self):
        kwargs = CacheConfig(REDIS_PASSWORD=None).get_redis_connection_kwargs()

        assert "password" not in kwargs
        assert kwargs["decode_responses"] is True

    def test_redis_kwargs_strip_password(self):
        kwargs = CacheConfig(REDIS_PASSWORD=" secret ").get_redis_connection_kwargs()
        assert kwargs["password"] == "secret"

    def test_chain_lookup(self):
        chains = ChainConfig()

        assert chains.get_chain_name(42161) == "arbitrum"
        assert chains.get_rpc_url(1).startswith(("http://", "https://"))

    def test_unknown_chain(self):
        with pytest.raises(ValueError, match="Unsupported network"):
            ChainConfig().get_network_config(999)


class TestConfigManager:

    @pytest.fixture
    def manager(self):
        return ConfigManager(environment="test")

    def test_sections_loaded(self, manager):
        assert manager.environment == "test"
        assert isinstance(manager.rfq, RfqConfig)
        assert isinstance(manager.cache, CacheConfig)
        assert set(manager.to_dict()) == {"environment", "base", "cache", "chains", "rfq"}

    def test_validation_passes(self, manager):
        manager.rfq.NETWORK = 1
        manager.rfq.TRUSTED_TAKERS = [AUGUSTUS_SWAPPER_ADDRESS]
        assert manager.validate_configuration() is True

    def test_unsupported_network(self, manager):
        manager.rfq.NETWORK = 999
        with pytest.raises(ConfigError, match="Unsupported network"):
            manager.validate_configuration()

    def test_trusted_takers_required(self, manager):
        manager.rfq.NETWORK = 1
        manager.rfq.TRUSTED_TAKERS = []
        with pytest.raises(ConfigError, match="trusted taker"):
            manager.validate_configuration()


class TestGlobalConfig:

    def test_get_config_is_shared(self):
        first = get_config(environment="test", force_reload=True)
        assert get_config() is first

    def test_reload_builds_new_instance(self):
        first = get_config(environment="test", force_reload=True)
        reloaded = reload_config(environment="test")

        assert reloaded is not first
        assert get_config() is reloaded
