"""
Configuration manager for rfqLiquidity.

Combines every configuration section behind one object. Components never
read it themselves: the owner of an exchange builds them with the values
they need.
"""

import logging
from typing import Dict, Any, Optional

from .base import BaseConfig, ConfigError
from .cache import CacheConfig
from .chains import ChainConfig
from .rfq import RfqConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Centralized access to base, cache, chain and RFQ settings."""

    def __init__(self, environment: Optional[str] = None):
        """
        Args:
            environment: Override the environment (local, test, dev, staging, production)
        """
        self._environment = environment
        self._base_config = None
        self._cache_config = None
        self._chain_config = None
        self._rfq_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        try:
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment

            self._cache_config = CacheConfig()
            self._chain_config = ChainConfig()
            self._rfq_config = RfqConfig()

            logger.info(f"Configuration initialized for environment: {self.environment}")

        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}")

    @property
    def environment(self) -> str:
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        return self._base_config

    @property
    def cache(self) -> CacheConfig:
        return self._cache_config

    @property
    def chains(self) -> ChainConfig:
        return self._chain_config

    @property
    def rfq(self) -> RfqConfig:
        return self._rfq_config

    def validate_configuration(self) -> bool:
        """
        Cross-section checks that a single section cannot do on its own.

        Raises:
            ConfigError: If the RFQ network has no chain or router entry
        """
        network = self.rfq.NETWORK
        try:
            self.chains.get_network_config(network)
            self.rfq.get_router_address(network)
        except ValueError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ConfigError(f"Configuration validation failed: {e}")

        if not self.rfq.TRUSTED_TAKERS:
            raise ConfigError("At least one trusted taker must be configured")

        logger.info("Configuration validation successful")
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "base": self.base.to_dict() if self.base else {},
            "cache": self.cache.to_dict() if self.cache else {},
            "chains": self.chains.to_dict() if self.chains else {},
            "rfq": self.rfq.to_dict() if self.rfq else {},
        }

    def __repr__(self) -> str:
        return f"ConfigManager(environment={self.environment})"


# Global configuration manager instance
_config_manager = None


def get_config(environment: str = None, force_reload: bool = False) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        environment: Override environment
        force_reload: Force reload of configuration
    """
    global _config_manager

    if _config_manager is None or force_reload:
        _config_manager = ConfigManager(environment=environment)
        _config_manager.validate_configuration()

    return _config_manager


def reload_config(environment: str = None) -> ConfigManager:
    """Rebuild the global configuration, e.g. after changing the environment."""
    return get_config(environment=environment, force_reload=True)
