"""
RFQ liquidity source configuration.

Timeouts and TTLs mirror the values the aggregator runs the RFQ source with:
price levels go stale within seconds, a failing market maker sits out for an
hour, and a restricted user stays blacklisted for half a year.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .base import BaseConfig, ConfigError

# Aggregator router that executes RFQ orders on behalf of users
AUGUSTUS_SWAPPER_ADDRESS = "0xdef171fe48cf0115b1d80b88dc8eab59176fee57"

HASHFLOW_ROUTER_ADDRESS = "0xf6a94dfd0e6ea9ddfdffe4762ad4236576136613"


@dataclass
class RfqConfig(BaseConfig):
    """Settings for one RFQ exchange."""

    EXCHANGE_NAME: str = BaseConfig.get_env("RFQ_EXCHANGE_NAME", "Hashflow")
    NETWORK: int = BaseConfig.get_env_int("RFQ_NETWORK", 1)

    EXECUTOR_ADDRESS: str = BaseConfig.get_env(
        "RFQ_EXECUTOR_ADDRESS", AUGUSTUS_SWAPPER_ADDRESS
    ).lower()

    DISABLED_MMS: List[str] = field(
        default_factory=lambda: BaseConfig.get_env_list("RFQ_DISABLED_MMS")
    )
    TRUSTED_TAKERS: List[str] = field(
        default_factory=lambda: BaseConfig.get_env_address_list(
            "RFQ_TRUSTED_TAKERS", [AUGUSTUS_SWAPPER_ADDRESS]
        )
    )

    ASYNC_CALL_TIMEOUT_MS: int = BaseConfig.get_env_int("RFQ_ASYNC_CALL_TIMEOUT_MS", 150)
    PRICE_LEVELS_TTL_SECONDS: int = BaseConfig.get_env_int("PRICE_LEVELS_TTL_SECONDS", 5)
    MM_RESTRICT_TTL_SECONDS: int = BaseConfig.get_env_int("MM_RESTRICT_TTL_SECONDS", 60 * 60)
    BLACKLIST_TTL_SECONDS: int = BaseConfig.get_env_int(
        "BLACKLIST_TTL_SECONDS", 60 * 60 * 24 * 180
    )

    # Flat gas cost attached to every priced pool
    POOL_GAS_COST: int = 100_000

    ROUTER_ADDRESSES: Dict[int, str] = field(
        default_factory=lambda: {
            1: HASHFLOW_ROUTER_ADDRESS,
            10: HASHFLOW_ROUTER_ADDRESS,
            56: HASHFLOW_ROUTER_ADDRESS,
            137: HASHFLOW_ROUTER_ADDRESS,
            42161: HASHFLOW_ROUTER_ADDRESS,
            43114: HASHFLOW_ROUTER_ADDRESS,
        }
    )

    def _validate_config(self):
        super()._validate_config()
        if self.ASYNC_CALL_TIMEOUT_MS <= 0:
            raise ConfigError("RFQ_ASYNC_CALL_TIMEOUT_MS must be positive")
        if self.MM_RESTRICT_TTL_SECONDS <= 0:
            raise ConfigError("MM_RESTRICT_TTL_SECONDS must be positive")

    @property
    def async_call_timeout(self) -> float:
        """External call timeout in seconds."""
        return self.ASYNC_CALL_TIMEOUT_MS / 1000

    @property
    def router_address(self) -> str:
        return self.get_router_address(self.NETWORK)

    def get_router_address(self, network: int) -> str:
        if network not in self.ROUTER_ADDRESSES:
            raise ValueError(f"No router configured for network {network}")
        return self.ROUTER_ADDRESSES[network].lower()
