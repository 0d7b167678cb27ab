"""
Network configuration for rfqLiquidity.
"""

from dataclasses import dataclass
from typing import Dict

from .base import BaseConfig

# Sentinel the aggregator uses for the network's native asset
ETHER_ADDRESS = "0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass
class ChainConfig(BaseConfig):
    """Networks the RFQ source can price on."""

    ETHEREUM_RPC_URL: str = BaseConfig.get_env("ETHEREUM_RPC_URL", "https://eth.llamarpc.com")
    OPTIMISM_RPC_URL: str = BaseConfig.get_env("OPTIMISM_RPC_URL", "https://mainnet.optimism.io")
    BSC_RPC_URL: str = BaseConfig.get_env("BSC_RPC_URL", "https://bsc-dataseed.binance.org")
    POLYGON_RPC_URL: str = BaseConfig.get_env("POLYGON_RPC_URL", "https://polygon-rpc.com")
    ARBITRUM_RPC_URL: str = BaseConfig.get_env("ARBITRUM_RPC_URL", "https://arb1.arbitrum.io/rpc")
    AVALANCHE_RPC_URL: str = BaseConfig.get_env(
        "AVALANCHE_RPC_URL", "https://api.avax.network/ext/bc/C/rpc"
    )

    @property
    def supported_networks(self) -> Dict[int, Dict]:
        """Per network id: chain name and RPC endpoint."""
        return {
            1: {"name": "ethereum", "rpc_url": self.ETHEREUM_RPC_URL},
            10: {"name": "optimism", "rpc_url": self.OPTIMISM_RPC_URL},
            56: {"name": "bsc", "rpc_url": self.BSC_RPC_URL},
            137: {"name": "polygon", "rpc_url": self.POLYGON_RPC_URL},
            42161: {"name": "arbitrum", "rpc_url": self.ARBITRUM_RPC_URL},
            43114: {"name": "avalanche", "rpc_url": self.AVALANCHE_RPC_URL},
        }

    def get_network_config(self, network: int) -> Dict:
        if network not in self.supported_networks:
            raise ValueError(f"Unsupported network: {network}")
        return self.supported_networks[network]

    def get_rpc_url(self, network: int) -> str:
        return self.get_network_config(network)["rpc_url"]

    def get_chain_name(self, network: int) -> str:
        return self.get_network_config(network)["name"]
