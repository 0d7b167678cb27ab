"""
Base classes and interfaces for the shared key-value cache.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union
import logging

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base exception for storage-related errors."""
    pass


class ConnectionError(StorageError):
    """Raised when connection to storage backend fails."""
    pass


class DataError(StorageError):
    """Raised when data operations fail."""
    pass


class StorageBase(ABC):
    """
    Abstract base class for storage backends.

    Backends are async context managers: entering connects, leaving
    disconnects.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.is_connected = False

    @abstractmethod
    async def connect(self) -> None:
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Returns:
            bool: True if the backend is reachable
        """
        pass

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


class CacheInterface(ABC):
    """
    Cache operations the RFQ core relies on.

    Plain keys are namespaced by exchange name and network so that several
    exchanges can share one backend. Hash keys are used verbatim; callers
    build them already namespaced. Every operation is atomic per key.
    """

    @staticmethod
    def build_key(namespace: str, network: int, key: str) -> str:
        return f"{namespace}:{network}:{key}".lower()

    @abstractmethod
    async def get(self, namespace: str, network: int, key: str) -> Optional[str]:
        """
        Args:
            namespace: Exchange name
            network: Network id
            key: Key inside the namespace

        Returns:
            Stored string or None if missing or expired
        """
        pass

    @abstractmethod
    async def setex(
        self, namespace: str, network: int, key: str, ttl: int, value: str
    ) -> bool:
        """Store a value that expires after `ttl` seconds."""
        pass

    @abstractmethod
    async def delete(self, namespace: str, network: int, key: str) -> bool:
        """
        Returns:
            bool: True if the key existed and was deleted
        """
        pass

    @abstractmethod
    async def hgetall(self, key: str) -> Dict[str, str]:
        """All fields of a hash; empty dict when the hash does not exist."""
        pass

    @abstractmethod
    async def hset(self, key: str, field: str, value: Union[str, int]) -> int:
        """Set one field of a hash."""
        pass

    @abstractmethod
    async def hdel(self, key: str, fields: List[str]) -> int:
        """
        Returns:
            int: Number of fields removed
        """
        pass
