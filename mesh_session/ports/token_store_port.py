"""
Token Store Port - Interface for the authentication id -> token pair association.

Implementations:
- RedisTokenStore: Redis-backed store (shared across processes)
- MemoryTokenStore: In-memory store (single process)
"""

from abc import ABC, abstractmethod
from typing import Optional
from mesh_session.domain.token import TokenPair


class TokenStorePort(ABC):
    """Port: Keep token pairs keyed by authentication id."""

    @abstractmethod
    async def save(
        self,
        authentication_id: str,
        tokens: TokenPair,
        ttl: Optional[int] = None,
    ) -> None:
        """
        Bind a token pair to an authentication id, replacing any previous pair.

        Args:
            authentication_id: Authentication id
            tokens: Token pair to store
            ttl: Optional time-to-live in seconds
        """
        pass

    @abstractmethod
    async def get(self, authentication_id: str) -> Optional[TokenPair]:
        """
        Get the pair bound to an id.

        Returns:
            TokenPair if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete(self, authentication_id: str) -> bool:
        """
        Drop the pair bound to an id.

        Returns:
            True if deleted, False if not found
        """
        pass
