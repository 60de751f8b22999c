"""
Memory Token Store - In-memory token pair storage.
"""

import time
from typing import Callable, Optional, Dict, Tuple
from mesh_session.ports.token_store_port import TokenStorePort
from mesh_session.domain.token import TokenPair


class MemoryTokenStore(TokenStorePort):
    """
    In-memory token pair storage.

    Pairs are lost on restart and not shared between processes.
    Safe for concurrent coroutines on one event loop: no await happens
    between a read and the write that depends on it.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Initialize in-memory storage.

        Args:
            clock: Monotonic seconds source used for TTLs
        """
        self._clock = clock
        # Format: {authentication_id: (tokens, deadline or None)}
        self._tokens: Dict[str, Tuple[TokenPair, Optional[float]]] = {}

    async def save(
        self,
        authentication_id: str,
        tokens: TokenPair,
        ttl: Optional[int] = None,
    ) -> None:
        """Bind a token pair in memory."""
        deadline = self._clock() + ttl if ttl else None
        self._tokens[authentication_id] = (tokens, deadline)

    async def get(self, authentication_id: str) -> Optional[TokenPair]:
        """Get a token pair from memory."""
        entry = self._tokens.get(authentication_id)
        if not entry:
            return None

        tokens, deadline = entry
        if deadline is not None and self._clock() >= deadline:
            # Auto-cleanup stale entry
            del self._tokens[authentication_id]
            return None

        return tokens

    async def delete(self, authentication_id: str) -> bool:
        """Drop a token pair from memory."""
        return self._tokens.pop(authentication_id, None) is not None

    def __len__(self) -> int:
        return len(self._tokens)
