"""
Redis Token Store - Redis-backed token pair storage.
"""

from typing import Optional
import json
import structlog
from mesh_session.ports.token_store_port import TokenStorePort
from mesh_session.domain.token import TokenPair

logger = structlog.get_logger(__name__)


class RedisTokenStore(TokenStorePort):
    """
    Redis-backed token pair storage.

    Pairs are stored as JSON, optionally with a TTL.
    Lets several processes resolve the same authentication id.
    """

    def __init__(
        self,
        redis_client=None,
        redis_url: str = "redis://localhost:6379/0",
        prefix: str = "mesh:token:",
    ):
        """
        Initialize Redis token store.

        Args:
            redis_client: redis.asyncio.Redis instance (created lazily if omitted)
            redis_url: URL used when no client is given
            prefix: Key prefix for token pairs
        """
        self._redis = redis_client
        self._redis_url = redis_url
        self._prefix = prefix

    def _get_redis(self):
        """Lazy load Redis client."""
        if self._redis is None:
            try:
                import redis.asyncio as aioredis
            except ImportError:
                raise ImportError("redis package required: pip install redis")
            self._redis = aioredis.from_url(self._redis_url, decode_responses=True)
        return self._redis

    def _key(self, authentication_id: str) -> str:
        """Generate Redis key for an authentication id."""
        return f"{self._prefix}{authentication_id}"

    async def save(
        self,
        authentication_id: str,
        tokens: TokenPair,
        ttl: Optional[int] = None,
    ) -> None:
        """
        Store a token pair in Redis.

        Args:
            authentication_id: Authentication id
            tokens: Token pair
            ttl: Optional time-to-live in seconds
        """
        redis = self._get_redis()
        payload = json.dumps(tokens.to_dict())

        if ttl:
            await redis.setex(self._key(authentication_id), ttl, payload)
        else:
            await redis.set(self._key(authentication_id), payload)

    async def get(self, authentication_id: str) -> Optional[TokenPair]:
        """
        Get a token pair from Redis.

        Returns:
            TokenPair if found and readable, None otherwise
        """
        redis = self._get_redis()

        data = await redis.get(self._key(authentication_id))
        if not data:
            return None

        try:
            return TokenPair.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning(
                "token_store_entry_unreadable",
                key=self._key(authentication_id),
                error=str(e),
            )
            return None

    async def delete(self, authentication_id: str) -> bool:
        """
        Delete a token pair from Redis.

        Returns:
            True if deleted, False if not found
        """
        redis = self._get_redis()
        return bool(await redis.delete(self._key(authentication_id)))
