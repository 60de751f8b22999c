"""
Adapters - Implementations of ports.

Token exchange:
- IdentityTokenService: Remote identity endpoint (httpx)
- InMemoryTokenService: Local issuer (testing)

Token storage:
- RedisTokenStore: Redis-backed token pairs
- MemoryTokenStore: In-memory token pairs

Platform API:
- HttpRequestAdapter: httpx client attaching the session bearer
- RecordingRequestAdapter: Captures calls (testing)
"""

# Token exchange
from mesh_session.adapters.identity_token_service import IdentityTokenService
from mesh_session.adapters.memory_token_service import InMemoryTokenService

# Token storage
from mesh_session.adapters.redis_token_store import RedisTokenStore
from mesh_session.adapters.memory_token_store import MemoryTokenStore

# Platform API
from mesh_session.adapters.http_request import HttpRequestAdapter
from mesh_session.adapters.recording_request import RecordingRequestAdapter, RecordedRequest

__all__ = [
    # Token exchange
    "IdentityTokenService",
    "InMemoryTokenService",
    # Token storage
    "RedisTokenStore",
    "MemoryTokenStore",
    # Platform API
    "HttpRequestAdapter",
    "RecordingRequestAdapter",
    "RecordedRequest",
]
