"""
Memory Token Service - In-process token issuer (testing only).
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, List, Set, Tuple
from mesh_session.ports.token_port import TokenServicePort
from mesh_session.ports.token_store_port import TokenStorePort
from mesh_session.adapters.memory_token_store import MemoryTokenStore
from mesh_session.domain.token import TokenPair
from mesh_session.errors import AuthenticationError, NotFoundError


class InMemoryTokenService(TokenServicePort):
    """
    In-memory token issuer.

    WARNING: Only for testing. Mints random tokens locally instead of
    talking to the identity endpoint.

    Every presented (username, password) pair is recorded in ``presented``.
    When ``users`` is given, only those credentials are accepted;
    otherwise any credentials are.
    """

    def __init__(
        self,
        users: Optional[Dict[str, str]] = None,
        store: Optional[TokenStorePort] = None,
        expires_in: int = 3600,
    ):
        """
        Initialize in-memory issuer.

        Args:
            users: Optional {username: password} table
            store: Token store (defaults to a MemoryTokenStore)
            expires_in: Lifetime of minted access tokens in seconds
        """
        self._users = users
        self._store = store or MemoryTokenStore()
        self._expires_in = expires_in

        self.presented: List[Tuple[str, str]] = []
        self.presented_refresh_tokens: List[str] = []
        # Format: {refresh_token: username}
        self._refresh_owners: Dict[str, str] = {}
        self._revoked: Set[str] = set()

    async def generate_access_token(self, username: str, password: str) -> str:
        """Mint a pair if the credentials are accepted."""
        self.presented.append((username, password))

        if self._users is not None and self._users.get(username) != password:
            raise AuthenticationError("Invalid username or password", status_code=400)

        return await self._bind_new(username)

    async def generate_access_token_with_refresh_token(self, refresh_token: str) -> str:
        """Mint a pair for the owner of a live refresh token."""
        self.presented_refresh_tokens.append(refresh_token)

        username = self._refresh_owners.get(refresh_token)
        if username is None or refresh_token in self._revoked:
            raise AuthenticationError("Refresh token expired or revoked", status_code=400)

        return await self._bind_new(username)

    async def get_refresh_token(self, authentication_id: str) -> str:
        """Get the refresh token bound to an id."""
        tokens = await self._require(authentication_id)
        return tokens.refresh_token

    async def get_access_token(self, authentication_id: str) -> str:
        """Get the access token bound to an id."""
        tokens = await self._require(authentication_id)
        return tokens.access_token

    async def refresh_access_token(self, authentication_id: str) -> str:
        """Rotate the pair bound to an id, keeping the id."""
        current = await self._require(authentication_id)
        username = self._refresh_owners.get(current.refresh_token)
        if username is None or current.refresh_token in self._revoked:
            raise AuthenticationError("Refresh token expired or revoked", status_code=400)

        self._revoked.add(current.refresh_token)
        await self._store.save(authentication_id, self._mint(username))
        return authentication_id

    async def signout(self, authentication_id: str) -> None:
        """Revoke the refresh token and forget the pair. Unknown ids are a no-op."""
        tokens = await self._store.get(authentication_id)
        if tokens is None:
            return

        self._revoked.add(tokens.refresh_token)
        await self._store.delete(authentication_id)

    def is_revoked(self, refresh_token: str) -> bool:
        """Check whether a refresh token was revoked."""
        return refresh_token in self._revoked

    async def _require(self, authentication_id: str) -> TokenPair:
        tokens = await self._store.get(authentication_id)
        if tokens is None:
            raise NotFoundError(f"Unknown authentication id: {authentication_id}")
        return tokens

    def _mint(self, username: str) -> TokenPair:
        tokens = TokenPair(
            access_token=f"at_{secrets.token_urlsafe(24)}",
            refresh_token=f"rt_{secrets.token_urlsafe(24)}",
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=self._expires_in),
        )
        self._refresh_owners[tokens.refresh_token] = username
        return tokens

    async def _bind_new(self, username: str) -> str:
        authentication_id = secrets.token_urlsafe(32)
        await self._store.save(authentication_id, self._mint(username))
        return authentication_id
