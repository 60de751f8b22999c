"""
Mesh Client - High-level SDK holding the current session.

Simplifies login, persistence and password workflows for application developers.
"""

import threading
from typing import Optional

import structlog

from mesh_session.adapters.http_request import HttpRequestAdapter
from mesh_session.adapters.identity_token_service import IdentityTokenService
from mesh_session.adapters.memory_token_store import MemoryTokenStore
from mesh_session.adapters.redis_token_store import RedisTokenStore
from mesh_session.config import MeshSettings
from mesh_session.domain.flows import (
    RegisterUser,
    ResetPassword,
    UserVerificationCheck,
    UserVerificationHash,
)
from mesh_session.domain.session import SessionState
from mesh_session.errors import NotAuthenticatedError
from mesh_session.ports.request_port import RequestPort
from mesh_session.ports.token_port import TokenServicePort
from mesh_session.ports.token_store_port import TokenStorePort
from mesh_session.services.authentication import AuthenticationService

logger = structlog.get_logger(__name__)


class MeshClient:
    """
    Client with exactly one current session.

    The current authentication id is set only by a successful login or
    refresh and cleared only by signout. Every instance has its own slot.
    Logging in again replaces the current id without signing out the
    previous session.

    Example:
        from mesh_session import MeshClient, MeshSettings

        client = MeshClient(MeshSettings(
            api_url="https://api.example.com/v1",
            auth_url="https://auth.example.com",
            client_id="public-key",
        ))

        # Login
        await client.login_with_password("alice", "s3cret")
        token = await client.retrieve_persistance_token()

        # Later, in another process
        await client.login_with_persistance(token)
        await client.signout()
    """

    def __init__(
        self,
        settings: Optional[MeshSettings] = None,
        token_store: Optional[TokenStorePort] = None,
        token_service: Optional[TokenServicePort] = None,
        request_service: Optional[RequestPort] = None,
    ):
        """
        Initialize client with adapters.

        Args:
            settings: Client settings (required unless both services are given)
            token_store: Token pair store (memory, or Redis when settings.redis_url is set)
            token_service: Token service (defaults to IdentityTokenService)
            request_service: Request service (defaults to HttpRequestAdapter)
        """
        if settings is None and (token_service is None or request_service is None):
            raise ValueError("settings are required unless token and request services are given")

        self._settings = settings
        self._lock = threading.Lock()
        self._authentication_id: Optional[str] = None

        if token_service is None:
            token_service = IdentityTokenService(
                settings=settings,
                store=token_store if token_store is not None else self._default_store(settings),
            )

        if request_service is None:
            request_service = HttpRequestAdapter(
                base_url=settings.api_url,
                token_service=token_service,
                authentication_id=lambda: self.authentication_id,
                timeout=settings.timeout,
            )

        self._token_service = token_service
        self._request_service = request_service
        self._auth = AuthenticationService(token_service, request_service)

    @classmethod
    def from_env(cls, prefix: str = "MESH_") -> "MeshClient":
        """Build a client from MESH_* environment variables."""
        return cls(MeshSettings.from_env(prefix=prefix))

    @staticmethod
    def _default_store(settings: MeshSettings) -> TokenStorePort:
        if settings.redis_url:
            return RedisTokenStore(redis_url=settings.redis_url)
        return MemoryTokenStore()

    @property
    def authentication_id(self) -> Optional[str]:
        """Current authentication id, or None when signed out."""
        with self._lock:
            return self._authentication_id

    @property
    def state(self) -> SessionState:
        """Current session state."""
        if self.authentication_id is None:
            return SessionState.UNAUTHENTICATED
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    @property
    def request(self) -> RequestPort:
        """Request service that signs calls with the current session."""
        return self._request_service

    @property
    def token_service(self) -> TokenServicePort:
        return self._token_service

    def _set_current(self, authentication_id: str) -> str:
        with self._lock:
            previous = self._authentication_id
            self._authentication_id = authentication_id

        if previous is not None and previous != authentication_id:
            logger.info("session_replaced", previous_authentication_id=previous)
        return authentication_id

    def _require_current(self) -> str:
        authentication_id = self.authentication_id
        if authentication_id is None:
            raise NotAuthenticatedError("No active session; log in first")
        return authentication_id

    # Login family

    async def login_with_password(self, username: str, password: str) -> str:
        """
        Log in with username and password and make it the current session.

        Returns:
            Authentication id
        """
        return self._set_current(await self._auth.login_with_password(username, password))

    async def login_anonymously(self, username: Optional[str] = None) -> str:
        """Log in anonymously and make it the current session."""
        return self._set_current(await self._auth.login_anonymously(username))

    async def login_with_persistance(self, persistance_token: str) -> str:
        """Resume a session from a persistance token and make it current."""
        return self._set_current(await self._auth.login_with_persistance(persistance_token))

    async def login_with_refresh_token(self, refresh_token: str) -> str:
        """Resume a session from a refresh token and make it current."""
        return self._set_current(await self._auth.login_with_refresh_token(refresh_token))

    # Current session

    async def refresh(self) -> str:
        """
        Refresh the current session's tokens.

        Raises:
            NotAuthenticatedError: If there is no current session
        """
        authentication_id = self._require_current()
        refreshed = await self._auth.refresh(authentication_id)

        with self._lock:
            # A concurrent login or signout may have replaced the slot meanwhile
            if self._authentication_id == authentication_id:
                self._authentication_id = refreshed
        return refreshed

    async def retrieve_persistance_token(self) -> str:
        """
        Export the current session so it can be resumed later.

        Raises:
            NotAuthenticatedError: If there is no current session
        """
        return await self._auth.retrieve_persistance_token(self._require_current())

    async def update_password(self, previous_password: str, new_password: str) -> None:
        """
        Change the password of the signed-in user.

        Raises:
            NotAuthenticatedError: If there is no current session
        """
        self._require_current()
        await self._auth.update_password(previous_password, new_password)

    async def signout(self) -> None:
        """Sign out the current session. No-op when signed out."""
        authentication_id = self.authentication_id
        if authentication_id is None:
            return

        await self._auth.signout(authentication_id)

        with self._lock:
            # A concurrent login may have replaced the slot meanwhile
            if self._authentication_id == authentication_id:
                self._authentication_id = None

    # Identity flows (no session needed)

    async def register(self, user: RegisterUser) -> UserVerificationHash:
        """Register a user; returns the hash for the verify step."""
        return await self._auth.register(user)

    async def forgot_password(self, username: str) -> UserVerificationHash:
        """Start a password reset."""
        return await self._auth.forgot_password(username)

    async def reset_password(self, reset_password: ResetPassword) -> None:
        """Finish a password reset."""
        await self._auth.reset_password(reset_password)

    async def verify(self, check: UserVerificationCheck) -> None:
        """Verify a user with a hash and code."""
        await self._auth.verify(check)

    async def check_hash(self, check: UserVerificationCheck) -> bool:
        """Check whether a hash/code pair is still valid."""
        return await self._auth.check_hash(check)
