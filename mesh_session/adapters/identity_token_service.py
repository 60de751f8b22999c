"""
Identity Token Service - Implements TokenServicePort against the identity endpoint.

Token endpoint (form encoded):
    POST {auth_url}/connect/token
        grant_type=password&username=..&password=..&client_id=..&scope=..
        grant_type=refresh_token&refresh_token=..&client_id=..

Revocation endpoint:
    POST {auth_url}/connect/revocation
        token=..&token_type_hint=refresh_token&client_id=..
"""

import asyncio
import secrets
from typing import Dict, Any, Optional

import httpx
import structlog

from mesh_session.config import MeshSettings
from mesh_session.domain.token import TokenPair
from mesh_session.errors import AuthenticationError, NotFoundError, TransportError
from mesh_session.ports.token_port import TokenServicePort
from mesh_session.ports.token_store_port import TokenStorePort

logger = structlog.get_logger(__name__)


class IdentityTokenService(TokenServicePort):
    """
    Token service backed by the remote identity endpoint.

    Each issuance, refresh or revocation is exactly one HTTP round trip.
    Refresh and signout on the same authentication id are serialized with a
    per-id lock; different ids never wait on each other.

    Example:
        service = IdentityTokenService(settings=settings, store=MemoryTokenStore())
        authentication_id = await service.generate_access_token("alice", "s3cret")
        bearer = await service.get_access_token(authentication_id)
    """

    def __init__(
        self,
        *,
        settings: MeshSettings,
        store: TokenStorePort,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize identity token service.

        Args:
            settings: Client settings (token/revocation URLs, client id, scope)
            store: Where token pairs are kept
            transport: Optional httpx transport override
        """
        self._settings = settings
        self._store = store
        self._transport = transport
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, authentication_id: str) -> asyncio.Lock:
        return self._locks.setdefault(authentication_id, asyncio.Lock())

    async def generate_access_token(self, username: str, password: str) -> str:
        """Exchange username/password for a token pair under a fresh id."""
        logger.info("token_issue_started", grant_type="password")

        tokens = await self._request_tokens(
            {
                "grant_type": "password",
                "username": username,
                "password": password,
                "client_id": self._settings.client_id,
                "scope": self._settings.scope,
            },
            operation="issue",
        )
        return await self._bind_new(tokens)

    async def generate_access_token_with_refresh_token(self, refresh_token: str) -> str:
        """Exchange a refresh token for a token pair under a fresh id."""
        logger.info("token_issue_started", grant_type="refresh_token")

        tokens = await self._request_tokens(
            self._refresh_form(refresh_token),
            operation="refresh",
        )
        return await self._bind_new(self._keep_refresh_token(tokens, refresh_token))

    async def get_refresh_token(self, authentication_id: str) -> str:
        """Get the refresh token bound to an id."""
        tokens = await self._require(authentication_id)
        if not tokens.refresh_token:
            raise NotFoundError("No refresh token issued for this session")
        return tokens.refresh_token

    async def get_access_token(self, authentication_id: str) -> str:
        """Get the access token bound to an id."""
        tokens = await self._require(authentication_id)
        return tokens.access_token

    async def refresh_access_token(self, authentication_id: str) -> str:
        """Refresh the pair bound to an id in place."""
        async with self._lock_for(authentication_id):
            current = await self._store.get(authentication_id)
            if current is None:
                self._locks.pop(authentication_id, None)
                raise NotFoundError(f"Unknown authentication id: {authentication_id}")
            if not current.refresh_token:
                raise NotFoundError("No refresh token issued for this session")

            logger.info("token_refresh_started", authentication_id=authentication_id)
            tokens = await self._request_tokens(
                self._refresh_form(current.refresh_token),
                operation="refresh",
            )

            tokens = self._keep_refresh_token(tokens, current.refresh_token)
            await self._store.save(authentication_id, tokens, ttl=self._settings.token_ttl)
            return authentication_id

    async def signout(self, authentication_id: str) -> None:
        """Revoke the refresh token remotely and forget the pair. Unknown ids are a no-op."""
        async with self._lock_for(authentication_id):
            tokens = await self._store.get(authentication_id)
            if tokens is None:
                logger.debug("signout_unknown_session", authentication_id=authentication_id)
                self._locks.pop(authentication_id, None)
                return

            if self._settings.revoke_on_signout and tokens.refresh_token:
                await self._revoke(tokens.refresh_token)

            await self._store.delete(authentication_id)
            self._locks.pop(authentication_id, None)

        logger.info("session_signed_out", authentication_id=authentication_id)

    async def _require(self, authentication_id: str) -> TokenPair:
        tokens = await self._store.get(authentication_id)
        if tokens is None:
            raise NotFoundError(f"Unknown authentication id: {authentication_id}")
        return tokens

    async def _bind_new(self, tokens: TokenPair) -> str:
        authentication_id = secrets.token_urlsafe(32)
        await self._store.save(authentication_id, tokens, ttl=self._settings.token_ttl)
        logger.info(
            "token_issued",
            authentication_id=authentication_id,
            expires_in=tokens.seconds_remaining(),
        )
        return authentication_id

    @staticmethod
    def _keep_refresh_token(tokens: TokenPair, refresh_token: str) -> TokenPair:
        # Servers that do not rotate refresh tokens omit it from the reply
        if tokens.refresh_token is not None:
            return tokens
        return TokenPair(
            access_token=tokens.access_token,
            refresh_token=refresh_token,
            expires_at=tokens.expires_at,
            token_type=tokens.token_type,
            scope=tokens.scope,
        )

    def _refresh_form(self, refresh_token: str) -> Dict[str, str]:
        return {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self._settings.client_id,
        }

    async def _post_form(self, url: str, form: Dict[str, Any], operation: str) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout,
                transport=self._transport,
            ) as client:
                return await client.post(url, data=form)
        except httpx.TimeoutException as e:
            logger.warning(f"token_{operation}_timeout", error=str(e))
            raise TransportError("Identity endpoint request timed out")
        except httpx.RequestError as e:
            logger.warning(f"token_{operation}_connection_error", error=str(e))
            raise TransportError(f"Failed to connect to identity endpoint: {e}")

    async def _request_tokens(self, form: Dict[str, Any], operation: str) -> TokenPair:
        response = await self._post_form(self._settings.token_url, form, operation)
        return self._handle_token_response(response, operation)

    def _handle_token_response(self, response: httpx.Response, operation: str) -> TokenPair:
        """
        Turn an identity endpoint reply into a token pair.

        Args:
            response: HTTP response from the token endpoint
            operation: "issue" or "refresh" for logging

        Raises:
            AuthenticationError: On 400/401 (invalid grant, bad credentials)
            TransportError: On any other failure status or malformed body
        """
        if response.status_code in (400, 401):
            logger.warning(
                f"token_{operation}_rejected",
                status_code=response.status_code,
            )
            raise AuthenticationError(
                self._error_description(response),
                status_code=response.status_code,
            )

        if response.status_code != 200:
            logger.warning(
                f"token_{operation}_unexpected_status",
                status_code=response.status_code,
            )
            raise TransportError(
                f"Unexpected response from identity endpoint: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"token_{operation}_invalid_json", error=str(e))
            raise TransportError("Invalid JSON response from identity endpoint")

        if not isinstance(data, dict):
            logger.error(f"token_{operation}_invalid_body", body_type=type(data).__name__)
            raise TransportError("Identity endpoint response is not a JSON object")

        try:
            return TokenPair.from_response(data)
        except (TypeError, ValueError) as e:
            logger.error(f"token_{operation}_invalid_field", error=str(e))
            raise TransportError(f"Invalid field in identity response: {e}")
        except KeyError as e:
            logger.error(f"token_{operation}_missing_field", missing_field=str(e))
            raise TransportError(f"Missing required field in identity response: {e}")

    @staticmethod
    def _error_description(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return f"Authentication failed: {response.text[:200]}"
        if isinstance(data, dict):
            return data.get("error_description") or data.get("error") or "Authentication failed"
        return "Authentication failed"

    async def _revoke(self, refresh_token: str) -> None:
        response = await self._post_form(
            self._settings.revocation_url,
            {
                "token": refresh_token,
                "token_type_hint": "refresh_token",
                "client_id": self._settings.client_id,
            },
            operation="revoke",
        )
        # RFC 7009: unknown or already revoked tokens still answer 200
        if response.status_code >= 400:
            logger.warning("token_revoke_failed", status_code=response.status_code)
            raise TransportError(
                f"Token revocation failed: {response.status_code}",
                status_code=response.status_code,
            )
