"""
Authentication Service - Orchestrates login, registration and password flows.

Login variants go through the token service. Identity flows are one-shot
POSTs through the request service; continuity between steps is carried by
the verification hash the caller passes back, never by state held here.
"""

import uuid
from typing import Optional

import structlog

from mesh_session.domain.flows import (
    ForgotPassword,
    RegisterUser,
    ResetPassword,
    UserPasswordUpdate,
    UserVerificationCheck,
    UserVerificationHash,
    Valid,
)
from mesh_session.ports.request_port import RequestPort, RequestDataFormat
from mesh_session.ports.token_port import TokenServicePort

logger = structlog.get_logger(__name__)

# Anonymous identity is established by username alone
ANONYMOUS_PASSWORD = "nopassword"

REGISTER_PATH = "users/register"
FORGOT_PASSWORD_PATH = "users/forgotpassword"
RESET_PASSWORD_PATH = "users/resetpassword"
VERIFY_PATH = "users/verify"
CHECK_HASH_PATH = "users/checkhash"
UPDATE_PASSWORD_PATH = "users/me/password"


class AuthenticationService:
    """
    Stateless flow orchestration over a token service and a request service.

    Example:
        service = AuthenticationService(token_service, request_service)
        authentication_id = await service.login_with_password("alice", "s3cret")
        persistance_token = await service.retrieve_persistance_token(authentication_id)
    """

    def __init__(self, token_service: TokenServicePort, request_service: RequestPort):
        self._tokens = token_service
        self._requests = request_service

    async def login_with_password(self, username: str, password: str) -> str:
        """
        Log in with username and password.

        Returns:
            Authentication id

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        return await self._tokens.generate_access_token(username, password)

    async def login_anonymously(self, username: Optional[str] = None) -> str:
        """
        Log in as an anonymous user.

        Args:
            username: Known anonymous username; a random one is used if omitted

        Returns:
            Authentication id
        """
        if username is None:
            username = uuid.uuid4().hex
        return await self._tokens.generate_access_token(username, ANONYMOUS_PASSWORD)

    async def login_with_refresh_token(self, refresh_token: str) -> str:
        """
        Log in with a refresh token from an earlier session.

        Raises:
            AuthenticationError: If the token is expired or revoked
        """
        return await self._tokens.generate_access_token_with_refresh_token(refresh_token)

    async def login_with_persistance(self, persistance_token: str) -> str:
        """Log in with a persistance token (an exported refresh token)."""
        return await self.login_with_refresh_token(persistance_token)

    async def retrieve_persistance_token(self, authentication_id: str) -> str:
        """
        Export the session's refresh token so it can be resumed later.

        Raises:
            NotFoundError: If the id is unknown or already signed out
        """
        return await self._tokens.get_refresh_token(authentication_id)

    async def refresh(self, authentication_id: str) -> str:
        """Refresh the session's tokens; returns the (unchanged) id."""
        return await self._tokens.refresh_access_token(authentication_id)

    async def register(self, user: RegisterUser) -> UserVerificationHash:
        """
        Register a user. Does not log them in.

        Returns:
            Verification hash for the follow-up verify step
        """
        logger.info("user_register_requested")
        return await self._requests.post(
            REGISTER_PATH, user, UserVerificationHash, RequestDataFormat.JSON
        )

    async def forgot_password(self, username: str) -> UserVerificationHash:
        """Start a password reset; the code is delivered out of band."""
        logger.info("forgot_password_requested")
        return await self._requests.post(
            FORGOT_PASSWORD_PATH,
            ForgotPassword(username=username),
            UserVerificationHash,
            RequestDataFormat.JSON,
        )

    async def reset_password(self, reset_password: ResetPassword) -> None:
        """Finish a password reset. Success is the absence of an error."""
        await self._requests.post(
            RESET_PASSWORD_PATH, reset_password, None, RequestDataFormat.JSON
        )

    async def verify(self, check: UserVerificationCheck) -> None:
        """Confirm a user's identity with a hash and verification code."""
        await self._requests.post(VERIFY_PATH, check, None, RequestDataFormat.JSON)

    async def check_hash(self, check: UserVerificationCheck) -> bool:
        """Check whether a hash/code pair is still valid (not consumed or expired)."""
        result = await self._requests.post(
            CHECK_HASH_PATH, check, Valid, RequestDataFormat.JSON
        )
        return bool(result and result.is_valid)

    async def update_password(self, previous_password: str, new_password: str) -> None:
        """
        Change the password of the user behind the bearer the request service attaches.
        """
        await self._requests.post(
            UPDATE_PASSWORD_PATH,
            UserPasswordUpdate(previous_password=previous_password, new_password=new_password),
            None,
            RequestDataFormat.JSON,
        )

    async def signout(self, authentication_id: str) -> None:
        """Sign out a session. Unknown ids are a no-op."""
        await self._tokens.signout(authentication_id)
