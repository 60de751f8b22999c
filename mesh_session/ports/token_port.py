"""
Token Port - Interface for credential-to-token exchange.

Implementations:
- IdentityTokenService: Remote identity endpoint over HTTP
- InMemoryTokenService: In-process issuer (testing only)
"""

from abc import ABC, abstractmethod


class TokenServicePort(ABC):
    """Port: Issue, resolve, refresh and revoke tokens keyed by authentication id."""

    @abstractmethod
    async def generate_access_token(self, username: str, password: str) -> str:
        """
        Exchange a username/password pair for a new token pair.

        Args:
            username: User name
            password: Password (never retained after the call)

        Returns:
            Fresh authentication id bound to the issued pair

        Raises:
            AuthenticationError: If the identity endpoint rejects the credentials
        """
        pass

    @abstractmethod
    async def generate_access_token_with_refresh_token(self, refresh_token: str) -> str:
        """
        Exchange a refresh token for a new token pair.

        Args:
            refresh_token: Refresh (persistence) token from an earlier session

        Returns:
            Fresh authentication id bound to the refreshed pair

        Raises:
            AuthenticationError: If the refresh token is expired or revoked
        """
        pass

    @abstractmethod
    async def get_refresh_token(self, authentication_id: str) -> str:
        """
        Get the refresh token bound to an authentication id.

        Raises:
            NotFoundError: If the id is unknown or has no refresh token
        """
        pass

    @abstractmethod
    async def get_access_token(self, authentication_id: str) -> str:
        """
        Get the access token bound to an authentication id.

        Raises:
            NotFoundError: If the id is unknown
        """
        pass

    @abstractmethod
    async def refresh_access_token(self, authentication_id: str) -> str:
        """
        Refresh the pair bound to an id, keeping the id.

        Returns:
            The same authentication id

        Raises:
            NotFoundError: If the id is unknown or has no refresh token
            AuthenticationError: If the refresh token is rejected
        """
        pass

    @abstractmethod
    async def signout(self, authentication_id: str) -> None:
        """
        Revoke and forget the pair bound to an id.

        Unknown ids are a no-op.
        """
        pass
