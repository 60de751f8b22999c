"""
Errors - Failure taxonomy for session and identity operations.

Every adapter raises one of these. Nothing in the package retries;
errors reach the caller unchanged.
"""

from typing import Optional


class MeshSessionError(Exception):
    """Base error for mesh_session."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(MeshSessionError):
    """Credentials rejected, refresh token expired/revoked, or bearer refused."""


class NotAuthenticatedError(AuthenticationError):
    """Operation needs a current session but the client has none."""


class NotFoundError(MeshSessionError):
    """Unknown authentication id or missing remote resource."""


class ValidationError(MeshSessionError):
    """Server rejected a flow payload (bad hash, missing field, ...)."""


class TransportError(MeshSessionError):
    """Network failure, timeout, or unusable response from a remote endpoint."""


class ConfigurationError(MeshSessionError):
    """Required settings are missing or malformed."""
