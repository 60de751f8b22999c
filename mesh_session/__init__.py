"""
Mesh Session - Client-side authentication & session lifecycle

Hexagonal architecture for logging in to the platform, keeping the
resulting token pair, and driving registration, verification and
password-reset flows against the identity API.

Usage:
    from mesh_session import MeshClient, MeshSettings

    client = MeshClient(MeshSettings.from_env())

    # Authenticate
    await client.login_with_password("alice", "s3cret")

    # Keep the session for later
    token = await client.retrieve_persistance_token()
"""

__version__ = "0.1.0"

from mesh_session.sdk.client import MeshClient
from mesh_session.sdk.blocking import BlockingMeshClient
from mesh_session.config import MeshSettings
from mesh_session.domain.session import SessionState
from mesh_session.domain.token import TokenPair
from mesh_session.domain.flows import (
    RegisterUser,
    ForgotPassword,
    UserVerificationHash,
    UserVerificationCheck,
    ResetPassword,
    UserPasswordUpdate,
    Valid,
)
from mesh_session.errors import (
    MeshSessionError,
    AuthenticationError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationError,
    TransportError,
    ConfigurationError,
)

__all__ = [
    "MeshClient",
    "BlockingMeshClient",
    "MeshSettings",
    "SessionState",
    "TokenPair",
    # Flow models
    "RegisterUser",
    "ForgotPassword",
    "UserVerificationHash",
    "UserVerificationCheck",
    "ResetPassword",
    "UserPasswordUpdate",
    "Valid",
    # Errors
    "MeshSessionError",
    "AuthenticationError",
    "NotAuthenticatedError",
    "NotFoundError",
    "ValidationError",
    "TransportError",
    "ConfigurationError",
]
