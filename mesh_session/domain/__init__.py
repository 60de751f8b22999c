"""
Domain Models - Tokens, session state and identity flow payloads.

No infrastructure dependencies beyond token claim parsing.
"""

from mesh_session.domain.token import TokenPair
from mesh_session.domain.session import SessionState
from mesh_session.domain.flows import (
    RegisterUser,
    ForgotPassword,
    UserVerificationHash,
    UserVerificationCheck,
    ResetPassword,
    UserPasswordUpdate,
    Valid,
)

__all__ = [
    "TokenPair",
    "SessionState",
    "RegisterUser",
    "ForgotPassword",
    "UserVerificationHash",
    "UserVerificationCheck",
    "ResetPassword",
    "UserPasswordUpdate",
    "Valid",
]
