"""
Session Domain Model - Lifecycle of a client's current session.
"""

from enum import Enum


class SessionState(Enum):
    """
    Client session states.

    UNAUTHENTICATED is both the initial state and the state signout returns
    to. Only login, register, forgot/reset password, verify and check hash
    are valid while in it.
    """
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
