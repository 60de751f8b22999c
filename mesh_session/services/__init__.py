"""
Services - Flow orchestration over ports.
"""

from mesh_session.services.authentication import AuthenticationService, ANONYMOUS_PASSWORD

__all__ = [
    "AuthenticationService",
    "ANONYMOUS_PASSWORD",
]
