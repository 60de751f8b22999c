"""
Ports - Interfaces for token exchange, token storage and API requests.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW.
"""

from mesh_session.ports.token_port import TokenServicePort
from mesh_session.ports.token_store_port import TokenStorePort
from mesh_session.ports.request_port import RequestPort, RequestDataFormat

__all__ = [
    # Token exchange & storage
    "TokenServicePort",
    "TokenStorePort",
    # Platform API
    "RequestPort",
    "RequestDataFormat",
]
