"""
SDK - Client-facing session facade.
"""

from mesh_session.sdk.client import MeshClient
from mesh_session.sdk.blocking import BlockingMeshClient

__all__ = [
    "MeshClient",
    "BlockingMeshClient",
]
