"""
Request Port - Interface for calls to the platform API.

Implementations:
- HttpRequestAdapter: httpx-based client that attaches the session bearer
- RecordingRequestAdapter: Records calls and returns canned replies (testing only)
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional


class RequestDataFormat(Enum):
    """Body encodings accepted by the platform API."""
    JSON = "json"
    FORM = "form"


class RequestPort(ABC):
    """Port: Post and get against fixed API paths."""

    @abstractmethod
    async def post(
        self,
        path: str,
        body: Any,
        response_type: Optional[type] = None,
        data_format: RequestDataFormat = RequestDataFormat.JSON,
    ) -> Any:
        """
        POST a body to an API path.

        Args:
            path: Path relative to the API base (e.g. "users/register")
            body: Payload; objects with to_dict() are serialized through it
            response_type: Optional type with from_dict() to build the reply
            data_format: Body encoding

        Returns:
            Parsed reply, or None when the server returns no content

        Raises:
            AuthenticationError, NotFoundError, ValidationError, TransportError
        """
        pass

    @abstractmethod
    async def get(
        self,
        path: str,
        response_type: Optional[type] = None,
        data_format: RequestDataFormat = RequestDataFormat.JSON,
    ) -> Any:
        """
        GET an API path.

        Returns:
            Parsed reply, or None when the server returns no content
        """
        pass
