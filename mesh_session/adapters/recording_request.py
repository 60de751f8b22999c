"""
Recording Request Adapter - Captures API calls (testing only).
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from mesh_session.ports.request_port import RequestPort, RequestDataFormat


@dataclass
class RecordedRequest:
    """One captured call."""
    method: str
    path: str
    body: Any
    response_type: Optional[type]
    data_format: RequestDataFormat


class RecordingRequestAdapter(RequestPort):
    """
    Request adapter that records calls instead of sending them.

    WARNING: Only for testing.

    Replies are looked up by path in ``responses``. A reply that is an
    exception instance is raised; a dict is passed through
    ``response_type.from_dict`` when a type was requested.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        """
        Initialize recorder.

        Args:
            responses: Optional {path: reply} table
        """
        self.responses: Dict[str, Any] = dict(responses or {})
        self.requests: List[RecordedRequest] = []

    async def post(
        self,
        path: str,
        body: Any,
        response_type: Optional[type] = None,
        data_format: RequestDataFormat = RequestDataFormat.JSON,
    ) -> Any:
        """Record a POST."""
        self.requests.append(RecordedRequest("POST", path, body, response_type, data_format))
        return self._reply(path, response_type)

    async def get(
        self,
        path: str,
        response_type: Optional[type] = None,
        data_format: RequestDataFormat = RequestDataFormat.JSON,
    ) -> Any:
        """Record a GET."""
        self.requests.append(RecordedRequest("GET", path, None, response_type, data_format))
        return self._reply(path, response_type)

    @property
    def last(self) -> RecordedRequest:
        """Most recent call."""
        return self.requests[-1]

    def _reply(self, path: str, response_type: Optional[type]) -> Any:
        reply = self.responses.get(path)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict) and response_type is not None:
            return response_type.from_dict(reply)
        return reply
