"""
HTTP Request Adapter - Implements RequestPort with httpx.

Attaches the current session's bearer token, resolved through the token
service on every call. Tokens are never cached here.
"""

from typing import Any, Callable, Dict, Optional

import httpx
import structlog

from mesh_session.errors import (
    AuthenticationError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from mesh_session.ports.request_port import RequestPort, RequestDataFormat
from mesh_session.ports.token_port import TokenServicePort

logger = structlog.get_logger(__name__)

_VALIDATION_STATUSES = (400, 409, 422)


class HttpRequestAdapter(RequestPort):
    """
    httpx-based platform API client.

    Status mapping:
        401, 403       -> AuthenticationError
        404            -> NotFoundError
        400, 409, 422  -> ValidationError
        other >= 400   -> TransportError
    Timeouts and connection failures -> TransportError
    """

    def __init__(
        self,
        *,
        base_url: str,
        token_service: TokenServicePort,
        authentication_id: Callable[[], Optional[str]],
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP request adapter.

        Args:
            base_url: Platform API base URL
            token_service: Resolves authentication ids to access tokens
            authentication_id: Returns the current authentication id, or None
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport override
        """
        self._base_url = base_url.rstrip("/") + "/"
        self._token_service = token_service
        self._authentication_id = authentication_id
        self._timeout = timeout
        self._transport = transport

    async def post(
        self,
        path: str,
        body: Any,
        response_type: Optional[type] = None,
        data_format: RequestDataFormat = RequestDataFormat.JSON,
    ) -> Any:
        """POST a body to an API path."""
        payload = body.to_dict() if hasattr(body, "to_dict") else body
        kwargs: Dict[str, Any] = {}
        if data_format == RequestDataFormat.FORM:
            kwargs["data"] = {k: v for k, v in payload.items() if v is not None}
        else:
            kwargs["json"] = payload

        response = await self._send("POST", path, **kwargs)
        return self._parse(response, response_type)

    async def get(
        self,
        path: str,
        response_type: Optional[type] = None,
        data_format: RequestDataFormat = RequestDataFormat.JSON,
    ) -> Any:
        """GET an API path."""
        response = await self._send("GET", path)
        return self._parse(response, response_type)

    async def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        authentication_id = self._authentication_id()
        if not authentication_id:
            return headers

        try:
            access_token = await self._token_service.get_access_token(authentication_id)
        except NotFoundError:
            # Pair expired or evicted from the store; send without a bearer
            logger.warning("api_request_session_unresolved", authentication_id=authentication_id)
            return headers

        headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = await self._headers()
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path.lstrip("/"), headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("api_request_timeout", method=method, path=path, error=str(e))
            raise TransportError(f"Request to {path} timed out")
        except httpx.RequestError as e:
            logger.warning("api_request_connection_error", method=method, path=path, error=str(e))
            raise TransportError(f"Failed to connect for {path}: {e}")

        if response.status_code >= 400:
            self._raise_for_status(response, method, path)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
        status = response.status_code
        message = f"{method} {path} failed ({status}): {response.text[:200]}"
        logger.warning("api_request_failed", method=method, path=path, status_code=status)

        if status in (401, 403):
            raise AuthenticationError(message, status_code=status)
        if status == 404:
            raise NotFoundError(message, status_code=status)
        if status in _VALIDATION_STATUSES:
            raise ValidationError(message, status_code=status)
        raise TransportError(message, status_code=status)

    @staticmethod
    def _parse(response: httpx.Response, response_type: Optional[type]) -> Any:
        if response.status_code == 204 or not response.content:
            return None

        try:
            data = response.json()
        except ValueError:
            raise TransportError(
                f"Invalid JSON response from API: {response.text[:200]}",
                status_code=response.status_code,
            )

        if response_type is not None and data is not None:
            try:
                return response_type.from_dict(data)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise TransportError(f"Unexpected response shape: {e}", status_code=response.status_code)
        return data
