"""
HTTP client for the HypertroQ backend.

Part of HQ-12: Typed API errors

Sends JSON (or form / multipart) requests with the session's bearer token
and turns responses into plain decoded data:

- 2xx: decoded JSON body; 204 or an empty body yields None; a body that
  is not JSON raises InvalidResponseError
- non-2xx: the APIError subclass for the status, with the message pulled
  from the backend's error envelope
- 401 on an authenticated request: the session is expired first, which
  clears stored credentials and fires the unauthorized listeners
- no response (connection refused, timeout): TransportError
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from application.exceptions import (
    DEFAULT_ERROR_MESSAGE,
    InvalidResponseError,
    TransportError,
    error_for_status,
    extract_error_message,
)
from application.session_context import SessionContext

logger = logging.getLogger(__name__)


def normalize_list(data: Any) -> List[Any]:
    """
    Flatten a list response.

    The backend answers list endpoints either with a bare array or with a
    paginated envelope holding the array under `items` or `data`.
    Anything else normalizes to an empty list.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("items", "data"):
            value = data.get(key)
            if isinstance(value, list):
                return value
    return []


class ApiClient:
    """
    Async HTTP client for the backend's REST API.

    Usage:
        >>> api = ApiClient("http://127.0.0.1:8000/api/v1", session=session)
        >>> programs = await api.get("/programs", params={"limit": 50})
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[SessionContext] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root (e.g., "http://127.0.0.1:8000/api/v1")
            session: Session context supplying the bearer token
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def _headers(self, requires_auth: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if requires_auth and self._session is not None:
            token = self._session.access_token
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        requires_auth: bool = True,
    ) -> Any:
        """
        Send a request and decode the response.

        Raises:
            APIError: (subclass per status) on a non-2xx response
            TransportError: if the backend is unreachable or times out
        """
        url = self._url(path)
        logger.debug("%s %s", method, url)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    data=data,
                    files=files,
                    headers=self._headers(requires_auth),
                )
        except httpx.TimeoutException as e:
            logger.error(f"Backend timeout: {method} {url}: {e}")
            raise TransportError("The request timed out. Please try again.") from e
        except httpx.TransportError as e:
            logger.error(f"Backend unavailable at {self._base_url}: {e}")
            raise TransportError() from e

        return self._handle_response(response, requires_auth)

    def _handle_response(self, response: httpx.Response, requires_auth: bool) -> Any:
        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                logger.error(f"Backend sent unreadable body: {response.status_code} {response.url}")
                raise InvalidResponseError(status_code=response.status_code) from e

        try:
            body = response.json()
        except ValueError:
            body = {"message": response.reason_phrase or DEFAULT_ERROR_MESSAGE}

        message = extract_error_message(body)
        status = response.status_code
        if status >= 500:
            logger.error(f"Backend error: {status} - {message}")
        else:
            logger.warning(f"Backend rejected request: {status} - {message}")

        if status == 401 and requires_auth and self._session is not None:
            self._session.expire()

        raise error_for_status(status, message, body)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return await self.request("GET", path, params=params, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)
