"""Async HTTP client for the store administration API."""

import logging
from types import TracebackType
from typing import Any

import httpx

from storeadmin.core.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for every non-2xx response.

    ``message`` is the server's ``error`` field verbatim when present, else the
    HTTP reason phrase.
    """

    def __init__(self, status_code: int, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details or []


def _error_from_response(response: httpx.Response) -> ApiError:
    message = response.reason_phrase or f"HTTP {response.status_code}"
    details: list[str] = []
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        if isinstance(body.get("error"), str) and body["error"]:
            message = body["error"]
        if isinstance(body.get("details"), list):
            details = [str(d) for d in body["details"]]
    return ApiError(response.status_code, message, details)


class AdminApiClient:
    """Thin JSON client over ``httpx.AsyncClient``.

    Use as an async context manager, or call :meth:`aclose` when done::

        async with AdminApiClient() as api:
            discount = await api.get(f"/api/discounts/{discount_id}")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.ADMIN_API_BASE_URL,
            timeout=timeout if timeout is not None else settings.ADMIN_API_TIMEOUT_SECONDS,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Returns:
            The parsed body, or None for empty (e.g. 204) responses.

        Raises:
            ApiError: If the response status is not 2xx.
            httpx.HTTPError: If the request could not be sent.
        """
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        response = await self._client.request(method, path, json=json, params=params)
        if not response.is_success:
            error = _error_from_response(response)
            logger.debug("%s %s failed: %s %s", method, path, error.status_code, error.message)
            raise error
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
