"""
SkillSwap Hub - async API client for the admin endpoints
"""
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from skillswap.config import ClientConfig
from skillswap.exceptions import APIError, NetworkError
from skillswap.logging_config import logger


@dataclass
class APIResponse:
    """API Response wrapper"""
    status: int
    data: Any
    headers: Dict[str, str]

    @property
    def success(self) -> bool:
        return 200 <= self.status < 300


def error_message(data: Any, fallback: str) -> str:
    """Pull `message` out of an error body, else use the call site's fallback"""
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return fallback


class SkillSwapAPIClient:
    """
    Thin wrapper over httpx.AsyncClient that sends the admin session cookie
    and turns non-2xx answers and transport failures into exceptions.

    Usage:
        async with SkillSwapAPIClient(config) as api:
            data = await api.get_json("/api/support/messages", params={"page": "1"})
    """

    def __init__(self, config: Optional[ClientConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or ClientConfig()
        self.base_url = self.config.api_base_url.rstrip('/')
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "SkillSwapAPIClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                cookies=self.config.get_cookies(),
                timeout=self.config.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> APIResponse:
        """Make HTTP request; only transport failures raise here"""
        client = self._ensure_client()
        started = time.perf_counter()
        try:
            response = await client.request(method, path, params=params, json=data)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed: {type(e).__name__}: {e}")
            raise NetworkError(path=path) from e

        duration_ms = (time.perf_counter() - started) * 1000
        logger.log_request(method, path, response.status_code, duration_ms)

        try:
            response_data = response.json()
        except ValueError:
            response_data = {}

        return APIResponse(
            status=response.status_code,
            data=response_data,
            headers=dict(response.headers),
        )

    async def _checked(
        self,
        method: str,
        path: str,
        fallback: str,
        params: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        response = await self.request(method, path, params=params, data=data)
        if not response.success:
            raise APIError(response.status, error_message(response.data, fallback), path=path)
        return response.data

    async def get_json(self, path: str, params: Optional[Dict[str, str]] = None,
                       fallback: str = "Failed to load") -> Any:
        """GET and return the decoded body, raising APIError on non-2xx"""
        return await self._checked("GET", path, fallback, params=params)

    async def send(self, method: str, path: str, data: Optional[Dict[str, Any]] = None,
                   fallback: str = "Failed to save") -> Any:
        """POST/PATCH/DELETE and return the decoded body, raising APIError on non-2xx"""
        return await self._checked(method.upper(), path, fallback, data=data)
