"""
HTTP transport: sends a PreparedRequest through httpx.AsyncClient.

Retries, TLS and connection pooling are left entirely to httpx.
"""

import json
import logging
from typing import Optional

import httpx

from restree.errors import TransportError
from restree.models.http import PreparedRequest, TransportResponse

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "restree/0.1.0"

logger = logging.getLogger("restree.transport.http")


class Transport:
    """Anything able to turn a PreparedRequest into a TransportResponse."""

    async def send(self, request: PreparedRequest) -> TransportResponse:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class HttpTransport(Transport):
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": user_agent},
            timeout=timeout,
        )

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def send(self, request: PreparedRequest) -> TransportResponse:
        content = None if request.body is None else json.dumps(request.body)
        try:
            resp = await self._client.request(
                request.method.upper(),
                request.url,
                headers=request.headers,
                content=content,
            )
        except httpx.RequestError as e:
            logger.warning(f"{request.method.upper()} {request.url} failed: {e}")
            raise TransportError(f"{request.method.upper()} {request.url} failed: {e}") from e
        return TransportResponse(status_code=resp.status_code, text=resp.text)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
