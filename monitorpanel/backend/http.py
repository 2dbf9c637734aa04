"""
HTTP 后端实现 - 使用 httpx 把透传请求发送到本地后端进程。

请求地址为 <base_url>/<hub><url>，每个请求都带上 x-dfm-nonce 头，
后端据此拒绝来自其他进程的请求。
"""

from typing import Any

import httpx
from loguru import logger

from monitorpanel.backend.base import Backend
from monitorpanel.errors import BackendError

NONCE_HEADER = "x-dfm-nonce"


class HttpBackend(Backend):
    """
    基于 httpx.AsyncClient 的后端实现。

    属性:
        base_url: 后端基础地址（不含 hub）
        nonce: 请求认证 nonce
        timeout_s: 单次请求超时（秒）
    """

    def __init__(
        self,
        base_url: str,
        nonce: str = "",
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.nonce = nonce
        self.timeout_s = timeout_s
        self._client = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    def _url_for(self, hub: str, url: str) -> str:
        if not url.startswith("/"):
            url = "/" + url
        return f"{self.base_url}/{hub}{url}"

    async def request(self, hub: str, method: str, url: str, data: Any = None) -> Any:
        target = self._url_for(hub, url)
        logger.debug(f"{method} {target}")

        try:
            r = await self._client.request(
                method,
                target,
                json=data,
                headers={NONCE_HEADER: self.nonce},
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BackendError(
                f"{method} {url} failed with status {e.response.status_code}: {e.response.text}",
                status=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(f"{method} {url} failed: {e}") from e

        if not r.content:
            return None
        if "json" in r.headers.get("content-type", ""):
            try:
                return r.json()
            except ValueError as e:
                raise BackendError(f"{method} {url} returned invalid JSON: {e}", status=r.status_code) from e
        return r.text

    async def close(self) -> None:
        await self._client.aclose()
