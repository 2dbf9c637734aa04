"""Unit tests for the httpx backend.

Requests are served by httpx.MockTransport, no network access.
"""

import json

import httpx
import pytest

from monitorpanel.backend.http import NONCE_HEADER, HttpBackend
from monitorpanel.errors import BackendError


def _backend(handler, **kwargs):
    return HttpBackend(
        "http://localhost:7072/a/p/i/",
        nonce=kwargs.pop("nonce", "secret"),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestHttpBackend:
    """Test request forwarding and error mapping."""

    @pytest.mark.asyncio
    async def test_builds_url_and_sends_nonce(self):
        captured = {}

        def handler(request: httpx.Request):
            captured["method"] = request.method
            captured["url"] = str(request.url)
            captured["nonce"] = request.headers.get(NONCE_HEADER)
            captured["body"] = json.loads(request.content) if request.content else None
            return httpx.Response(200, json={"ok": True})

        backend = _backend(handler)
        result = await backend.request("my-hub", "POST", "/orchestrations/abc/purge", {"force": True})
        await backend.close()

        assert result == {"ok": True}
        assert captured == {
            "method": "POST",
            "url": "http://localhost:7072/a/p/i/my-hub/orchestrations/abc/purge",
            "nonce": "secret",
            "body": {"force": True},
        }

    @pytest.mark.asyncio
    async def test_url_without_leading_slash(self):
        urls = []

        def handler(request: httpx.Request):
            urls.append(str(request.url))
            return httpx.Response(204)

        backend = _backend(handler)
        result = await backend.request("my-hub", "DELETE", "orchestrations")
        await backend.close()

        assert result is None
        assert urls == ["http://localhost:7072/a/p/i/my-hub/orchestrations"]

    @pytest.mark.asyncio
    async def test_plain_text_response(self):
        backend = _backend(lambda request: httpx.Response(200, text="hello"))

        assert await backend.request("my-hub", "GET", "/about") == "hello"
        await backend.close()

    @pytest.mark.asyncio
    async def test_http_error_status_maps_to_backend_error(self):
        backend = _backend(lambda request: httpx.Response(404, text="no such instance"))

        with pytest.raises(BackendError) as exc_info:
            await backend.request("my-hub", "GET", "/orchestrations/missing")
        await backend.close()

        assert exc_info.value.status == 404
        assert "no such instance" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_maps_to_backend_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend = _backend(handler)

        with pytest.raises(BackendError) as exc_info:
            await backend.request("my-hub", "GET", "/orchestrations")
        await backend.close()

        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_invalid_json_body_maps_to_backend_error(self):
        backend = _backend(lambda request: httpx.Response(
            200, content=b"not json", headers={"content-type": "application/json"},
        ))

        with pytest.raises(BackendError) as exc_info:
            await backend.request("my-hub", "GET", "/orchestrations")
        await backend.close()

        assert exc_info.value.status == 200
        assert "invalid JSON" in str(exc_info.value)
