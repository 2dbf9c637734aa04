"""Unit tests for the per-view request bus."""

import asyncio

import pytest

from monitorpanel.bus.events import ViewRequest
from monitorpanel.bus.queue import RequestBus


def _request(view_id, method="PersistState", **fields):
    return ViewRequest(view_id=view_id, payload={"method": method, **fields})


class TestViewRequest:
    """Test inbound message wrapping."""

    def test_method_and_fields(self):
        request = ViewRequest.from_message("v1", {"method": "OpenInNewWindow", "url": "abc"})

        assert request.method == "OpenInNewWindow"
        assert request.get("url") == "abc"
        assert request.get("missing", 42) == 42

    def test_non_object_message_has_empty_method(self):
        assert ViewRequest.from_message("v1", "hello").method == ""

    def test_non_string_method_is_empty(self):
        assert ViewRequest.from_message("v1", {"method": 7}).method == ""


class TestRequestBus:
    """Test ordering and isolation of request lanes."""

    @pytest.mark.asyncio
    async def test_lane_preserves_order(self):
        bus = RequestBus()
        seen = []

        async def handler(request):
            await asyncio.sleep(0)
            seen.append(request.get("n"))

        bus.open_lane("v1", handler)
        for n in range(10):
            assert bus.publish_request(_request("v1", n=n))
        await bus.join("v1")

        assert seen == list(range(10))
        bus.close_all()

    @pytest.mark.asyncio
    async def test_handler_error_does_not_stop_lane(self):
        bus = RequestBus()
        seen = []

        async def handler(request):
            if request.get("n") == 0:
                raise RuntimeError("boom")
            seen.append(request.get("n"))

        bus.open_lane("v1", handler)
        bus.publish_request(_request("v1", n=0))
        bus.publish_request(_request("v1", n=1))
        await bus.join("v1")

        assert seen == [1]
        assert bus.is_open("v1")
        bus.close_all()

    @pytest.mark.asyncio
    async def test_publish_to_unknown_view_is_dropped(self):
        bus = RequestBus()

        assert bus.publish_request(_request("nobody")) is False

    @pytest.mark.asyncio
    async def test_open_lane_twice_raises(self):
        bus = RequestBus()

        async def handler(request):
            pass

        bus.open_lane("v1", handler)
        with pytest.raises(ValueError):
            bus.open_lane("v1", handler)
        bus.close_all()

    @pytest.mark.asyncio
    async def test_close_lane_lets_in_flight_request_finish(self):
        bus = RequestBus()
        started = asyncio.Event()
        release = asyncio.Event()
        finished = []

        async def handler(request):
            started.set()
            await release.wait()
            finished.append(request.get("n"))

        bus.open_lane("v1", handler)
        bus.publish_request(_request("v1", n=1))
        bus.publish_request(_request("v1", n=2))
        await started.wait()

        bus.close_lane("v1")
        release.set()
        for _ in range(5):
            await asyncio.sleep(0)

        assert finished == [1]
        assert not bus.is_open("v1")
        assert bus.publish_request(_request("v1", n=3)) is False

    @pytest.mark.asyncio
    async def test_lanes_are_independent(self):
        bus = RequestBus()
        release = asyncio.Event()
        seen = []

        async def blocked(request):
            await release.wait()
            seen.append("a")

        async def quick(request):
            seen.append("b")

        bus.open_lane("a", blocked)
        bus.open_lane("b", quick)
        bus.publish_request(_request("a"))
        bus.publish_request(_request("b"))
        await bus.join("b")

        assert seen == ["b"]
        release.set()
        await bus.join("a")
        assert seen == ["b", "a"]
        assert bus.lane_count == 2
        bus.close_all()
        assert bus.lane_count == 0
