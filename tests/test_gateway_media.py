from unittest.mock import patch

import pytest

from app.config import settings
from app.errors import UpstreamError
from app.gateway import media
from app.gateway.media import MediaJobProvider, app_root
from tests.conftest import SAMPLE_IMAGE_URL, mock_async_client, mock_httpx_response


ROUTING_ID = "fal-ai/flux-2"
QUEUE_ROOT = "https://queue.fal.run/fal-ai/flux-2/requests/req-42"


def _ticket(**extra) -> dict:
    return {
        "request_id": "req-42",
        "status_url": f"{QUEUE_ROOT}/status",
        "response_url": QUEUE_ROOT,
        **extra,
    }


def _status(status: str, logs=None, **extra):
    return mock_httpx_response(200, {"status": status, "logs": logs or [], **extra})


def _result(payload: dict):
    return mock_httpx_response(200, payload)


class TestAppRoot:
    def test_strips_sub_path(self):
        assert app_root("fal-ai/pika/v2.2/text-to-video") == "fal-ai/pika"

    def test_two_segments_unchanged(self):
        assert app_root("fal-ai/flux-2") == "fal-ai/flux-2"


class TestRun:
    @pytest.mark.asyncio
    async def test_submit_poll_fetch(self):
        client = mock_async_client(
            post=mock_httpx_response(200, _ticket()),
            get=[
                _status("IN_QUEUE"),
                _status("IN_PROGRESS", logs=[{"message": "step 1"}]),
                _status("COMPLETED", logs=[{"message": "step 1"}, {"message": "step 2"}]),
                _result({"images": [{"url": SAMPLE_IMAGE_URL}]}),
            ],
        )
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client):
            upstream = await media.run(ROUTING_ID, {"prompt": "a fox"})

        assert upstream.request_id == "req-42"
        assert upstream.payload == {"images": [{"url": SAMPLE_IMAGE_URL}]}
        assert upstream.logs == ["step 1", "step 2"]

        submit = client.post.call_args
        assert submit.args[0] == "https://queue.fal.run/fal-ai/flux-2"
        assert submit.kwargs["json"] == {"prompt": "a fox"}
        assert submit.kwargs["headers"]["Authorization"] == "Key fal-test-key"

        status_call = client.get.call_args_list[0]
        assert status_call.args[0] == f"{QUEUE_ROOT}/status"
        assert status_call.kwargs["params"] == {"logs": 1}
        assert client.get.call_args_list[-1].args[0] == QUEUE_ROOT

    @pytest.mark.asyncio
    async def test_falls_back_to_derived_urls(self):
        client = mock_async_client(
            post=mock_httpx_response(200, {"request_id": "abc"}),
            get=[_status("COMPLETED"), _result({"video": {"url": "v.mp4"}})],
        )
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client):
            await media.run("fal-ai/pika/v2.2/text-to-video", {"prompt": "waves"})

        urls = [c.args[0] for c in client.get.call_args_list]
        assert urls == [
            "https://queue.fal.run/fal-ai/pika/requests/abc/status",
            "https://queue.fal.run/fal-ai/pika/requests/abc",
        ]

    @pytest.mark.asyncio
    async def test_queue_url_from_settings(self):
        settings.FAL_QUEUE_URL = "http://localhost:9000/"
        client = mock_async_client(
            post=mock_httpx_response(200, {"request_id": "abc"}),
            get=[_status("COMPLETED"), _result({})],
        )
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client):
            await media.run(ROUTING_ID, {"prompt": "x"})
        assert client.post.call_args.args[0] == "http://localhost:9000/fal-ai/flux-2"

    @pytest.mark.asyncio
    async def test_submit_error_raises_with_status(self):
        client = mock_async_client(post=mock_httpx_response(429, {"detail": "Too many requests"}))
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client):
            with pytest.raises(UpstreamError) as exc_info:
                await media.run(ROUTING_ID, {"prompt": "x"})
        assert "429" in exc_info.value.message
        assert exc_info.value.upstream_status == 429
        client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_request_id_raises(self):
        client = mock_async_client(post=mock_httpx_response(200, {"status": "IN_QUEUE"}))
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client):
            with pytest.raises(UpstreamError, match="without a request id"):
                await media.run(ROUTING_ID, {"prompt": "x"})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state", ["FAILED", "ERROR", "CANCELLED"])
    async def test_failed_state_raises(self, state):
        client = mock_async_client(
            post=mock_httpx_response(200, _ticket()),
            get=[_status("IN_PROGRESS"), _status(state, error="NSFW content detected")],
        )
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client):
            with pytest.raises(UpstreamError, match="NSFW content detected"):
                await media.run(ROUTING_ID, {"prompt": "x"})
        assert client.get.call_count == 2

    @pytest.mark.asyncio
    async def test_completed_with_error_raises(self):
        client = mock_async_client(
            post=mock_httpx_response(200, _ticket()),
            get=[_status("COMPLETED", error="model crashed")],
        )
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client):
            with pytest.raises(UpstreamError, match="model crashed"):
                await media.run(ROUTING_ID, {"prompt": "x"})

    @pytest.mark.asyncio
    async def test_times_out(self):
        settings.GENERATION_TIMEOUT = 0.0001
        client = mock_async_client(
            post=mock_httpx_response(200, _ticket()),
            get=[_status("IN_PROGRESS") for _ in range(50)],
        )
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client), \
             patch("app.gateway.media.time") as clock:
            clock.monotonic.side_effect = [0.0, 10.0]
            with pytest.raises(UpstreamError, match="timed out"):
                await media.run(ROUTING_ID, {"prompt": "x"})
        assert client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_result_fetch_error_raises(self):
        client = mock_async_client(
            post=mock_httpx_response(200, _ticket()),
            get=[_status("COMPLETED"), mock_httpx_response(500, {"detail": "storage unavailable"})],
        )
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client):
            with pytest.raises(UpstreamError, match="storage unavailable"):
                await media.run(ROUTING_ID, {"prompt": "x"})

    @pytest.mark.asyncio
    async def test_missing_key_raises_before_any_call(self):
        settings.reset()
        client = mock_async_client()
        with patch("app.gateway.base.httpx.AsyncClient", return_value=client), \
             patch.dict("os.environ", {}, clear=True):
            with pytest.raises(UpstreamError, match="Unauthorized"):
                await media.run(ROUTING_ID, {"prompt": "x"})
        client.post.assert_not_called()


class TestPollInterval:
    def test_default(self):
        settings.reset()
        with patch.dict("os.environ", {}, clear=True):
            assert MediaJobProvider().poll_interval() == 1.0

    def test_from_settings(self):
        settings.FAL_POLL_INTERVAL = 2.5
        assert MediaJobProvider().poll_interval() == 2.5
