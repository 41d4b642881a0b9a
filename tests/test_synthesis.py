"""
Tests for the synthesis HTTP client (no network: httpx.MockTransport).
"""
import json

import httpx
import pytest

from tts_workbench.core.types import SynthesisError
from tts_workbench.services.synthesis import SynthesisClient, SynthesisParams


def make_client(handler, sleeps=None, **kwargs) -> SynthesisClient:
    sleeps = [] if sleeps is None else sleeps
    return SynthesisClient(
        SynthesisParams("LS", speed=1.2),
        "http://tts.test",
        transport=httpx.MockTransport(handler),
        sleep=sleeps.append,
        **kwargs
    )


class TestSynthesisParams:
    """Tests for parameter validation."""

    def test_defaults_valid(self):
        assert SynthesisParams("LS").validate().speed == 1.0

    def test_missing_voice(self):
        with pytest.raises(ValueError, match="voice"):
            SynthesisParams("").validate()

    @pytest.mark.parametrize("field,value", [
        ("speed", 0.4), ("speed", 1.6), ("volume", 2.0), ("pitch", 0.05), ("pitch", 2.5)
    ])
    def test_out_of_range(self, field, value):
        with pytest.raises(ValueError, match=field):
            SynthesisParams("LS", **{field: value}).validate()

    def test_client_rejects_invalid_params(self):
        with pytest.raises(ValueError):
            SynthesisClient(SynthesisParams("LS", pitch=9.0))


class TestSynthesisClient:
    """Tests for SynthesisClient requests and retry."""

    def test_request_payload(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(200, content=b"RIFFaudio")

        with make_client(handler) as client:
            assert client.synthesize("你好") == b"RIFFaudio"

        method, path, body = seen[0]
        assert (method, path) == ("POST", "/synthesize")
        assert body == {"text": "你好", "spk_name": "LS", "speed": 1.2, "volume": 1.0, "pitch": 1.0}

    def test_callable(self):
        client = make_client(lambda request: httpx.Response(200, content=b"x"))
        assert client("hi") == b"x"

    def test_retries_then_succeeds(self):
        attempts = []
        sleeps = []

        def handler(request):
            attempts.append(1)
            if len(attempts) < 3:
                return httpx.Response(503)
            return httpx.Response(200, content=b"ok")

        client = make_client(handler, sleeps)
        assert client.synthesize("hi") == b"ok"
        assert len(attempts) == 3
        assert sleeps == [1.0, 2.0]

    def test_gives_up_after_max_attempts(self):
        attempts = []
        sleeps = []

        def handler(request):
            attempts.append(1)
            return httpx.Response(500, json={"error": "voice not loaded"})

        client = make_client(handler, sleeps)
        with pytest.raises(SynthesisError, match="voice not loaded") as exc_info:
            client.synthesize("hi")
        assert exc_info.value.status_code == 500
        assert len(attempts) == 3
        assert sleeps == [1.0, 2.0]

    def test_error_without_json_body(self):
        client = make_client(lambda request: httpx.Response(502, content=b"<html>"), max_attempts=1)
        with pytest.raises(SynthesisError, match="HTTP 502"):
            client.synthesize("hi")

    def test_empty_body_is_failure(self):
        client = make_client(lambda request: httpx.Response(200, content=b""), max_attempts=1)
        with pytest.raises(SynthesisError, match="empty"):
            client.synthesize("hi")

    def test_transport_error_is_retried(self):
        attempts = []

        def handler(request):
            attempts.append(1)
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler, max_attempts=2)
        with pytest.raises(SynthesisError, match="Request failed") as exc_info:
            client.synthesize("hi")
        assert exc_info.value.status_code is None
        assert len(attempts) == 2
