"""
HTTP client for the speech synthesis backend.

POST {base_url}/synthesize with JSON {text, spk_name, speed, volume, pitch};
the response body is encoded audio, or JSON {"error": ...} on failure.
"""
from __future__ import annotations
from dataclasses import asdict, dataclass
import time
from typing import Callable, Optional
import httpx

from ..core.config import SYNTHESIS_CONFIG
from ..core.types import SynthesisError
from ..utils.logger import logger


@dataclass(frozen=True)
class SynthesisParams:
    """Voice settings sent with every request."""
    spk_name: str
    speed: float = 1.0
    volume: float = 1.0
    pitch: float = 1.0

    def validate(self) -> "SynthesisParams":
        """Raise ValueError for a missing voice or out-of-range settings."""
        if not self.spk_name:
            raise ValueError("A voice (spk_name) must be selected")
        for name, (low, high) in (
            ("speed", SYNTHESIS_CONFIG.speed_range),
            ("volume", SYNTHESIS_CONFIG.volume_range),
            ("pitch", SYNTHESIS_CONFIG.pitch_range),
        ):
            value = getattr(self, name)
            if not low <= value <= high:
                raise ValueError(f"{name} must be within [{low}, {high}], got {value}")
        return self


class SynthesisClient:
    """
    Synchronous synthesis client with bounded retry.

    Each request is attempted up to `max_attempts` times; the wait between
    attempts starts at `initial_backoff_s` and doubles after every failure.
    """

    def __init__(
        self,
        params: SynthesisParams,
        base_url: str = SYNTHESIS_CONFIG.base_url,
        *,
        timeout_s: float = SYNTHESIS_CONFIG.timeout_s,
        max_attempts: int = SYNTHESIS_CONFIG.max_attempts,
        initial_backoff_s: float = SYNTHESIS_CONFIG.initial_backoff_s,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.params = params.validate()
        self.max_attempts = max(1, max_attempts)
        self.initial_backoff_s = initial_backoff_s
        self._sleep = sleep
        self._client = httpx.Client(base_url=base_url, timeout=timeout_s, transport=transport)

    def __enter__(self) -> "SynthesisClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def __call__(self, text: str) -> bytes:
        return self.synthesize(text)

    def synthesize(self, text: str) -> bytes:
        """
        Synthesize one piece of text.

        Returns:
            Encoded audio bytes as sent by the backend

        Raises:
            SynthesisError: Every attempt failed; carries the last failure
        """
        payload = {"text": text, **asdict(self.params)}
        delay = self.initial_backoff_s
        last_error: Optional[SynthesisError] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._request(payload)
            except SynthesisError as e:
                last_error = e
                logger.warning(f"Synthesis attempt {attempt}/{self.max_attempts} failed: {e}")

            if attempt < self.max_attempts:
                self._sleep(delay)
                delay *= 2

        raise last_error

    def _request(self, payload: dict) -> bytes:
        try:
            response = self._client.post(SYNTHESIS_CONFIG.endpoint, json=payload)
        except httpx.HTTPError as e:
            raise SynthesisError(f"Request failed: {e}") from e

        if not response.is_success:
            raise SynthesisError(_error_message(response), status_code=response.status_code)
        if not response.content:
            raise SynthesisError("Backend returned empty audio", status_code=response.status_code)
        return response.content


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"
