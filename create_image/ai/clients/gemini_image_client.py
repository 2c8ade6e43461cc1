# create_image/ai/clients/gemini_image_client.py
# Single-image Gemini generateContent client w/ retry, exponential backoff, deadline & cancellation
#
# Orchestrates: cancel check -> request -> (HTTP error? backoff & retry) -> extract inlineData
# Always returns ImageCallResult, never raises exceptions to callers

from __future__ import annotations

import time
from typing import Any, Callable, Optional

import httpx

from ..models import REFERENCE_GRID_MODEL
from ..types import ErrorKind, ImageCallResult, Resolution
from ...core.cancellation import CancelToken, Deadline
from ...core.exceptions import (
    ContentError,
    GenerationCancelledError,
    GenerationTimeoutError,
    TransientProviderError,
)
from ...core.verbose import vlog, vlog_ai_request, vlog_ai_response, vlog_think

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"

# * Retry policy: 3 attempts, delay doubles from 2s (2s, 4s)
MAX_ATTEMPTS = 3
BASE_RETRY_DELAY = 2.0

# * Wall-clock budget for one image incl. all attempts & backoff
DEFAULT_CALL_BUDGET = 180.0

# per-request HTTP timeout
REQUEST_TIMEOUT = 120.0

REFERENCE_PREFIX = (
    "Match the visual style, colours, composition shown in this reference. "
    "Generate a NEW image following this visual language."
)

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_HARASSMENT",
)

PROVIDER_NAME = "gemini"


# * Build the generateContent request body
def build_payload(
    prompt: str,
    reference_image_base64: str | None = None,
    system_instruction: str | None = None,
    resolution: Resolution | str = Resolution.TWO_K,
) -> dict[str, Any]:
    resolution = Resolution.parse(resolution)
    parts: list[dict[str, Any]] = []
    if reference_image_base64:
        parts.append(
            {"inlineData": {"mimeType": "image/png", "data": reference_image_base64}}
        )
        parts.append({"text": REFERENCE_PREFIX})
    parts.append({"text": prompt})

    payload: dict[str, Any] = {
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": {
            "responseModalities": ["IMAGE"],
            "imageConfig": {"aspectRatio": "1:1", "imageSize": resolution.value},
        },
        "safetySettings": [
            {"category": category, "threshold": "BLOCK_NONE"}
            for category in SAFETY_CATEGORIES
        ],
    }
    if system_instruction:
        payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
    return payload


# * Pull base64 image data from the first candidate's first part (None if absent)
def extract_image_data(data: Any) -> str | None:
    try:
        part = data["candidates"][0]["content"]["parts"][0]
        image = part["inlineData"]["data"]
    except (KeyError, IndexError, TypeError):
        return None
    return image or None


class GeminiImageClient:
    def __init__(
        self,
        model: str = REFERENCE_GRID_MODEL,
        base_url: str = GEMINI_API_BASE,
        http_client: Optional[httpx.Client] = None,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay: float = BASE_RETRY_DELAY,
        call_budget: float | None = DEFAULT_CALL_BUDGET,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._http = http_client
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.call_budget = call_budget
        self._sleep = sleep
        self._clock = clock

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    # delay before the retry that follows `attempt` (1-based)
    def backoff_delay(self, attempt: int) -> float:
        return self.base_delay * (2 ** (attempt - 1))

    # * Generate one image; returns ImageCallResult (never raises)
    def generate_image(
        self,
        prompt: str,
        api_key: str,
        reference_image_base64: str | None = None,
        system_instruction: str | None = None,
        *,
        resolution: Resolution = Resolution.TWO_K,
        cancel: Optional[CancelToken] = None,
    ) -> ImageCallResult:
        payload = build_payload(
            prompt, reference_image_base64, system_instruction, resolution
        )
        deadline = Deadline(self.call_budget, clock=self._clock)
        attempts = 0

        try:
            for attempt in range(1, self.max_attempts + 1):
                attempts = attempt
                if cancel is not None:
                    cancel.raise_if_cancelled()
                if deadline.expired:
                    raise GenerationTimeoutError(
                        f"Image generation exceeded {self.call_budget:.0f}s budget"
                    )

                try:
                    image = self._request(payload, api_key, attempt, deadline)
                    return ImageCallResult(
                        success=True, image_data=image, attempts=attempt
                    )
                except TransientProviderError as e:
                    if attempt >= self.max_attempts:
                        raise
                    delay = self.backoff_delay(attempt)
                    vlog_think(
                        f"Attempt {attempt}/{self.max_attempts} failed ({e}), "
                        f"retrying in {delay:.1f}s"
                    )
                    if deadline.would_exceed(delay):
                        raise GenerationTimeoutError(
                            f"Image generation exceeded {self.call_budget:.0f}s budget "
                            f"(last error: {e})"
                        ) from e
                    self._wait(delay, cancel)

            # unreachable: the loop either returns or raises
            raise TransientProviderError("No attempts made", PROVIDER_NAME)
        except TransientProviderError as e:
            return ImageCallResult(
                success=False,
                error=str(e),
                error_kind=ErrorKind.TRANSIENT_PROVIDER,
                attempts=attempts,
            )
        except ContentError as e:
            return ImageCallResult(
                success=False,
                error=str(e),
                error_kind=ErrorKind.CONTENT,
                attempts=attempts,
            )
        except GenerationCancelledError as e:
            return ImageCallResult(
                success=False,
                error=str(e),
                error_kind=ErrorKind.CANCELLED,
                attempts=attempts,
            )
        except GenerationTimeoutError as e:
            return ImageCallResult(
                success=False,
                error=str(e),
                error_kind=ErrorKind.TIMEOUT,
                attempts=attempts,
            )

    # one HTTP round trip; raises TransientProviderError / ContentError
    def _request(
        self,
        payload: dict[str, Any],
        api_key: str,
        attempt: int,
        deadline: Deadline,
    ) -> str:
        vlog_ai_request(
            provider=PROVIDER_NAME,
            model=self.model,
            prompt_length=len(payload["contents"][0]["parts"][-1]["text"]),
            attempt=attempt,
            max_attempts=self.max_attempts,
        )

        remaining = deadline.remaining()
        timeout = REQUEST_TIMEOUT if remaining is None else min(REQUEST_TIMEOUT, remaining)

        start_time = time.time()
        try:
            response = self._post(payload, api_key, timeout)
        except httpx.HTTPError as e:
            vlog_ai_response(PROVIDER_NAME, self.model, 0, False, error=str(e))
            raise TransientProviderError(str(e) or type(e).__name__, PROVIDER_NAME) from e
        duration_ms = (time.time() - start_time) * 1000

        if not response.is_success:
            error = f"HTTP {response.status_code}: {response.text}"
            vlog_ai_response(
                PROVIDER_NAME, self.model, 0, False, duration_ms=duration_ms, error=error
            )
            raise TransientProviderError(error, PROVIDER_NAME, response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ContentError(f"Invalid JSON in response: {e}") from e

        image = extract_image_data(data)
        if image is None:
            vlog_ai_response(
                PROVIDER_NAME,
                self.model,
                0,
                False,
                duration_ms=duration_ms,
                error="No image data in response",
            )
            raise ContentError("No image data in response")

        vlog_ai_response(
            PROVIDER_NAME, self.model, len(image), True, duration_ms=duration_ms
        )
        return image

    def _post(
        self, payload: dict[str, Any], api_key: str, timeout: float
    ) -> httpx.Response:
        params = {"key": api_key}
        if self._http is not None:
            return self._http.post(
                self.endpoint, params=params, json=payload, timeout=timeout
            )
        with httpx.Client(timeout=timeout) as client:
            return client.post(self.endpoint, params=params, json=payload)

    # backoff sleep that wakes early on cancellation
    def _wait(self, seconds: float, cancel: Optional[CancelToken]) -> None:
        vlog("AI", f"Backing off {seconds:.1f}s")
        if self._sleep is not None:
            self._sleep(seconds)
        elif cancel is not None:
            cancel.wait(seconds)
        else:
            time.sleep(seconds)
        if cancel is not None:
            cancel.raise_if_cancelled()
