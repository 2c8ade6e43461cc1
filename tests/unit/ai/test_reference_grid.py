# tests/unit/ai/test_reference_grid.py
# Unit tests for the four-image reference grid pipeline

import base64
import io
import json

import httpx
from PIL import Image

from create_image.ai.clients.gemini_image_client import GeminiImageClient
from create_image.ai.reference_grid import (
    NO_API_KEY_ERROR,
    PACING_DELAY,
    check_generation_availability,
    generate_reference_grid,
)
from create_image.ai.types import (
    ErrorKind,
    GridGenerationOptions,
    ImageCallResult,
    Resolution,
)
from create_image.core.cancellation import CancelToken


class FakeImageClient:
    # Returns scripted ImageCallResults in call order & records calls

    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    def generate_image(
        self,
        prompt,
        api_key,
        reference_image_base64=None,
        system_instruction=None,
        *,
        resolution=Resolution.TWO_K,
        cancel=None,
    ):
        self.calls.append(
            {
                "prompt": prompt,
                "api_key": api_key,
                "reference": reference_image_base64,
                "system": system_instruction,
                "resolution": resolution,
            }
        )
        return self.results.pop(0)


def _ok(png_b64):
    return ImageCallResult(success=True, image_data=png_b64, attempts=1)


def _fail(error="HTTP 500: boom"):
    return ImageCallResult(
        success=False, error=error, error_kind=ErrorKind.TRANSIENT_PROVIDER, attempts=3
    )


class TestGenerateReferenceGrid:
    # * Verify missing credential fails w/o any call
    def test_no_api_key(self, tmp_path):
        client = FakeImageClient([])
        result = generate_reference_grid(
            tmp_path / "refs", "grid", GridGenerationOptions(), client=client, sleep=lambda s: None
        )

        assert result.success is False
        assert result.errors == [NO_API_KEY_ERROR]
        assert result.error_kind is ErrorKind.CONFIGURATION
        assert client.calls == []
        assert not (tmp_path / "refs").exists()

    # * Verify credential read from GEMINI_API_KEY when GOOGLE_API_KEY is absent
    def test_gemini_api_key_env(self, tmp_path, monkeypatch, png_b64):
        monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
        client = FakeImageClient([_ok(png_b64)] * 4)

        generate_reference_grid(
            tmp_path, "grid", GridGenerationOptions(), client=client, sleep=lambda s: None
        )

        assert all(call["api_key"] == "gem-key" for call in client.calls)

    # * Verify full success writes five files & paces between calls
    def test_all_succeed(self, tmp_path, png_b64):
        sleeps = []
        client = FakeImageClient([_ok(png_b64)] * 4)
        options = GridGenerationOptions(
            description="bold",
            audience="coaches",
            reference_image_base64="cmVm",
            domain_knowledge="rules",
        )

        result = generate_reference_grid(
            tmp_path / "out", "style", options, api_key="k", client=client, sleep=sleeps.append
        )

        assert result.success is True
        assert result.generated_count == 4
        assert result.failed_count == 0
        assert result.errors == []
        assert result.error_kind is None
        assert result.padded is False
        assert result.grid_path == str(tmp_path / "out" / "style.png")
        assert result.individual_paths == [
            str(tmp_path / "out" / f"style-{i}.png") for i in range(1, 5)
        ]
        assert result.grid_size_kb == round((tmp_path / "out" / "style.png").stat().st_size / 1024)
        with Image.open(tmp_path / "out" / "style.png") as grid:
            assert grid.size == (2056, 2056)

        # pacing only between calls, never after the last
        assert sleeps == [PACING_DELAY] * 3
        assert all(c["reference"] == "cmVm" and c["system"] == "rules" for c in client.calls)
        assert "TARGET AUDIENCE: coaches" in client.calls[0]["prompt"]
        assert "kitchen line" in client.calls[0]["prompt"]
        assert "overhead" in client.calls[3]["prompt"]

    # * Verify partial success still composites & records failures
    def test_partial_success(self, tmp_path, png_b64):
        client = FakeImageClient([_fail("HTTP 500: a"), _ok(png_b64), _fail("HTTP 503: b"), _ok(png_b64)])

        result = generate_reference_grid(
            tmp_path, "g", GridGenerationOptions(), api_key="k", client=client, sleep=lambda s: None
        )

        assert result.success is True
        assert result.generated_count == 2
        assert result.failed_count == 2
        assert result.errors == ["Image 1: HTTP 500: a", "Image 3: HTTP 503: b"]
        assert result.error_kind is ErrorKind.PARTIAL_GENERATION
        assert result.padded is True
        assert result.individual_paths == [str(tmp_path / "g-2.png"), str(tmp_path / "g-4.png")]
        assert (tmp_path / "g.png").exists()
        assert not (tmp_path / "g-1.png").exists()

    # * Verify zero successes is terminal w/o a grid
    def test_total_failure(self, tmp_path):
        client = FakeImageClient([_fail()] * 4)

        result = generate_reference_grid(
            tmp_path / "out", "g", GridGenerationOptions(), api_key="k", client=client, sleep=lambda s: None
        )

        assert result.success is False
        assert result.generated_count == 0
        assert result.failed_count == 4
        assert len(result.errors) == 4
        assert result.error_kind is ErrorKind.TOTAL_GENERATION
        assert result.grid_path is None
        assert list((tmp_path / "out").iterdir()) == []

    # * Verify individual image bytes are written unmodified
    def test_individual_bytes(self, tmp_path, png_b64):
        client = FakeImageClient([_ok(png_b64)] * 4)
        generate_reference_grid(
            tmp_path, "g", GridGenerationOptions(), api_key="k", client=client, sleep=lambda s: None
        )
        assert (tmp_path / "g-1.png").read_bytes() == base64.b64decode(png_b64)

    # * Verify resolution is forwarded & controls grid size
    def test_resolution_forwarded(self, tmp_path, png_b64):
        client = FakeImageClient([_ok(png_b64)] + [_fail()] * 3)
        result = generate_reference_grid(
            tmp_path,
            "g",
            GridGenerationOptions(resolution=Resolution.FOUR_K),
            api_key="k",
            client=client,
            sleep=lambda s: None,
        )

        assert all(c["resolution"] is Resolution.FOUR_K for c in client.calls)
        assert result.resolution is Resolution.FOUR_K
        with Image.open(io.BytesIO((tmp_path / "g.png").read_bytes())) as grid:
            assert grid.size == (4104, 4104)

    # * Verify cancellation during pacing stops remaining calls but keeps the grid
    def test_cancel_keeps_completed(self, tmp_path, png_b64):
        cancel = CancelToken()
        client = FakeImageClient([_ok(png_b64)] * 4)

        result = generate_reference_grid(
            tmp_path,
            "g",
            GridGenerationOptions(),
            api_key="k",
            client=client,
            sleep=lambda s: cancel.cancel("stop"),
            cancel=cancel,
        )

        assert len(client.calls) == 1
        assert result.success is True
        assert result.generated_count == 1
        assert result.error_kind is ErrorKind.CANCELLED
        assert (tmp_path / "g-1.png").exists()
        assert (tmp_path / "g.png").exists()

    # * Verify cancellation before any call yields no files
    def test_cancel_before_start(self, tmp_path):
        cancel = CancelToken()
        cancel.cancel()
        client = FakeImageClient([])

        result = generate_reference_grid(
            tmp_path, "g", GridGenerationOptions(), api_key="k", client=client, cancel=cancel
        )

        assert result.success is False
        assert result.error_kind is ErrorKind.CANCELLED
        assert client.calls == []


class TestCheckGenerationAvailability:
    # * Verify unavailable w/o a key
    def test_unavailable(self):
        available, reason = check_generation_availability()
        assert available is False
        assert "GOOGLE_API_KEY" in reason

    # * Verify available w/ a key
    def test_available(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "k")
        assert check_generation_availability() == (True, None)


class TestGridGenerationOptions:
    # * Verify text resolutions are normalized to the enum
    def test_text_resolution(self):
        assert GridGenerationOptions(resolution="4k").resolution is Resolution.FOUR_K

    # * Verify a text resolution flows through the real client w/o crashing the pipeline
    def test_text_resolution_through_client(self, tmp_path):
        sent = []

        def failing_transport(request):
            sent.append(json.loads(request.content))
            return httpx.Response(500, text="boom")

        client = GeminiImageClient(
            http_client=httpx.Client(transport=httpx.MockTransport(failing_transport)),
            sleep=lambda s: None,
        )

        result = generate_reference_grid(
            tmp_path / "out",
            "g",
            GridGenerationOptions(resolution="4K"),
            api_key="k",
            client=client,
            sleep=lambda s: None,
        )

        assert result.success is False
        assert result.error_kind is ErrorKind.TOTAL_GENERATION
        assert result.resolution is Resolution.FOUR_K
        assert sent[0]["generationConfig"]["imageConfig"]["imageSize"] == "4K"
