# tests/unit/ai/test_grid.py
# Unit tests for 2x2 grid compositing (layout, padding, cover-fit & degraded mode)

import io

from PIL import Image

from create_image.ai.grid import (
    BACKGROUND_RGBA,
    GRID_LAYOUT,
    composite_to_grid,
    grid_edge,
    pad_images,
)
from create_image.ai.types import Resolution

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


def _open(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data)).convert("RGBA")


class TestLayout:
    # * Verify grid edges for both resolutions
    def test_edges(self):
        assert grid_edge(Resolution.TWO_K) == 2056
        assert grid_edge(Resolution.FOUR_K) == 4104

    # * Verify fixed tile positions
    def test_positions(self):
        assert GRID_LAYOUT[Resolution.TWO_K].positions == [
            (0, 0),
            (1032, 0),
            (0, 1032),
            (1032, 1032),
        ]


class TestPadImages:
    # * Verify padding repeats the first image
    def test_pads_with_first(self):
        assert pad_images([b"a", b"b"]) == [b"a", b"b", b"a", b"a"]

    # * Verify extras beyond four are dropped
    def test_truncates(self):
        assert pad_images([b"1", b"2", b"3", b"4", b"5"]) == [b"1", b"2", b"3", b"4"]

    # * Verify empty input pads w/ empty placeholders
    def test_empty(self):
        assert pad_images([]) == [b"", b"", b"", b""]


class TestCompositeToGrid:
    # * Verify four tiles land in their quadrants w/ the gap showing background
    def test_four_images(self, make_png):
        images = [make_png(c) for c in (RED, GREEN, BLUE, WHITE)]
        grid = _open(composite_to_grid(images, Resolution.TWO_K))

        assert grid.size == (2056, 2056)
        assert grid.getpixel((512, 512))[:3] == RED
        assert grid.getpixel((1032 + 512, 512))[:3] == GREEN
        assert grid.getpixel((512, 1032 + 512))[:3] == BLUE
        assert grid.getpixel((1032 + 512, 1032 + 512))[:3] == WHITE
        # gap column between tiles
        assert grid.getpixel((1028, 100)) == BACKGROUND_RGBA

    # * Verify missing cells repeat the first image
    def test_partial_padding(self, make_png):
        grid = _open(composite_to_grid([make_png(RED), make_png(GREEN)], Resolution.TWO_K))

        assert grid.getpixel((1032 + 512, 512))[:3] == GREEN
        assert grid.getpixel((512, 1032 + 512))[:3] == RED
        assert grid.getpixel((1032 + 512, 1032 + 512))[:3] == RED

    # * Verify 4K output dimensions
    def test_four_k(self, make_png):
        grid = _open(composite_to_grid([make_png(RED)], Resolution.FOUR_K))
        assert grid.size == (4104, 4104)

    # * Verify non-square input is cover-fitted (cropped, not letterboxed)
    def test_cover_fit(self, make_png):
        wide = make_png(RED, size=(400, 100))
        grid = _open(composite_to_grid([wide] * 4, Resolution.TWO_K))

        # top-left & bottom-right corners of the first tile are filled
        assert grid.getpixel((0, 0))[:3] == RED
        assert grid.getpixel((1023, 1023))[:3] == RED

    # * Verify deterministic output for identical input
    def test_deterministic(self, make_png):
        images = [make_png(RED), make_png(BLUE)]
        assert composite_to_grid(images) == composite_to_grid(images)

    # * Verify undecodable input degrades to the first image unmodified
    def test_degraded_mode(self):
        assert composite_to_grid([b"not an image", b"x"]) == b"not an image"

    # * Verify no images degrades to empty bytes
    def test_no_images(self):
        assert composite_to_grid([]) == b""
