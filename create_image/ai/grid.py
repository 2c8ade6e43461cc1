# create_image/ai/grid.py
# Deterministic 2x2 grid compositing w/ Pillow (cover-fit tiles on a dark background)

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps

from .types import Resolution
from ..core.verbose import vlog, vlog_warning

GRID_CELLS = 4
BACKGROUND_RGBA = (26, 35, 50, 255)


@dataclass(frozen=True, slots=True)
class TileLayout:
    tile: int  # tile edge in px
    gap: int  # gap between tiles in px

    @property
    def edge(self) -> int:
        return self.tile * 2 + self.gap

    # top-left corners in fill order: TL, TR, BL, BR
    @property
    def positions(self) -> list[tuple[int, int]]:
        step = self.tile + self.gap
        return [(0, 0), (step, 0), (0, step), (step, step)]


GRID_LAYOUT: dict[Resolution, TileLayout] = {
    Resolution.TWO_K: TileLayout(tile=1024, gap=8),
    Resolution.FOUR_K: TileLayout(tile=2048, gap=8),
}


def grid_edge(resolution: Resolution) -> int:
    return GRID_LAYOUT[resolution].edge


# * Pad to exactly four tiles by repeating the first image (extras ignored)
def pad_images(images: list[bytes]) -> list[bytes]:
    filler = images[0] if images else b""
    padded = list(images[:GRID_CELLS])
    while len(padded) < GRID_CELLS:
        padded.append(filler)
    return padded


# cover-fit one encoded image to a square tile
def _fit_tile(data: bytes, tile: int) -> Image.Image:
    with Image.open(BytesIO(data)) as img:
        img.load()
        rgba = img.convert("RGBA")
    return ImageOps.fit(rgba, (tile, tile), method=Image.Resampling.LANCZOS)


# * Composite up to four PNG/JPEG images into one PNG grid
def composite_to_grid(
    images: list[bytes], resolution: Resolution = Resolution.TWO_K
) -> bytes:
    layout = GRID_LAYOUT[Resolution.parse(resolution)]
    tiles = pad_images(images)

    try:
        canvas = Image.new("RGBA", (layout.edge, layout.edge), BACKGROUND_RGBA)
        for data, position in zip(tiles, layout.positions):
            canvas.paste(_fit_tile(data, layout.tile), position)

        buf = BytesIO()
        canvas.save(buf, "PNG", compress_level=9, optimize=True)
    except (OSError, ValueError) as e:
        # degraded mode: hand back the first image untouched
        vlog_warning(f"Grid compositing failed, using first image instead: {e}")
        return images[0] if images else b""

    output = buf.getvalue()
    vlog(
        "GRID",
        f"Composited {min(len(images), GRID_CELLS)} image(s) into {layout.edge}px grid",
        f"{len(output):,} bytes",
    )
    return output
