"""
Dominant color extraction by pixel sampling.

The screenshot is cover-resized to a small grid, every 4th pixel of the raw
buffer is sampled, channels are quantized to multiples of 30, near-black and
near-white samples are dropped, and the most frequent colors are returned.
"""

import io
import math
from pathlib import Path

from PIL import Image, ImageOps

SAMPLE_SIZE = (100, 100)
PIXEL_STRIDE = 4
QUANT_STEP = 30
QUANT_MAX = 240
MIN_BRIGHTNESS = 20
MAX_BRIGHTNESS = 235
PALETTE_SIZE = 5


def quantize(value: int) -> int:
    """Round a channel to the nearest multiple of 30 (halves round up)."""
    return min(int(math.floor(value / QUANT_STEP + 0.5)) * QUANT_STEP, QUANT_MAX)


def to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02x}{g:02x}{b:02x}"


def sample_colors(data: bytes, channels: int) -> dict[str, int]:
    """
    Count quantized colors over a raw channel-interleaved pixel buffer.

    The returned dict preserves first-encounter order.
    """
    counts: dict[str, int] = {}

    for i in range(0, len(data) - 2, channels * PIXEL_STRIDE):
        r = quantize(data[i])
        g = quantize(data[i + 1])
        b = quantize(data[i + 2])

        brightness = (r + g + b) / 3
        if brightness <= MIN_BRIGHTNESS or brightness >= MAX_BRIGHTNESS:
            continue

        hex_color = to_hex(r, g, b)
        counts[hex_color] = counts.get(hex_color, 0) + 1

    return counts


def top_colors(counts: dict[str, int], limit: int = PALETTE_SIZE) -> list[str]:
    # sorted() is stable, so ties keep first-encounter order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [color for color, _ in ranked[:limit]]


def extract_palette(image_bytes: bytes) -> list[str]:
    """Return up to five hex colors, most frequent first."""
    with Image.open(io.BytesIO(image_bytes)) as img:
        thumb = ImageOps.fit(img.convert('RGB'), SAMPLE_SIZE)
        data = thumb.tobytes()
        channels = len(thumb.getbands())

    return top_colors(sample_colors(data, channels))


def extract_palette_safe(path: Path) -> list[str]:
    """Palette of the image at ``path``; any failure yields an empty palette."""
    try:
        return extract_palette(Path(path).read_bytes())
    except Exception as e:
        print(f"[Palette] Error extracting color palette: {e}", flush=True)
        return []
