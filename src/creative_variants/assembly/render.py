from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from creative_variants.assembly.presets import PRESETS, Preset
from creative_variants.assembly.surface import WHITE, PillowSurface, RasterSurface
from creative_variants.brief import FormInput, footer_text
from creative_variants.errors import ImageDecodeError

logger = logging.getLogger(__name__)

SurfaceFactory = Callable[[int, int], RasterSurface]

FOOTER_BAR_RATIO = 0.08
FOOTER_PAD_RATIO = 0.02
FOOTER_FONT_RATIO = 0.45
FOOTER_BAR_COLOR = (0, 0, 0, round(0.55 * 255))
FOOTER_TEXT_COLOR = (255, 255, 255, 255)


@dataclass(frozen=True)
class CoverFit:
    """
    Placement of a source image scaled to cover a target canvas.
    Offsets are negative on the axis where the scaled image overflows.
    """

    target: tuple[int, int]
    scale: float
    width: float
    height: float
    offset_x: float
    offset_y: float

    def pixel_box(self) -> tuple[int, int, int, int]:
        """
        Integer (x, y, width, height). The size never drops below the target on
        either axis so rounding can't leave an uncovered edge.
        """
        tw, th = self.target
        w = max(tw, round(self.width))
        h = max(th, round(self.height))
        return ((tw - w) // 2, (th - h) // 2, w, h)


def cover_fit(source_size: tuple[int, int], target_size: tuple[int, int]) -> CoverFit:
    sw, sh = source_size
    tw, th = target_size
    if sw <= 0 or sh <= 0:
        raise ValueError(f"source image must have positive dimensions, got {sw}x{sh}")
    if tw <= 0 or th <= 0:
        raise ValueError(f"target size must be positive, got {tw}x{th}")

    scale = max(tw / sw, th / sh)
    width = sw * scale
    height = sh * scale
    return CoverFit(
        target=(tw, th),
        scale=scale,
        width=width,
        height=height,
        offset_x=(tw - width) / 2,
        offset_y=(th - height) / 2,
    )


def decode_image(payload: str | bytes) -> Image.Image:
    """
    Decode a base64 string (as returned by the image API) or raw bytes into a
    fully loaded RGBA image.
    """
    try:
        raw = base64.b64decode(payload, validate=True) if isinstance(payload, str) else payload
        img = Image.open(BytesIO(raw))
        img.load()
    except (binascii.Error, ValueError, OSError, UnidentifiedImageError) as exc:
        logger.warning("image decode failed: %s", exc)
        raise ImageDecodeError() from exc
    if img.width <= 0 or img.height <= 0:
        raise ImageDecodeError()
    return img.convert("RGBA")


def render_variant(
    base_image: Image.Image,
    preset: Preset,
    footer: str,
    surface_factory: SurfaceFactory = PillowSurface,
) -> Image.Image:
    """
    Composite one preset:
    - white background
    - source scaled to cover the canvas and center-cropped
    - optional translucent footer bar with the contact line
    """
    fit = cover_fit(base_image.size, preset.size)
    surface = surface_factory(preset.width, preset.height)
    surface.fill(WHITE)

    x, y, w, h = fit.pixel_box()
    surface.draw_image(base_image, x, y, w, h)

    if footer:
        _draw_footer(surface, footer)

    return surface.to_image()


def _draw_footer(surface: RasterSurface, text: str) -> None:
    w, h = surface.size
    pad = round(h * FOOTER_PAD_RATIO)
    bar_h = round(h * FOOTER_BAR_RATIO)
    surface.fill_rect(0, h - bar_h, w, bar_h, FOOTER_BAR_COLOR)
    surface.draw_text(
        text,
        x=pad,
        center_y=h - bar_h / 2,
        font_px=round(bar_h * FOOTER_FONT_RATIO),
        color=FOOTER_TEXT_COLOR,
        bold=True,
    )


def render_all(
    base_image: Image.Image,
    selected_keys: Iterable[str],
    form: FormInput,
    surface_factory: SurfaceFactory = PillowSurface,
) -> dict[str, Image.Image]:
    """
    Render every selected preset, in preset declaration order. Always returns a
    fresh mapping; callers replace their previous variants with it.
    """
    selected = set(selected_keys)
    footer = footer_text(form)
    out: dict[str, Image.Image] = {}
    for preset in PRESETS:
        if preset.key not in selected:
            continue
        out[preset.key] = render_variant(base_image, preset, footer, surface_factory=surface_factory)
    logger.debug("rendered %d variant(s): %s", len(out), ", ".join(out))
    return out
