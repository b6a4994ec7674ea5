from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

Color = tuple[int, int, int, int]

WHITE: Color = (255, 255, 255, 255)


class RasterSurface(Protocol):
    """
    The drawing operations the compositor needs. Keeps render logic independent
    of the backend that actually rasterizes.
    """

    size: tuple[int, int]

    def fill(self, color: Color) -> None: ...

    def draw_image(self, image: Image.Image, x: int, y: int, width: int, height: int) -> None: ...

    def fill_rect(self, x: int, y: int, width: int, height: int, color: Color) -> None: ...

    def draw_text(self, text: str, x: int, center_y: float, font_px: int, color: Color, bold: bool = True) -> None: ...

    def to_image(self) -> Image.Image: ...

    def export_png(self) -> bytes: ...


class PillowSurface:
    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"surface size must be positive, got {width}x{height}")
        self.size = (width, height)
        self._image = Image.new("RGBA", self.size, (0, 0, 0, 0))

    def fill(self, color: Color) -> None:
        self._image.paste(color, (0, 0, *self.size))

    def draw_image(self, image: Image.Image, x: int, y: int, width: int, height: int) -> None:
        """
        Scale `image` to width x height and composite it with its top-left at (x, y).
        Negative offsets and overflow past the right/bottom edge are cropped.
        """
        sw, sh = self.size
        left = max(0, -x)
        top = max(0, -y)
        right = min(width, sw - x)
        bottom = min(height, sh - y)
        if right <= left or bottom <= top:
            return

        # Resample only the source region that lands on the canvas.
        iw, ih = image.size
        sx = width / iw
        sy = height / ih
        box = (left / sx, top / sy, right / sx, bottom / sy)
        visible = image.convert("RGBA").resize((right - left, bottom - top), Image.Resampling.LANCZOS, box=box)
        self._image.alpha_composite(visible, dest=(max(0, x), max(0, y)))

    def fill_rect(self, x: int, y: int, width: int, height: int, color: Color) -> None:
        # Drawn on a separate layer so translucent colors blend instead of replacing pixels.
        overlay = Image.new("RGBA", self.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        draw.rectangle([(x, y), (x + width - 1, y + height - 1)], fill=color)
        self._image = Image.alpha_composite(self._image, overlay)

    def draw_text(self, text: str, x: int, center_y: float, font_px: int, color: Color, bold: bool = True) -> None:
        if not text:
            return
        draw = ImageDraw.Draw(self._image)
        font = load_font(font_px, bold=bold)
        bbox = draw.textbbox((0, 0), text, font=font)
        y = center_y - (bbox[1] + bbox[3]) / 2
        draw.text((x, y), text, font=font, fill=color)

    def to_image(self) -> Image.Image:
        return self._image.copy()

    def export_png(self) -> bytes:
        return image_to_png_bytes(self._image)


def image_to_png_bytes(img: Image.Image) -> bytes:
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


_BOLD_FONT_CANDIDATES: tuple[str, ...] = (
    "assets/fonts/DejaVuSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "C:\\Windows\\Fonts\\arialbd.ttf",
)

_REGULAR_FONT_CANDIDATES: tuple[str, ...] = (
    "assets/fonts/DejaVuSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "/Library/Fonts/Arial.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "C:\\Windows\\Fonts\\arial.ttf",
)


def load_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Prefer a system TTF (Arial/Helvetica family first, then DejaVu). If none is
    installed, fall back to Pillow's bundled default font at the requested size.
    """
    size = max(1, size)
    candidates = _BOLD_FONT_CANDIDATES if bold else _REGULAR_FONT_CANDIDATES
    for c in candidates:
        p = Path(c)
        if p.exists():
            try:
                return ImageFont.truetype(str(p), size=size)
            except OSError:
                continue
    return ImageFont.load_default(size=size)
