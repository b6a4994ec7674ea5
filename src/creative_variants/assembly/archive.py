from __future__ import annotations

import io
import re
import zipfile
from collections.abc import Mapping

from PIL import Image

from creative_variants.assembly.presets import PRESETS, Preset
from creative_variants.assembly.surface import image_to_png_bytes

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str | None) -> str:
    return _NON_ALNUM.sub("-", (value or "").lower()).strip("-")


def archive_entry_name(brand: str | None, preset: Preset) -> str:
    return f"{slugify(brand)}_{preset.width}x{preset.height}.png"


def archive_filename(brand: str | None) -> str:
    return f"{slugify(brand) or 'creative'}_variants.zip"


def package_archive(variants: Mapping[str, Image.Image], brand: str | None) -> bytes:
    """
    Zip one PNG per rendered variant. Entries follow preset order and are named
    from the preset's declared size. An empty mapping gives an empty archive.
    """
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for preset in PRESETS:
            img = variants.get(preset.key)
            if img is None:
                continue
            zf.writestr(archive_entry_name(brand, preset), image_to_png_bytes(img))
    return buf.getvalue()
