from __future__ import annotations

import io
import zipfile

import pytest
from PIL import Image

from creative_variants.assembly.archive import archive_entry_name, archive_filename, package_archive, slugify
from creative_variants.assembly.presets import PRESETS_BY_KEY


@pytest.mark.parametrize(
    "value,expected",
    [
        ("My Brand! 2024", "my-brand-2024"),
        ("", ""),
        ("---", ""),
        (None, ""),
        ("  Café  Olé ", "caf-ol"),
        ("ACME__Corp", "acme-corp"),
    ],
)
def test_slugify(value, expected):
    assert slugify(value) == expected


def test_archive_filename_falls_back_to_creative():
    assert archive_filename("My Brand! 2024") == "my-brand-2024_variants.zip"
    assert archive_filename("") == "creative_variants.zip"
    assert archive_filename("!!!") == "creative_variants.zip"


def test_entry_name_with_empty_brand():
    assert archive_entry_name("", PRESETS_BY_KEY["landscape"]) == "_1200x628.png"


def test_package_two_variants():
    variants = {
        "story": Image.new("RGBA", (1080, 1920), (0, 0, 0, 255)),
        "square": Image.new("RGBA", (1080, 1080), (255, 255, 255, 255)),
    }
    data = package_archive(variants, "My Brand! 2024")

    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.namelist() == ["my-brand-2024_1080x1080.png", "my-brand-2024_1080x1920.png"]
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in zf.infolist())
        with Image.open(io.BytesIO(zf.read("my-brand-2024_1080x1920.png"))) as img:
            assert img.format == "PNG"
            assert img.size == (1080, 1920)


def test_package_empty_mapping_is_valid_empty_zip():
    data = package_archive({}, "brand")
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.namelist() == []
