from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Preset:
    key: str
    label: str
    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)


# Declaration order is the render and archive order.
PRESETS: tuple[Preset, ...] = (
    Preset(key="square", label="Feed (1080×1080)", width=1080, height=1080),
    Preset(key="story", label="Story/Reel (1080×1920)", width=1080, height=1920),
    Preset(key="landscape", label="Landscape (1200×628)", width=1200, height=628),
)

PRESETS_BY_KEY: dict[str, Preset] = {p.key: p for p in PRESETS}

DEFAULT_SIZES: tuple[str, ...] = ("square",)


def get_preset(key: str) -> Preset | None:
    return PRESETS_BY_KEY.get(key)
