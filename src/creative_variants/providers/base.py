from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class GeneratedImage:
    b64: str
    prompt_used: str
    provider: str
    model: str
    raw_metadata: dict[str, Any] = field(default_factory=dict)


class ImageProvider(Protocol):
    name: str

    async def generate(
        self,
        prompt: str,
        size: str | None = None,
        n: int = 1,
    ) -> GeneratedImage: ...
