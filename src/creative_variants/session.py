from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from PIL import Image

from creative_variants.assembly.archive import archive_filename, package_archive
from creative_variants.assembly.presets import DEFAULT_SIZES, PRESETS, PRESETS_BY_KEY
from creative_variants.assembly.render import decode_image, render_all
from creative_variants.brief import FormInput, build_prompt, validate_prompt
from creative_variants.errors import GenerationInProgressError, UnknownPresetError
from creative_variants.providers.base import ImageProvider

logger = logging.getLogger(__name__)


@dataclass
class CreativeSession:
    """
    All state behind one creative: form inputs, selected sizes, the generated
    base image and its rendered variants. Variants are always rebuilt wholesale.
    """

    form: FormInput = field(default_factory=FormInput)
    sizes: list[str] = field(default_factory=lambda: list(DEFAULT_SIZES))
    base_image: Image.Image | None = None
    variants: dict[str, Image.Image] = field(default_factory=dict)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False, compare=False)

    @property
    def generating(self) -> bool:
        return self._lock.locked()

    def update_form(self, **values: str) -> None:
        known = set(FormInput.field_names())
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"unknown form field(s): {', '.join(unknown)}")
        # Swap in a new FormInput so an in-flight generation keeps its snapshot.
        self.form = replace(self.form, **{k: v if v is not None else "" for k, v in values.items()})

    def select_sizes(self, keys: Iterable[str]) -> None:
        ordered: list[str] = []
        for key in keys:
            if key not in PRESETS_BY_KEY:
                raise UnknownPresetError(key)
            if key not in ordered:
                ordered.append(key)
        self.sizes = ordered
        if self.base_image is not None:
            self.variants = render_all(self.base_image, self.sizes, self.form)

    def toggle_size(self, key: str) -> None:
        if key not in PRESETS_BY_KEY:
            raise UnknownPresetError(key)
        if key in self.sizes:
            self.select_sizes([k for k in self.sizes if k != key])
        else:
            self.select_sizes([*self.sizes, key])

    async def generate(self, provider: ImageProvider) -> dict[str, Image.Image]:
        """
        Prompt -> image API -> decode -> render every preset selected once the image arrives.

        Only one generation runs at a time; a concurrent call is rejected. State
        is swapped in only after every step succeeded, so a failure leaves the
        previous image and variants in place.
        """
        if self._lock.locked():
            raise GenerationInProgressError()

        async with self._lock:
            prompt = validate_prompt(build_prompt(self.form))

            logger.info("generating base image via %s", provider.name)
            generated = await provider.generate(prompt)
            base = decode_image(generated.b64)
            # Sizes may have changed while the request was pending; render what is selected now.
            variants = render_all(base, self.sizes, self.form)

            self.base_image = base
            self.variants = variants
            logger.info("generated %dx%d base image, %d variant(s)", base.width, base.height, len(variants))
            return variants

    def archive(self) -> tuple[str, bytes]:
        return archive_filename(self.form.brand), package_archive(self.variants, self.form.brand)

    def summary(self) -> dict[str, Any]:
        return {
            "form": {name: getattr(self.form, name) for name in FormInput.field_names()},
            "sizes": [p.key for p in PRESETS if p.key in self.sizes],
            "generating": self.generating,
            "has_base_image": self.base_image is not None,
            "variants": [
                {"key": p.key, "label": p.label, "width": p.width, "height": p.height}
                for p in PRESETS
                if p.key in self.variants
            ],
        }
