from __future__ import annotations

import base64
import logging

from creative_variants.config import settings
from creative_variants.errors import ImageGenerationError
from creative_variants.providers.base import GeneratedImage

logger = logging.getLogger(__name__)

FALLBACK_ERROR = "Gemini request failed"


class GeminiImageProvider:
    name = "gemini"

    def __init__(self, api_key: str) -> None:
        # Imported lazily so the app can start without the dependency installed.
        from google import genai  # type: ignore

        self._genai = genai
        self.client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str, size: str | None = None, n: int = 1) -> GeneratedImage:
        """
        Imagen text-to-image. The API takes an aspect ratio rather than pixel
        sizes; presets are cover-cropped afterwards so a square source is fine.
        """
        from google.genai import errors, types  # type: ignore

        model = settings.gemini_image_model
        try:
            resp = await self.client.aio.models.generate_images(
                model=model,
                prompt=prompt,
                config=types.GenerateImagesConfig(number_of_images=n, aspect_ratio="1:1"),
            )
        except errors.APIError as exc:
            message = getattr(exc, "message", None) or FALLBACK_ERROR
            logger.warning("gemini image request failed (%s): %s", getattr(exc, "code", "?"), message)
            raise ImageGenerationError(message) from exc

        img_bytes = None
        for gi in getattr(resp, "generated_images", None) or []:
            img_bytes = getattr(getattr(gi, "image", None), "image_bytes", None)
            if img_bytes:
                break
        if not img_bytes:
            raise ImageGenerationError("Gemini returned no image data")

        return GeneratedImage(
            b64=base64.b64encode(img_bytes).decode("ascii"),
            prompt_used=prompt,
            provider=self.name,
            model=model,
            raw_metadata={"aspect_ratio": "1:1", "n": n},
        )
