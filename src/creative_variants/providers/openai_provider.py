from __future__ import annotations

import logging

from creative_variants.config import settings
from creative_variants.errors import ImageGenerationError
from creative_variants.providers.base import GeneratedImage

logger = logging.getLogger(__name__)

FALLBACK_ERROR = "OpenAI request failed"


class OpenAIImageProvider:
    name = "openai"

    def __init__(self, api_key: str) -> None:
        from openai import AsyncOpenAI

        self.client = AsyncOpenAI(api_key=api_key)

    async def generate(self, prompt: str, size: str | None = None, n: int = 1) -> GeneratedImage:
        """
        One text-to-image call. Returns the first image's base64 payload.
        """
        from openai import APIError, APIStatusError

        model = settings.openai_image_model
        size = size or settings.openai_image_size
        try:
            resp = await self.client.images.generate(model=model, prompt=prompt, size=size, n=n)
        except APIStatusError as exc:
            message = _upstream_message(exc.body) or FALLBACK_ERROR
            logger.warning("openai image request failed (%s): %s", exc.status_code, message)
            raise ImageGenerationError(message) from exc
        except APIError as exc:
            logger.warning("openai image request failed: %s", exc.message)
            raise ImageGenerationError(exc.message or FALLBACK_ERROR) from exc

        data = getattr(resp, "data", None) or []
        b64 = getattr(data[0], "b64_json", None) if data else None
        if not b64:
            raise ImageGenerationError("OpenAI returned no image data")

        return GeneratedImage(
            b64=b64,
            prompt_used=prompt,
            provider=self.name,
            model=model,
            raw_metadata={"size": size, "n": n},
        )


def _upstream_message(body: object) -> str | None:
    # The SDK hands over the inner `error` object for status errors.
    if isinstance(body, dict):
        msg = body.get("message")
        if isinstance(msg, str) and msg:
            return msg
    return None
