from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import Body, FastAPI, Form, HTTPException, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from creative_variants.api.auth import basic_auth_gate
from creative_variants.assembly.presets import PRESETS
from creative_variants.assembly.surface import image_to_png_bytes
from creative_variants.brief import validate_prompt
from creative_variants.config import settings
from creative_variants.errors import ConfigurationError, CreativeError, ImageGenerationError, PromptValidationError
from creative_variants.providers.base import ImageProvider
from creative_variants.providers.gemini_provider import GeminiImageProvider
from creative_variants.providers.openai_provider import OpenAIImageProvider
from creative_variants.session import CreativeSession

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="creative_variants")
app.middleware("http")(basic_auth_gate)

session = CreativeSession()

T = TypeVar("T")

GENERATE_IMAGE_PATH = "/api/generate-image"


class GenerateImageRequest(BaseModel):
    prompt: str | None = None


@app.exception_handler(CreativeError)
async def creative_error_handler(request: Request, exc: CreativeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # The image endpoint answers every unusable body the same way as a missing prompt.
    if request.url.path == GENERATE_IMAGE_PATH:
        return JSONResponse(status_code=400, content=PromptValidationError("Prompt is required.").to_dict())
    return await request_validation_exception_handler(request, exc)


def _get_image_provider() -> ImageProvider:
    if settings.image_provider == "gemini":
        if not settings.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY missing in env.")
        return GeminiImageProvider(api_key=settings.gemini_api_key)
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY missing in env.")
    return OpenAIImageProvider(api_key=settings.openai_api_key)


async def _upstream(call: Awaitable[T]) -> T:
    try:
        return await call
    except CreativeError:
        raise
    except Exception as exc:
        logger.exception("image generation failed")
        raise ImageGenerationError(str(exc) or "Image generation failed") from exc


@app.post(GENERATE_IMAGE_PATH)
async def generate_image(payload: GenerateImageRequest | None = Body(default=None)):
    # Key check comes first: a misconfigured deployment reports that before anything else.
    provider = _get_image_provider()
    prompt = validate_prompt(payload.prompt if payload else None)
    generated = await _upstream(provider.generate(prompt))
    return {"b64": generated.b64}


@app.get("/api/presets")
def list_presets():
    return [{"key": p.key, "label": p.label, "width": p.width, "height": p.height} for p in PRESETS]


@app.get("/api/creative")
def get_creative():
    return session.summary()


@app.post("/api/creative/form")
async def update_form(
    brand: str | None = Form(None),
    idea: str | None = Form(None),
    audience: str | None = Form(None),
    objective: str | None = Form(None),
    mood: str | None = Form(None),
    headline: str | None = Form(None),
    contact: str | None = Form(None),
    website: str | None = Form(None),
):
    # Only the fields present in the request change.
    values = {
        "brand": brand,
        "idea": idea,
        "audience": audience,
        "objective": objective,
        "mood": mood,
        "headline": headline,
        "contact": contact,
        "website": website,
    }
    session.update_form(**{k: v for k, v in values.items() if v is not None})
    return session.summary()


@app.post("/api/creative/sizes")
async def select_sizes(sizes: list[str] = Form(default=[])):
    session.select_sizes(sizes)
    return session.summary()


@app.post("/api/creative/sizes/{key}/toggle")
async def toggle_size(key: str):
    session.toggle_size(key)
    return session.summary()


@app.post("/api/creative/generate")
async def generate_creative():
    provider = _get_image_provider()
    await _upstream(session.generate(provider))
    return session.summary()


@app.get("/api/creative/variants/{key}.png")
def get_variant(key: str):
    img = session.variants.get(key)
    if img is None:
        raise HTTPException(status_code=404, detail="variant not found")
    return Response(content=image_to_png_bytes(img), media_type="image/png")


@app.get("/api/creative/download")
def download_variants():
    filename, zip_bytes = session.archive()
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=zip_bytes, media_type="application/zip", headers=headers)
