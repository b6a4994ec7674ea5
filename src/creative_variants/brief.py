from __future__ import annotations

from dataclasses import dataclass, fields

from creative_variants.config import settings
from creative_variants.errors import PromptValidationError

FOOTER_SEPARATOR = "   •   "


@dataclass
class FormInput:
    brand: str = ""
    idea: str = ""
    audience: str = ""
    objective: str = ""
    mood: str = "Bold high-contrast"
    headline: str = ""
    contact: str = ""
    website: str = ""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


def build_prompt(form: FormInput) -> str:
    """
    Single natural-language prompt for the image API. Empty fields are
    interpolated as-is.
    """
    return (
        f'Design a high-conversion social ad creative for brand "{form.brand}". '
        f"Offer: {form.idea}. "
        f"Audience: {form.audience}. "
        f"Objective: {form.objective}. "
        f"Mood: {form.mood}. "
        f'Headline: "{form.headline}". '
        f'Include footer with "{form.contact}" and "{form.website}". '
        "Clean layout, strong contrast, brand-safe typography."
    )


def validate_prompt(prompt: str | None) -> str:
    if not prompt or len(prompt) < settings.min_prompt_length:
        raise PromptValidationError("Prompt is required.")
    return prompt


def footer_text(form: FormInput) -> str:
    return FOOTER_SEPARATOR.join(part for part in (form.contact, form.website) if part)
