"""
Errors surfaced to the user. Each carries the HTTP status it maps to; the API
layer renders them as ``{"error": message}``.
"""

from __future__ import annotations


class CreativeError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message}


class ConfigurationError(CreativeError):
    """A required secret (e.g. the image API key) is not configured."""

    status_code = 500


class PromptValidationError(CreativeError):
    status_code = 400


class ImageGenerationError(CreativeError):
    """The upstream image API failed or returned no image."""

    status_code = 500


class ImageDecodeError(CreativeError):
    status_code = 500

    def __init__(self, message: str = "Image decode failed") -> None:
        super().__init__(message)


class GenerationInProgressError(CreativeError):
    status_code = 409

    def __init__(self, message: str = "A generation is already in progress.") -> None:
        super().__init__(message)


class UnknownPresetError(CreativeError):
    status_code = 400

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown size preset '{key}'.")
        self.key = key
