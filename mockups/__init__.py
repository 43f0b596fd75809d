"""Crochet mockup module."""
from mockups.models import GenerateRequest, GenerateResponse
from mockups.services import (
    COLOR_DESCRIPTIONS,
    DEFAULT_COLOR_DESCRIPTION,
    RequestParseError,
    MissingFieldError,
    parse_generate_request,
    validate_generate_request,
    build_prompt
)

__all__ = [
    "GenerateRequest",
    "GenerateResponse",
    "COLOR_DESCRIPTIONS",
    "DEFAULT_COLOR_DESCRIPTION",
    "RequestParseError",
    "MissingFieldError",
    "parse_generate_request",
    "validate_generate_request",
    "build_prompt"
]
