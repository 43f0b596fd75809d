"""Mockup request parsing, validation and prompt construction."""
import json
from typing import List

from pydantic import ValidationError

from mockups.models import GenerateRequest

REQUIRED_FIELDS = ("projectDescription", "colorVibe", "colorCount")

COLOR_DESCRIPTIONS = {
    "monochrome": "in a single consistent color palette",
    "2-4": "using 2 to 4 complementary colors",
    "5-7": "with a bold mix of 5 to 7 different colors",
}
DEFAULT_COLOR_DESCRIPTION = "with a harmonious color palette"

PROMPT_TEMPLATE = (
    "A highly detailed image of a handmade crochet project. "
    "The project is described as: {description}. "
    "The overall color vibe is: {vibe}. "
    "Please visualize the crochet item {colors}, "
    "with realistic yarn textures such as cotton, chenille, or wool. "
    "The background should be minimal, studio-lit, and clean."
)


class RequestParseError(ValueError):
    """The body is not a JSON object with string fields."""


class MissingFieldError(ValueError):
    """One or more required fields are empty."""

    def __init__(self, fields: List[str]):
        self.fields = fields
        super().__init__(f"missing required fields: {', '.join(fields)}")


def parse_generate_request(body: bytes) -> GenerateRequest:
    """Decode a request body into a GenerateRequest."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RequestParseError(f"malformed JSON: {e}")

    if not isinstance(data, dict):
        raise RequestParseError(f"expected a JSON object, got {type(data).__name__}")

    try:
        return GenerateRequest(**data)
    except ValidationError as e:
        raise RequestParseError(f"invalid field types: {e.errors()}")


def validate_generate_request(req: GenerateRequest) -> None:
    """Reject a request whose required fields are not all non-empty."""
    missing = [field for field in REQUIRED_FIELDS if not getattr(req, field)]
    if missing:
        raise MissingFieldError(missing)


def describe_color_count(color_count: str) -> str:
    return COLOR_DESCRIPTIONS.get(color_count, DEFAULT_COLOR_DESCRIPTION)


def build_prompt(req: GenerateRequest) -> str:
    """Render the image prompt for a request. Pure; never fails."""
    return PROMPT_TEMPLATE.format(
        description=req.projectDescription,
        vibe=req.colorVibe,
        colors=describe_color_count(req.colorCount),
    )
