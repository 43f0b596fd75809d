"""Image generation services - Gemini integration and a deterministic mock."""
import base64
from abc import ABC, abstractmethod
from typing import List

from fastapi import Request
from google import genai
from google.genai import types

from config import Config
from utils.logger import get_logger

logger = get_logger("image.services")

DATA_URL_PREFIX = "data:image/png;base64,"

# 1x1 transparent PNG
PLACEHOLDER_PNG = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
PLACEHOLDER_COUNT = 3

# 1x1 red, green and blue squares
MOCK_IMAGES = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4nGP4z8DwHwAFAAH/iZk9HQAAAABJRU5ErkJggg==",
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4nGNg+M/wHwAEAQH/cetH5QAAAABJRU5ErkJggg==",
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR4nGNgYPj/HwADAgH/5ncLrgAAAABJRU5ErkJggg==",
)


class ImageGenerationError(RuntimeError):
    """The image provider could not produce a result."""


def to_data_url(data: bytes) -> str:
    """Encode raw image bytes as a PNG data URL."""
    return DATA_URL_PREFIX + base64.b64encode(data).decode("ascii")


class ImageGenerator(ABC):
    """Turns a text prompt into a list of image data URLs."""

    name = "base"

    @abstractmethod
    def generate_images(self, prompt: str) -> List[str]:
        raise NotImplementedError


class GeminiImageGenerator(ImageGenerator):
    """Generates images with a Gemini model that answers with inline image parts."""

    name = "gemini"

    def __init__(self, api_key: str, model: str):
        try:
            self.client = genai.Client(api_key=api_key)
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {e}")
            raise ImageGenerationError("Failed to connect to AI service")
        self.model = model

    def generate_images(self, prompt: str) -> List[str]:
        config = types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"])

        logger.info(f"Requesting images from Gemini model: {self.model}")
        try:
            result = self.client.models.generate_content(
                model=self.model, contents=prompt, config=config
            )
        except Exception as e:
            logger.error(f"Gemini API error during image generation: {e}")
            raise ImageGenerationError(f"failed to generate content: {e}")

        if not result.candidates:
            raise ImageGenerationError("no candidates returned from API")

        content = result.candidates[0].content
        images = []
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline and getattr(inline, "data", None):
                images.append(to_data_url(inline.data))
                logger.debug(f"Image part {len(images)}: {inline.mime_type}, {len(inline.data)} bytes")
            elif getattr(part, "text", None):
                logger.debug(f"Text part ({len(part.text)} chars)")

        if not images:
            logger.warning("Gemini returned no image parts, substituting placeholders")
            return [DATA_URL_PREFIX + PLACEHOLDER_PNG] * PLACEHOLDER_COUNT

        logger.info(f"Generation complete: {len(images)} image(s)")
        return images


class MockImageGenerator(ImageGenerator):
    """Returns fixed red, green and blue squares. Used for local runs and tests."""

    name = "mock"

    def generate_images(self, prompt: str) -> List[str]:
        logger.info(f"Mock generator received prompt: {prompt}")
        images = []
        for i, encoded in enumerate(MOCK_IMAGES, start=1):
            images.append(DATA_URL_PREFIX + encoded)
            logger.debug(f"Generated mock image {i}")
        return images


def create_image_generator(generator_type: str) -> ImageGenerator:
    """Build the configured image generator. Called once at startup."""
    if generator_type == "gemini":
        return GeminiImageGenerator(Config.get_gemini_api_key(), Config.GEMINI_MODEL)
    if generator_type == "mock":
        return MockImageGenerator()
    raise ValueError(f"unsupported image generator type: {generator_type}")


def get_image_generator(request: Request) -> ImageGenerator:
    """Return the generator built at startup."""
    return request.app.state.image_generator
