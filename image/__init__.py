"""Image generation module."""
from image.services import (
    ImageGenerator,
    ImageGenerationError,
    GeminiImageGenerator,
    MockImageGenerator,
    create_image_generator,
    get_image_generator,
    to_data_url
)

__all__ = [
    "ImageGenerator",
    "ImageGenerationError",
    "GeminiImageGenerator",
    "MockImageGenerator",
    "create_image_generator",
    "get_image_generator",
    "to_data_url"
]
