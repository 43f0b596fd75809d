"""Tests for the image generators and their factory."""
import base64
from types import SimpleNamespace

import pytest

import image.services as image_services
from image.services import (
    DATA_URL_PREFIX,
    MOCK_IMAGES,
    PLACEHOLDER_PNG,
    GeminiImageGenerator,
    ImageGenerationError,
    MockImageGenerator,
    create_image_generator,
    to_data_url,
)


class FakeModels:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error:
            raise self.error
        return self.result


def _part(data=None, text=None, mime_type="image/png"):
    inline = SimpleNamespace(data=data, mime_type=mime_type) if data is not None else None
    return SimpleNamespace(inline_data=inline, text=text)


def _result(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


@pytest.fixture
def fake_models(monkeypatch):
    """Replace genai.Client so GeminiImageGenerator talks to FakeModels."""
    models = FakeModels()
    monkeypatch.setattr(
        image_services.genai, "Client", lambda api_key: SimpleNamespace(models=models)
    )
    return models


@pytest.fixture
def gemini(fake_models) -> GeminiImageGenerator:
    return GeminiImageGenerator(api_key="test-key", model="test-image-model")


class TestDataUrl:
    def test_encodes_bytes(self):
        assert to_data_url(b"\x89PNG") == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()


class TestMockImageGenerator:
    def test_returns_three_fixed_images_in_order(self):
        images = MockImageGenerator().generate_images("any prompt")
        assert images == [DATA_URL_PREFIX + encoded for encoded in MOCK_IMAGES]
        assert len(images) == 3

    @pytest.mark.parametrize("prompt", ["", "granny square", "x" * 5000])
    def test_ignores_prompt_content(self, prompt):
        assert MockImageGenerator().generate_images(prompt) == MockImageGenerator().generate_images("other")

    def test_images_are_distinct_pngs(self):
        images = MockImageGenerator().generate_images("p")
        assert len(set(images)) == 3
        for url in images:
            assert base64.b64decode(url[len(DATA_URL_PREFIX):]).startswith(b"\x89PNG\r\n\x1a\n")


class TestGeminiImageGenerator:
    def test_returns_every_inline_image(self, gemini, fake_models):
        fake_models.result = _result(
            _part(text="Here is your mockup"),
            _part(data=b"first-image"),
            _part(data=b"second-image"),
        )
        images = gemini.generate_images("a crochet hat")
        assert images == [to_data_url(b"first-image"), to_data_url(b"second-image")]

    def test_sends_prompt_with_text_and_image_modalities(self, gemini, fake_models):
        fake_models.result = _result(_part(data=b"img"))
        gemini.generate_images("a crochet hat")
        call = fake_models.calls[0]
        assert call["model"] == "test-image-model"
        assert call["contents"] == "a crochet hat"
        assert call["config"].response_modalities == ["TEXT", "IMAGE"]

    def test_zero_image_parts_yields_three_placeholders(self, gemini, fake_models):
        fake_models.result = _result(_part(text="I can only describe it"))
        images = gemini.generate_images("a crochet hat")
        assert images == [DATA_URL_PREFIX + PLACEHOLDER_PNG] * 3

    def test_empty_content_yields_placeholders(self, gemini, fake_models):
        fake_models.result = SimpleNamespace(candidates=[SimpleNamespace(content=None)])
        assert len(gemini.generate_images("a crochet hat")) == 3

    def test_no_candidates_is_an_error(self, gemini, fake_models):
        fake_models.result = SimpleNamespace(candidates=[])
        with pytest.raises(ImageGenerationError, match="no candidates"):
            gemini.generate_images("a crochet hat")

    def test_api_failure_is_an_error(self, gemini, fake_models):
        fake_models.error = ConnectionError("quota exceeded")
        with pytest.raises(ImageGenerationError):
            gemini.generate_images("a crochet hat")


class TestFactory:
    def test_mock(self):
        assert isinstance(create_image_generator("mock"), MockImageGenerator)

    def test_gemini(self, fake_models, monkeypatch):
        monkeypatch.setattr(image_services.Config, "GEMINI_API_KEY", "test-key")
        generator = create_image_generator("gemini")
        assert isinstance(generator, GeminiImageGenerator)
        assert generator.model == image_services.Config.GEMINI_MODEL

    def test_gemini_without_api_key(self, fake_models, monkeypatch):
        monkeypatch.setattr(image_services.Config, "GEMINI_API_KEY", "")
        with pytest.raises(ValueError):
            create_image_generator("gemini")

    def test_unsupported_type(self):
        with pytest.raises(ValueError, match="unsupported image generator type: dalle"):
            create_image_generator("dalle")
