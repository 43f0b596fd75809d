"""Mockup generation routes."""
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Request, Response
from pydantic import ValidationError

from auth.models import AuthenticatedIdentity
from auth.services import get_current_identity
from image.services import ImageGenerator, ImageGenerationError, get_image_generator
from mockups.models import GenerateResponse
from mockups.services import (
    RequestParseError,
    MissingFieldError,
    parse_generate_request,
    validate_generate_request,
    build_prompt
)
from utils.logger import get_logger
from common.error_messages import ErrorCode, get_error_response

logger = get_logger("mockups")
router = APIRouter(tags=["mockups"])

GENERATE_MOCKUPS_PATH = "/generateMockups"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


async def read_request_body(request: Request) -> bytes:
    return await request.body()


def _http_error(error_code: ErrorCode) -> HTTPException:
    message, status_code = get_error_response(error_code)
    return HTTPException(status_code=status_code, detail=message)


@router.post(GENERATE_MOCKUPS_PATH)
def generate_mockups(
    identity: Optional[AuthenticatedIdentity] = Depends(get_current_identity),
    body: bytes = Depends(read_request_body),
    generator: ImageGenerator = Depends(get_image_generator),
):
    """
    Generate crochet mockup images.

    Accepts:
      { projectDescription: "...", colorVibe: "...", colorCount: "monochrome" | "2-4" | "5-7" }

    Returns:
      { images: ["data:image/png;base64,...", ...] }
    """
    if identity is None:
        logger.error("Authentication context missing after auth dependency ran")
        raise _http_error(ErrorCode.AUTH_CONTEXT_MISSING)

    try:
        req = parse_generate_request(body)
    except RequestParseError as e:
        logger.warning(f"Invalid request body from user {identity.subject_id}: {e}")
        raise _http_error(ErrorCode.INVALID_FORMAT)

    try:
        validate_generate_request(req)
    except MissingFieldError as e:
        logger.warning(f"Rejected request from user {identity.subject_id}: {e}")
        raise _http_error(ErrorCode.MISSING_FIELD)

    prompt = build_prompt(req)
    logger.info(f"Generating mockups for user {identity.subject_id} with {generator.name} generator")
    logger.debug(f"Prompt: {prompt}")

    try:
        images = generator.generate_images(prompt)
    except ImageGenerationError as e:
        logger.error(f"Image generation failed for user {identity.subject_id}: {e}")
        raise _http_error(ErrorCode.GENERATION_FAILED)

    try:
        payload = GenerateResponse(images=images).model_dump_json()
    except ValidationError as e:
        logger.error(f"Failed to encode response for user {identity.subject_id}: {e}")
        raise _http_error(ErrorCode.RESPONSE_ENCODE_FAILED)

    logger.info(f"Returning {len(images)} image(s) to user {identity.subject_id}")
    return Response(content=payload, media_type="application/json")
