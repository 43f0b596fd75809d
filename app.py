"""
FastAPI application for crochet mockup generation.

Features:
- Firebase ID token authentication on the generation route
- Prompt construction from a short project description
- Image generation through a pluggable provider (Gemini or a mock)
"""
import time
import json
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Config
from auth.services import FirebaseTokenVerifier
from image.services import create_image_generator
from mockups.routes import router as mockups_router, GENERATE_MOCKUPS_PATH, CORS_HEADERS
from utils.logger import get_logger
from common.error_messages import ErrorCode, get_error_response

logger = get_logger("main")

# Sensitive fields that should be masked in logs
SENSITIVE_FIELDS = {
    'access_token', 'token', 'id_token', 'password',
    'refresh_token', 'api_key', 'secret', 'authorization', 'cookie'
}

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def mask_sensitive_data(data: Any, mask_value: str = "***MASKED***") -> Any:
    """
    Recursively mask sensitive fields in data structures.

    Args:
        data: Data to mask (dict, list, or string)
        mask_value: Value to replace sensitive data with

    Returns:
        Data with sensitive fields masked
    """
    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if key.lower() in SENSITIVE_FIELDS:
                masked[key] = mask_value
            else:
                masked[key] = mask_sensitive_data(value, mask_value)
        return masked
    elif isinstance(data, list):
        return [mask_sensitive_data(item, mask_value) for item in data]
    elif isinstance(data, str):
        # Try to parse as JSON and mask if successful
        try:
            parsed = json.loads(data)
            if isinstance(parsed, (dict, list)):
                return json.dumps(mask_sensitive_data(parsed, mask_value))
        except (json.JSONDecodeError, ValueError):
            pass
        return data
    else:
        return data


app = FastAPI(
    title="Crochet Mockup API",
    description="Generates crochet project mockup images for authenticated users.",
    version="1.0.0"
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Answer HTTP errors with a short generic detail."""
    detail = exc.detail
    if exc.status_code == 404:
        detail, _ = get_error_response(ErrorCode.NOT_FOUND)
    elif exc.status_code == 405:
        detail, _ = get_error_response(ErrorCode.METHOD_NOT_ALLOWED)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions globally."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)

    message, status_code = get_error_response(ErrorCode.UNKNOWN_ERROR)
    return JSONResponse(
        status_code=status_code,
        content={"detail": message}
    )


# CORS for the generation route - headers go on every response, preflight never reaches auth
@app.middleware("http")
async def mockup_cors_headers(request: Request, call_next):
    if request.url.path != GENERATE_MOCKUPS_PATH:
        return await call_next(request)

    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# Request logging middleware - added last so it wraps the CORS middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing."""
    start_time = time.time()
    full_url = str(request.url)

    logger.info(f"→ {request.method} {full_url} - Client: {request.client.host if request.client else 'unknown'}")
    logger.debug(f"  Headers: {mask_sensitive_data(dict(request.headers))}")

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = (time.time() - start_time) * 1000
        logger.error(f"← {request.method} {full_url} - Error: {str(e)} - Time: {process_time:.2f}ms")
        raise

    process_time = (time.time() - start_time) * 1000
    logger.info(f"← {request.method} {full_url} - Status: {response.status_code} - Time: {process_time:.2f}ms")
    return response


app.include_router(mockups_router)
logger.info("Mockups router included")


@app.on_event("startup")
async def startup_event():
    """Validate configuration and build the token verifier and image generator."""
    logger.info("=" * 80)
    logger.info("FastAPI application starting up")

    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        logger.error("Please set required environment variables in .env file")
        raise

    app.state.token_verifier = FirebaseTokenVerifier(
        Config.get_firebase_project_id(), Config.FIREBASE_CERTS_URL
    )
    app.state.image_generator = create_image_generator(Config.IMAGE_GENERATOR_TYPE)

    logger.info(f"Using image generator: {Config.IMAGE_GENERATOR_TYPE}")
    logger.info(f"Host: {Config.HOST}:{Config.PORT}")
    logger.info("=" * 80)


@app.on_event("shutdown")
async def shutdown_event():
    """Log shutdown event."""
    logger.info("FastAPI application shutting down")


@app.api_route("/", methods=ALL_METHODS, response_class=PlainTextResponse)
def hello():
    """Greeting endpoint."""
    return f"Hello {Config.NAME}!\n"


# Run server directly
if __name__ == "__main__":
    logger.info(f"Starting server on {Config.HOST}:{Config.PORT}")
    uvicorn.run(
        "app:app",
        host=Config.HOST,
        port=Config.PORT,
        log_level="info"
    )
