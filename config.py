"""
Configuration module - loads all settings from environment variables.
"""
import os
import json
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
try:
    load_dotenv()
except Exception as e:
    print(f"Warning: Failed to load .env file: {e}")
    print("Continuing with environment variables or defaults...")


SUPPORTED_GENERATOR_TYPES = ("gemini", "mock")


class Config:
    """Application configuration loaded from environment variables."""

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Safely parse integer environment variable."""
        try:
            return int(os.getenv(key, str(default)))
        except (ValueError, TypeError) as e:
            print(f"Warning: Invalid integer for {key}, using default {default}: {e}")
            return default

    # Firebase identity
    FIREBASE_PROJECT_ID: str = os.getenv("FIREBASE_PROJECT_ID", "")
    FIREBASE_SERVICE_ACCOUNT_PATH: str = os.getenv("FIREBASE_SERVICE_ACCOUNT_PATH", "")
    GOOGLE_CLOUD_PROJECT: str = os.getenv("GOOGLE_CLOUD_PROJECT", "")
    FIREBASE_CERTS_URL: str = os.getenv(
        "FIREBASE_CERTS_URL",
        "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com",
    )

    # Image generation
    IMAGE_GENERATOR_TYPE: str = (os.getenv("IMAGE_GENERATOR_TYPE") or "gemini").lower()
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-preview-image-generation")

    # Greeting
    NAME: str = os.getenv("NAME") or "World"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _get_int.__func__("PORT", 8080)

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        if cls.IMAGE_GENERATOR_TYPE not in SUPPORTED_GENERATOR_TYPES:
            raise ValueError(f"unsupported image generator type: {cls.IMAGE_GENERATOR_TYPE}")
        if not cls.get_firebase_project_id():
            raise ValueError(
                "FIREBASE_PROJECT_ID (or a service account file with project_id) is required"
            )
        if cls.IMAGE_GENERATOR_TYPE == "gemini" and not cls.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")

    @classmethod
    def get_firebase_project_id(cls) -> Optional[str]:
        """
        Resolve the Firebase project id.

        Order: FIREBASE_PROJECT_ID, then the service account file's
        ``project_id``, then GOOGLE_CLOUD_PROJECT.
        """
        if cls.FIREBASE_PROJECT_ID:
            return cls.FIREBASE_PROJECT_ID

        if cls.FIREBASE_SERVICE_ACCOUNT_PATH:
            try:
                with open(cls.FIREBASE_SERVICE_ACCOUNT_PATH, "r", encoding="utf-8") as f:
                    project_id = json.load(f).get("project_id")
                if project_id:
                    return project_id
            except (IOError, OSError, ValueError) as e:
                print(f"Warning: Failed to read service account file: {e}")

        return cls.GOOGLE_CLOUD_PROJECT or None

    @classmethod
    def get_gemini_api_key(cls) -> str:
        """Get GEMINI_API_KEY, raise error if not set."""
        if not cls.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY must be set in environment variables")
        return cls.GEMINI_API_KEY
