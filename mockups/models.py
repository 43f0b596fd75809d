"""Mockup generation Pydantic models."""
from typing import List
from pydantic import BaseModel, ConfigDict, Field, StrictStr


class GenerateRequest(BaseModel):
    """Body of POST /generateMockups. Absent keys decode as empty strings."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    projectDescription: StrictStr = ""
    colorVibe: StrictStr = ""
    colorCount: StrictStr = Field("", description="monochrome, 2-4 or 5-7")


class GenerateResponse(BaseModel):
    """Images as data URLs, in generation order."""
    model_config = ConfigDict(frozen=True)

    images: List[StrictStr]
