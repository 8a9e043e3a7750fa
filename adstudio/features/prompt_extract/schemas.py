# adstudio/features/prompt_extract/schemas.py
from pydantic import BaseModel, Field
from typing import List, Literal

from adstudio.schemas import GroundingChunk

class ExtractPromptRequest(BaseModel):
    image_base64: str = Field(..., description="Product or background image (data URL or raw base64)")
    source: Literal["product", "background"] = "product"

class ExtractPromptResponse(BaseModel):
    prompt: str
    grounding: List[GroundingChunk] = Field(default_factory=list)
