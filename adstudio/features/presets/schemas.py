# adstudio/features/presets/schemas.py
from pydantic import BaseModel, Field
from typing import Dict, List

from adstudio.schemas import AspectRatio, ImageResolution

class Preset(BaseModel):
    name: str
    prompt: str

class PresetsResponse(BaseModel):
    presets: List[Preset]
    resolutions: Dict[str, Dict[str, str]] = Field(default_factory=dict, description="aspect -> resolution -> pixels")

class SuggestAspectRatioRequest(BaseModel):
    image_base64: str

class SuggestAspectRatioResponse(BaseModel):
    aspect_ratio: AspectRatio
    resolution: ImageResolution
    pixels: str
