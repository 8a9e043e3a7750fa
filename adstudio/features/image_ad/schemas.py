# adstudio/features/image_ad/schemas.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

from adstudio.schemas import (
    AspectRatio,
    GroundingChunk,
    ImageResolution,
    WatermarkKind,
    WatermarkPosition,
)

class WatermarkInput(BaseModel):
    enabled: bool = False
    kind: WatermarkKind = WatermarkKind.TEXT
    text: Optional[str] = None
    image_base64: Optional[str] = Field(None, description="Watermark/logo image (data URL or raw base64)")
    position: WatermarkPosition = WatermarkPosition.BOTTOM_RIGHT
    opacity: float = Field(0.5, ge=0.0, le=1.0)

class GenerateImageAdRequest(BaseModel):
    product_image_base64: Optional[str] = Field(None, description="Product photo (data URL or raw base64)")
    model_image_base64: Optional[str] = None
    background_image_base64: Optional[str] = None
    prompt: str = Field("", description="Scene description")
    preset: Optional[str] = Field(None, description="Preset name; fills the prompt when it is empty")
    aspect_ratio: Optional[AspectRatio] = Field(None, description="Omitted -> suggested from the product photo")
    resolution: Optional[ImageResolution] = None
    watermark: WatermarkInput = Field(default_factory=WatermarkInput)
    return_mode: Literal["inline", "file", "signed_url"] = "inline"

class ImageAdResponse(BaseModel):
    image_url: str                       # data URL (inline) or signed URL
    mime_type: str
    aspect_ratio: AspectRatio
    resolution: ImageResolution
    grounding: List[GroundingChunk] = Field(default_factory=list)
    storage: Optional[Dict[str, Any]] = None
