# adstudio/schemas.py
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class MediaAttachment(BaseModel):
    """An encoded image plus its MIME type, ready to be embedded in a request."""
    model_config = ConfigDict(frozen=True)

    data: str = Field(..., description="Base64 payload (no data: prefix)")
    mime_type: str

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT_3_4 = "3:4"
    LANDSCAPE_4_3 = "4:3"
    PORTRAIT_9_16 = "9:16"
    LANDSCAPE_16_9 = "16:9"


class ImageResolution(str, Enum):
    R2K = "2K"
    R4K = "4K"
    R8K = "8K"


class VideoAspectRatio(str, Enum):
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"


class VideoResolution(str, Enum):
    HD = "720p"
    FULL_HD = "1080p"


class WatermarkKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class WatermarkPosition(str, Enum):
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    MIDDLE_LEFT = "middle-left"
    CENTER = "center"
    MIDDLE_RIGHT = "middle-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"


class WatermarkSpec(BaseModel):
    enabled: bool = False
    kind: WatermarkKind = WatermarkKind.TEXT
    text: Optional[str] = None
    image: Optional[MediaAttachment] = None
    position: WatermarkPosition = WatermarkPosition.BOTTOM_RIGHT
    opacity: float = Field(0.5, ge=0.0, le=1.0)


# -------- grounding / citations (passed through untouched) --------

class GroundingWeb(BaseModel):
    uri: str
    title: Optional[str] = None


class ReviewSnippet(BaseModel):
    uri: str
    title: Optional[str] = None
    text: Optional[str] = None


class GroundingMaps(BaseModel):
    uri: str
    title: Optional[str] = None
    review_snippets: List[ReviewSnippet] = Field(default_factory=list)


class GroundingChunk(BaseModel):
    web: Optional[GroundingWeb] = None
    maps: Optional[GroundingMaps] = None

    @model_validator(mode="after")
    def _one_source(self):
        if self.web is None and self.maps is None:
            raise ValueError("grounding chunk needs a web or maps source")
        return self


class MediaResult(BaseModel):
    media: MediaAttachment
    grounding: List[GroundingChunk] = Field(default_factory=list)


# -------- composed requests (what the backends receive) --------

class AttachmentRole(str, Enum):
    PRODUCT = "product"
    MODEL = "model"
    BACKGROUND = "background"
    WATERMARK = "watermark"


class ImageGenerationRequest(BaseModel):
    """
    Attachments in send order (product, model?, background?, watermark?).
    The instruction refers to them by position, so the order is part of the contract.
    """
    model_config = ConfigDict(frozen=True)

    attachments: List[MediaAttachment]
    roles: List[AttachmentRole]
    instruction: str
    aspect_ratio: AspectRatio
    resolution: ImageResolution

    def parts(self) -> list:
        """Attachments followed by the instruction, which is always last."""
        return [*self.attachments, self.instruction]


class VideoGenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_frame: MediaAttachment
    end_frame: Optional[MediaAttachment] = None
    instruction: str
    aspect_ratio: VideoAspectRatio = VideoAspectRatio.LANDSCAPE
    resolution: VideoResolution = VideoResolution.HD
