# adstudio/features/video_ad/schemas.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

from adstudio.features.enhancements.schemas import EnhancementResult
from adstudio.schemas import VideoAspectRatio, VideoResolution

class GenerateVideoAdRequest(BaseModel):
    start_frame_base64: Optional[str] = Field(None, description="Starting frame (data URL or raw base64)")
    end_frame_base64: Optional[str] = Field(None, description="Optional final frame")
    prompt: str = Field("", description="Scene description")
    aspect_ratio: VideoAspectRatio = VideoAspectRatio.LANDSCAPE
    resolution: VideoResolution = VideoResolution.HD
    with_enhancements: bool = True
    # download: fetched server-side and served from /videos/{job_id}
    # signed_url: fetched server-side and uploaded to GCS
    # reference: bare result URI, no credential attached
    return_mode: Literal["download", "signed_url", "reference"] = "download"

class VideoAdResponse(BaseModel):
    job_id: str
    state: str
    polls: int
    video_url: str
    storage: Optional[Dict[str, Any]] = None
    state_history: List[str] = Field(default_factory=list)
    enhancements: Optional[EnhancementResult] = None
    enhancement_error: Optional[str] = None
    delivery_error: Optional[str] = None
