# adstudio/features/video_ad/prompt.py
from typing import Optional

from adstudio.errors import MissingRequiredInput
from adstudio.schemas import (
    MediaAttachment,
    VideoAspectRatio,
    VideoGenerationRequest,
    VideoResolution,
)


def build_video_instruction(*, scene: str, has_end_frame: bool) -> str:
    instruction = (
        "Create a short, polished advertising video for the product shown in the starting frame. "
        f"Scene: {scene.strip()}"
    )
    if has_end_frame:
        instruction += " Finish the shot on the supplied final frame with a smooth transition."
    return instruction


def compose_video_request(
    start_frame: Optional[MediaAttachment],
    end_frame: Optional[MediaAttachment] = None,
    *,
    instruction_text: str,
    aspect_ratio: VideoAspectRatio = VideoAspectRatio.LANDSCAPE,
    resolution: VideoResolution = VideoResolution.HD,
) -> VideoGenerationRequest:
    if start_frame is None:
        raise MissingRequiredInput("Please upload a starting frame image for the video.")
    if not (instruction_text or "").strip():
        raise MissingRequiredInput("Please describe the video scene.")
    return VideoGenerationRequest(
        start_frame=start_frame,
        end_frame=end_frame,
        instruction=build_video_instruction(scene=instruction_text, has_end_frame=end_frame is not None),
        aspect_ratio=aspect_ratio,
        resolution=resolution,
    )
