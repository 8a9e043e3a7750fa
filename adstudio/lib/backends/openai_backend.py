# adstudio/lib/backends/openai_backend.py
from __future__ import annotations

import io
from typing import Any, List, Optional, Tuple, Type

from openai import OpenAI
from PIL import Image, ImageOps
from pydantic import BaseModel

from adstudio.lib.backends.base import GenerationJob, ResultLocator
from adstudio.lib.media import attachment_bytes
from adstudio.logger import get_logger
from adstudio.schemas import (
    AspectRatio,
    GroundingChunk,
    ImageGenerationRequest,
    MediaAttachment,
    MediaResult,
    VideoAspectRatio,
    VideoGenerationRequest,
    VideoResolution,
)

log = get_logger(__name__)

# Valid for gpt-image-1: "1024x1024", "1024x1536", "1536x1024"
_IMAGE_SIZES = {
    AspectRatio.SQUARE: "1024x1024",
    AspectRatio.PORTRAIT_3_4: "1024x1536",
    AspectRatio.PORTRAIT_9_16: "1024x1536",
    AspectRatio.LANDSCAPE_4_3: "1536x1024",
    AspectRatio.LANDSCAPE_16_9: "1536x1024",
}

_VIDEO_SIZES = {
    (VideoResolution.HD, VideoAspectRatio.LANDSCAPE): (1280, 720),
    (VideoResolution.HD, VideoAspectRatio.PORTRAIT): (720, 1280),
    (VideoResolution.FULL_HD, VideoAspectRatio.LANDSCAPE): (1792, 1024),
    (VideoResolution.FULL_HD, VideoAspectRatio.PORTRAIT): (1024, 1792),
}

_EXT = {"image/png": "png", "image/jpeg": "jpg", "image/webp": "webp", "image/gif": "gif"}


def _upload_tuple(attachment: MediaAttachment, stem: str) -> tuple:
    ext = _EXT.get(attachment.mime_type, "png")
    return (f"{stem}.{ext}", attachment_bytes(attachment), attachment.mime_type)

def _fit_frame(attachment: MediaAttachment, size: Tuple[int, int]) -> tuple:
    """The video endpoint wants the reference frame at exactly the output size."""
    img = Image.open(io.BytesIO(attachment_bytes(attachment))).convert("RGB")
    fitted = ImageOps.fit(img, size, method=Image.Resampling.LANCZOS)
    buf = io.BytesIO()
    fitted.save(buf, format="PNG")
    return ("start_frame.png", buf.getvalue(), "image/png")

def _job_from_video(video: Any, content_url: str) -> GenerationJob:
    status = str(getattr(video, "status", "") or "")
    done = status in {"completed", "failed"}
    error = None
    if status == "failed":
        err = getattr(video, "error", None)
        error = str(getattr(err, "message", None) or err or "Video generation failed.")
    return GenerationJob(
        handle=getattr(video, "id"),
        done=done,
        result_uri=content_url if status == "completed" else None,
        error=error,
    )


class OpenAIBackend:
    """OpenAI adapter: images.edit, videos, chat json_schema, audio.speech (pcm)."""

    name = "openai"

    def __init__(self, api_key: str, client: Optional[OpenAI] = None):
        self._client = client or OpenAI(api_key=api_key)

    def _content_url(self, video_id: str) -> str:
        return f"{str(self._client.base_url).rstrip('/')}/videos/{video_id}/content"

    def generate_image(self, req: ImageGenerationRequest, *, model: str) -> Optional[MediaResult]:
        files = [_upload_tuple(a, role.value) for a, role in zip(req.attachments, req.roles)]
        resp = self._client.images.edit(
            model=model,
            prompt=req.instruction,
            size=_IMAGE_SIZES.get(req.aspect_ratio, "auto"),
            n=1,
            image=files,  # list: product first, watermark (if any) last
        )
        data = getattr(resp, "data", None) or []
        b64 = getattr(data[0], "b64_json", None) if data else None
        if not b64:
            return None
        return MediaResult(media=MediaAttachment(data=b64, mime_type="image/png"), grounding=[])

    def start_video(self, req: VideoGenerationRequest, *, model: str) -> GenerationJob:
        width, height = _VIDEO_SIZES[(req.resolution, req.aspect_ratio)]
        if req.end_frame is not None:
            log.warning("End frame is not supported by the OpenAI video endpoint; ignoring it")
        video = self._client.videos.create(
            model=model,
            prompt=req.instruction,
            size=f"{width}x{height}",
            input_reference=_fit_frame(req.start_frame, (width, height)),
        )
        return _job_from_video(video, self._content_url(video.id))

    def poll_video(self, job: GenerationJob) -> GenerationJob:
        video = self._client.videos.retrieve(job.handle)
        return _job_from_video(video, self._content_url(job.handle))

    def generate_json(self, prompt: str, *, schema: Type[BaseModel], model: str, system: str = "") -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        resp = self._client.chat.completions.create(
            model=model,
            temperature=0.7,
            response_format={
                "type": "json_schema",
                "json_schema": {"name": schema.__name__, "schema": schema.model_json_schema(), "strict": True},
            },
            messages=messages,
        )
        return (resp.choices[0].message.content or "").strip()

    def synthesize_speech(self, script: str, *, model: str, voice: str) -> Optional[bytes]:
        response = self._client.audio.speech.create(
            model=model,
            voice=voice,
            input=script,
            response_format="pcm",  # 24 kHz, 16-bit, mono
        )
        content = getattr(response, "content", None)
        if content is None:
            content = response.read() if hasattr(response, "read") else None
        return bytes(content) if content else None

    def describe_image(self, image: MediaAttachment, instruction: str, *, model: str) -> Tuple[str, List[GroundingChunk]]:
        resp = self._client.chat.completions.create(
            model=model,
            max_tokens=500,
            messages=[{
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": image.to_data_url()}},
                    {"type": "text", "text": instruction},
                ],
            }],
        )
        return (resp.choices[0].message.content or "").strip(), []

    def authorize_result(self, uri: str, token: str) -> ResultLocator:
        return ResultLocator(url=uri, headers={"Authorization": f"Bearer {token}"})
