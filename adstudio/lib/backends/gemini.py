# adstudio/lib/backends/gemini.py
from __future__ import annotations

import base64
from typing import Any, List, Optional, Tuple, Type
from urllib.parse import urlencode, urlparse

from google import genai
from google.genai import types
from pydantic import BaseModel

from adstudio.lib.backends.base import GenerationJob, ResultLocator
from adstudio.lib.media import attachment_bytes
from adstudio.logger import get_logger
from adstudio.schemas import (
    GroundingChunk,
    GroundingMaps,
    GroundingWeb,
    ImageGenerationRequest,
    MediaAttachment,
    MediaResult,
    ReviewSnippet,
    VideoGenerationRequest,
)

log = get_logger(__name__)


def _image_part(attachment: MediaAttachment) -> types.Part:
    return types.Part.from_bytes(data=attachment_bytes(attachment), mime_type=attachment.mime_type)

def _image(attachment: MediaAttachment) -> types.Image:
    return types.Image(image_bytes=attachment_bytes(attachment), mime_type=attachment.mime_type)

def _first_candidate(response: Any) -> Any:
    candidates = getattr(response, "candidates", None) or []
    return candidates[0] if candidates else None

def _first_inline_data(response: Any) -> Any:
    candidate = _first_candidate(response)
    content = getattr(candidate, "content", None) if candidate is not None else None
    for part in (getattr(content, "parts", None) or []):
        inline_data = getattr(part, "inline_data", None)
        if inline_data is not None and getattr(inline_data, "data", None):
            return inline_data
    return None

def _grounding_chunks(response: Any) -> List[GroundingChunk]:
    candidate = _first_candidate(response)
    metadata = getattr(candidate, "grounding_metadata", None) if candidate is not None else None
    out: List[GroundingChunk] = []
    for chunk in (getattr(metadata, "grounding_chunks", None) or []):
        web = getattr(chunk, "web", None)
        maps = getattr(chunk, "maps", None)
        web_model = None
        maps_model = None
        if web is not None and getattr(web, "uri", None):
            web_model = GroundingWeb(uri=web.uri, title=getattr(web, "title", None))
        if maps is not None and getattr(maps, "uri", None):
            sources = getattr(maps, "place_answer_sources", None)
            snippets = []
            for s in (getattr(sources, "review_snippets", None) or []):
                uri = getattr(s, "uri", None) or getattr(s, "google_maps_uri", None)
                if uri:
                    snippets.append(ReviewSnippet(uri=uri, title=getattr(s, "title", None), text=getattr(s, "text", None)))
            maps_model = GroundingMaps(uri=maps.uri, title=getattr(maps, "title", None), review_snippets=snippets)
        if web_model or maps_model:
            out.append(GroundingChunk(web=web_model, maps=maps_model))
    return out

def _operation_error(operation: Any) -> Optional[str]:
    err = getattr(operation, "error", None)
    if not err:
        return None
    if isinstance(err, dict):
        return str(err.get("message") or err)
    return str(getattr(err, "message", None) or err)

def _operation_video_uri(operation: Any) -> Optional[str]:
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    videos = getattr(response, "generated_videos", None) or []
    if not videos:
        return None
    video = getattr(videos[0], "video", None)
    return getattr(video, "uri", None) if video is not None else None

def _job_from_operation(operation: Any) -> GenerationJob:
    done = bool(getattr(operation, "done", False))
    error = _operation_error(operation)
    uri = _operation_video_uri(operation) if done and not error else None
    if done and not error and not uri:
        response = getattr(operation, "response", None)
        reasons = getattr(response, "rai_media_filtered_reasons", None) or []
        error = "No video was returned" + (f": {'; '.join(reasons)}" if reasons else ".")
    return GenerationJob(handle=operation, done=done, result_uri=uri, error=error)


class GeminiBackend:
    """google-genai adapter: Gemini for images/text/speech, Veo for video."""

    name = "gemini"

    def __init__(self, api_key: str, client: Optional[genai.Client] = None):
        self._api_key = api_key
        self._client = client or genai.Client(api_key=api_key)

    def generate_image(self, req: ImageGenerationRequest, *, model: str) -> Optional[MediaResult]:
        contents: list = [_image_part(a) for a in req.attachments]
        contents.append(types.Part.from_text(text=req.instruction))
        response = self._client.models.generate_content(
            model=model,
            contents=contents,
            config=types.GenerateContentConfig(response_modalities=[types.Modality.IMAGE]),
        )
        inline_data = _first_inline_data(response)
        if inline_data is None:
            return None
        data = inline_data.data
        if isinstance(data, (bytes, bytearray)):
            data = base64.b64encode(bytes(data)).decode("ascii")
        media = MediaAttachment(data=data, mime_type=getattr(inline_data, "mime_type", None) or "image/png")
        return MediaResult(media=media, grounding=_grounding_chunks(response))

    def start_video(self, req: VideoGenerationRequest, *, model: str) -> GenerationJob:
        config_kwargs = {
            "number_of_videos": 1,
            "resolution": req.resolution.value,
            "aspect_ratio": req.aspect_ratio.value,
        }
        if req.end_frame is not None:
            config_kwargs["last_frame"] = _image(req.end_frame)
        operation = self._client.models.generate_videos(
            model=model,
            prompt=req.instruction,
            image=_image(req.start_frame),
            config=types.GenerateVideosConfig(**config_kwargs),
        )
        return _job_from_operation(operation)

    def poll_video(self, job: GenerationJob) -> GenerationJob:
        operation = self._client.operations.get(job.handle)
        return _job_from_operation(operation)

    def generate_json(self, prompt: str, *, schema: Type[BaseModel], model: str, system: str = "") -> str:
        response = self._client.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                system_instruction=system or None,
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        return (getattr(response, "text", None) or "").strip()

    def synthesize_speech(self, script: str, *, model: str, voice: str) -> Optional[bytes]:
        response = self._client.models.generate_content(
            model=model,
            contents=script,
            config=types.GenerateContentConfig(
                response_modalities=[types.Modality.AUDIO],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                    ),
                ),
            ),
        )
        inline_data = _first_inline_data(response)
        if inline_data is None:
            return None
        data = inline_data.data
        if isinstance(data, str):
            data = base64.b64decode(data)
        return bytes(data)

    def describe_image(self, image: MediaAttachment, instruction: str, *, model: str) -> Tuple[str, List[GroundingChunk]]:
        response = self._client.models.generate_content(
            model=model,
            contents=[_image_part(image), types.Part.from_text(text=instruction)],
            config=types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())],
                max_output_tokens=500,
                thinking_config=types.ThinkingConfig(thinking_budget=100),
            ),
        )
        return (getattr(response, "text", None) or "").strip(), _grounding_chunks(response)

    def authorize_result(self, uri: str, token: str) -> ResultLocator:
        # Veo download links are only served with the key as a query parameter
        sep = "&" if urlparse(uri).query else "?"
        return ResultLocator(url=f"{uri}{sep}{urlencode({'key': token})}")
