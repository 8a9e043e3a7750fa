# adstudio/lib/backends/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, Type

from pydantic import BaseModel

from adstudio.schemas import (
    GroundingChunk,
    ImageGenerationRequest,
    MediaAttachment,
    MediaResult,
    VideoGenerationRequest,
)


@dataclass(frozen=True)
class GenerationJob:
    """One observation of an asynchronous video job. Backends return a fresh one per poll."""
    handle: Any
    done: bool = False
    result_uri: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ResultLocator:
    """A result URI together with whatever the service needs to let us fetch it."""
    url: str
    headers: Dict[str, str] = field(default_factory=dict)


# Failure texts that mean "this key is unknown or not allowed", never worth retrying
_CREDENTIAL_REJECTION_MARKERS = (
    "requested entity was not found",
    "api key not valid",
    "api_key_invalid",
    "invalid_api_key",
    "incorrect api key",
    "permission_denied",
    "401 unauthorized",
    "403 forbidden",
)

def is_credential_rejection(message: Optional[str]) -> bool:
    if not message:
        return False
    low = message.lower()
    return any(marker in low for marker in _CREDENTIAL_REJECTION_MARKERS)


class MediaBackend(Protocol):
    """Everything the studio needs from a generative media service."""

    name: str

    def generate_image(self, req: ImageGenerationRequest, *, model: str) -> Optional[MediaResult]:
        """Single round trip. None when the response carries no inline media."""
        ...

    def start_video(self, req: VideoGenerationRequest, *, model: str) -> GenerationJob: ...

    def poll_video(self, job: GenerationJob) -> GenerationJob: ...

    def generate_json(self, prompt: str, *, schema: Type[BaseModel], model: str, system: str = "") -> str:
        """Structured output request; returns the raw JSON text."""
        ...

    def synthesize_speech(self, script: str, *, model: str, voice: str) -> Optional[bytes]:
        """Raw 16-bit little-endian PCM, or None if nothing came back."""
        ...

    def describe_image(
        self, image: MediaAttachment, instruction: str, *, model: str
    ) -> Tuple[str, List[GroundingChunk]]: ...

    def authorize_result(self, uri: str, token: str) -> ResultLocator: ...
