# adstudio/errors.py
from typing import Any, Optional


class AdStudioError(Exception):
    """Base for every failure surfaced to the caller. Nothing here is retried automatically."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "detail": self.message}


class NoCredentialAvailable(AdStudioError):
    status_code = 401

    def __init__(self, message: str = "API key is not configured. Enter a manual key or set API_KEY in the environment."):
        super().__init__(message)


class UnreadableMedia(AdStudioError):
    status_code = 400


class MissingRequiredInput(AdStudioError):
    status_code = 422


class MissingWatermarkAsset(AdStudioError):
    status_code = 422

    def __init__(self, message: str = "Watermark type is 'image' but no watermark image was supplied. Upload one or switch to a text watermark."):
        super().__init__(message)


class EmptyGenerationResult(AdStudioError):
    status_code = 502


class VideoGenerationFailed(AdStudioError):
    status_code = 502


class VideoDeliveryFailed(AdStudioError):
    """The video finished but could not be fetched or stored."""

    status_code = 502


class VideoGenerationTimeout(AdStudioError):
    """
    The client stopped watching the job. The job itself was NOT cancelled and
    may still finish on the server; `handle` lets a caller look it up later.
    """

    status_code = 504

    def __init__(self, attempts: int, interval_seconds: float, handle: Optional[Any] = None):
        waited = attempts * interval_seconds
        super().__init__(
            f"Video generation did not finish after {attempts} polls (~{waited:.0f}s). "
            "Stopped waiting; the job may still complete server-side."
        )
        self.attempts = attempts
        self.handle = handle


class CredentialRejected(AdStudioError):
    status_code = 401

    def __init__(self, message: str = "The API key was rejected or could not be found. Please select an API key again."):
        super().__init__(message)


class MalformedEnhancementResponse(AdStudioError):
    status_code = 502


class NoAudioReturned(AdStudioError):
    status_code = 502

    def __init__(self, message: str = "No audio data received from the speech service."):
        super().__init__(message)


class InvalidJobTransition(RuntimeError):
    """Programming error: a video job tried to leave a terminal state."""


class GenerationServiceError(AdStudioError):
    """The generation service failed for a reason not covered above."""

    status_code = 502
