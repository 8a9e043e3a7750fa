# adstudio/features/video_ad/service.py
import asyncio
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional

import requests

from adstudio.errors import (
    AdStudioError,
    CredentialRejected,
    InvalidJobTransition,
    VideoDeliveryFailed,
    VideoGenerationFailed,
    VideoGenerationTimeout,
)
from adstudio.features.enhancements.schemas import EnhancementResult
from adstudio.features.enhancements.service import derive_enhancements
from adstudio.lib.backends import GenerationJob, MediaBackend, ResultLocator, is_credential_rejection
from adstudio.lib.credentials import CallClass
from adstudio.logger import get_logger
from adstudio.schemas import VideoGenerationRequest
from adstudio.studio import Studio

log = get_logger(__name__)


class JobState(str, Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


TERMINAL_STATES = frozenset({JobState.SUCCEEDED, JobState.FAILED, JobState.TIMED_OUT})

_TRANSITIONS = {
    None: {JobState.SUBMITTED},
    JobState.SUBMITTED: {JobState.POLLING},
    JobState.POLLING: {JobState.SUCCEEDED, JobState.FAILED, JobState.TIMED_OUT},
}


class VideoJobRunner:
    """
    Submits one video job and watches it until it settles.

    Polls are strictly sequential: sleep, poll, inspect. A job error ends the
    run at once; after `max_attempts` polls without a result the runner gives
    up with VideoGenerationTimeout (the job is not cancelled server-side).
    Nothing is retried.
    """

    def __init__(
        self,
        backend: MediaBackend,
        *,
        interval_seconds: float = 10.0,
        max_attempts: int = 60,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_credential_rejected: Optional[Callable[[], CredentialRejected]] = None,
    ):
        self.backend = backend
        self.interval_seconds = interval_seconds
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._on_rejected = on_credential_rejected or CredentialRejected
        self.state: Optional[JobState] = None
        self.history: List[JobState] = []
        self.polls = 0
        self.job: Optional[GenerationJob] = None

    def _transition(self, new_state: JobState) -> None:
        if self.state in TERMINAL_STATES:
            raise InvalidJobTransition(f"video job already settled as {self.state.value}")
        if new_state not in _TRANSITIONS.get(self.state, set()):
            raise InvalidJobTransition(f"video job cannot go from {self.state} to {new_state}")
        log.debug(f"Video job state {self.state} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)

    def _failure(self, message: str) -> AdStudioError:
        if is_credential_rejection(message):
            return self._on_rejected()
        return VideoGenerationFailed(message)

    def _fail(self, message: str) -> AdStudioError:
        self._transition(JobState.FAILED)
        log.warning(f"Video job failed after {self.polls} poll(s): {message}")
        return self._failure(message)

    async def run(self, request: VideoGenerationRequest, *, model: str) -> GenerationJob:
        if self.state is not None:
            raise InvalidJobTransition("a runner watches exactly one job")
        try:
            job = await asyncio.to_thread(self.backend.start_video, request, model=model)
        except Exception as e:
            # nothing was submitted, so no state is entered
            raise self._failure(str(e)) from e
        self.job = job
        self._transition(JobState.SUBMITTED)
        self._transition(JobState.POLLING)

        while True:
            if job.error:
                raise self._fail(job.error)
            if job.done:
                self._transition(JobState.SUCCEEDED)
                log.info(f"Video job finished after {self.polls} poll(s)")
                return job
            if self.polls >= self.max_attempts:
                self._transition(JobState.TIMED_OUT)
                log.warning(f"Video job still running after {self.polls} poll(s); giving up")
                raise VideoGenerationTimeout(self.polls, self.interval_seconds, handle=job.handle)

            await self._sleep(self.interval_seconds)
            try:
                job = await asyncio.to_thread(self.backend.poll_video, job)
            except Exception as e:
                self.polls += 1
                raise self._fail(str(e)) from e
            self.polls += 1
            self.job = job
            log.debug(f"Video poll {self.polls}/{self.max_attempts}: done={job.done}")


@dataclass
class VideoOutcome:
    job: GenerationJob
    locator: ResultLocator
    polls: int
    history: List[JobState] = field(default_factory=list)


@dataclass
class VideoAdResult:
    outcome: VideoOutcome
    enhancements: Optional[EnhancementResult] = None
    enhancement_error: Optional[str] = None


async def generate_video(request: VideoGenerationRequest, *, studio: Studio) -> VideoOutcome:
    """Run one video job with the credential captured at the start of the call."""
    backend, token = studio.backend(CallClass.VIDEO)
    cfg = studio.config
    log.info(
        f"Generating ad video: call_class=video model={cfg.video_model} "
        f"aspect={request.aspect_ratio.value} resolution={request.resolution.value}"
    )
    runner = VideoJobRunner(
        backend,
        interval_seconds=cfg.video_poll_interval_seconds,
        max_attempts=cfg.video_poll_max_attempts,
        sleep=studio.sleep,
        on_credential_rejected=studio.credential_rejected,
    )
    job = await runner.run(request, model=cfg.video_model)
    locator = backend.authorize_result(job.result_uri, token)
    return VideoOutcome(job=job, locator=locator, polls=runner.polls, history=list(runner.history))


async def generate_video_ad(
    request: VideoGenerationRequest,
    *,
    scene_text: str,
    studio: Studio,
    with_enhancements: bool = True,
) -> VideoAdResult:
    """
    Video first; enhancements only once it succeeded. An enhancement failure
    does not discard the video, it is reported next to it.
    """
    outcome = await generate_video(request, studio=studio)
    result = VideoAdResult(outcome=outcome)
    if not with_enhancements:
        return result
    try:
        result.enhancements = await derive_enhancements(scene_text, studio=studio)
    except AdStudioError as e:
        log.warning(f"Video ready but enhancements failed: {e.message}")
        result.enhancement_error = e.message
    return result


def download_result(
    locator: ResultLocator,
    dest_path: str,
    *,
    timeout: float = 120.0,
    on_credential_rejected: Callable[[], CredentialRejected] = CredentialRejected,
) -> str:
    """Fetch a finished video to disk using the credential carried by the locator."""
    os.makedirs(os.path.dirname(dest_path) or ".", exist_ok=True)
    try:
        with requests.get(locator.url, headers=locator.headers, stream=True, timeout=timeout) as r:
            r.raise_for_status()
            with open(dest_path, "wb") as f:
                for chunk in r.iter_content(chunk_size=1 << 16):
                    if chunk:
                        f.write(chunk)
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        if status in (401, 403):
            raise on_credential_rejected() from e
        raise VideoDeliveryFailed(f"Failed to download the generated video (HTTP {status}).") from e
    except requests.RequestException as e:
        raise VideoDeliveryFailed(f"Failed to download the generated video: {type(e).__name__}") from e
    log.info(f"Video saved to {dest_path}")
    return dest_path
