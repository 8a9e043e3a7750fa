# adstudio/features/speech/service.py
import asyncio

from adstudio.errors import AdStudioError, GenerationServiceError, MissingRequiredInput, NoAudioReturned
from adstudio.lib.audio import AudioBuffer, ScheduledPlayback, decode_pcm16
from adstudio.lib.backends import is_credential_rejection
from adstudio.lib.credentials import CallClass
from adstudio.logger import get_logger
from adstudio.studio import Studio

log = get_logger(__name__)


async def synthesize(script: str, *, studio: Studio) -> AudioBuffer:
    if not (script or "").strip():
        raise MissingRequiredInput("There is no script to read.")
    backend, _ = studio.backend(CallClass.GENERAL)
    cfg = studio.config
    log.info(f"Synthesizing speech: call_class=general model={cfg.tts_model} voice={cfg.tts_voice}")
    try:
        pcm = await asyncio.to_thread(backend.synthesize_speech, script, model=cfg.tts_model, voice=cfg.tts_voice)
    except AdStudioError:
        raise
    except Exception as e:
        if is_credential_rejection(str(e)):
            raise studio.credential_rejected() from e
        log.error(f"Error generating speech: {e}")
        raise GenerationServiceError(f"Failed to generate speech: {e}") from e

    if not pcm:
        raise NoAudioReturned()
    buffer = decode_pcm16(pcm, sample_rate=cfg.tts_sample_rate, channels=cfg.tts_channels)
    if buffer.frames == 0:
        raise NoAudioReturned()
    return buffer


async def speak(script: str, *, studio: Studio) -> ScheduledPlayback:
    """Synthesize `script` and queue it right after whatever is already playing."""
    buffer = await synthesize(script, studio=studio)
    scheduled = studio.playback.schedule(buffer)
    log.info(f"Speech scheduled at {scheduled.start:.2f}s for {scheduled.duration:.2f}s")
    return scheduled
