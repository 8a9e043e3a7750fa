# adstudio/features/prompt_extract/service.py
import asyncio

from adstudio.errors import AdStudioError, GenerationServiceError
from adstudio.lib.backends import is_credential_rejection
from adstudio.lib.credentials import CallClass
from adstudio.logger import get_logger
from adstudio.schemas import MediaAttachment
from adstudio.studio import Studio

from .prompt import EXTRACT_INSTRUCTION
from .schemas import ExtractPromptResponse

log = get_logger(__name__)

async def extract_prompt(image: MediaAttachment, *, studio: Studio) -> ExtractPromptResponse:
    """Turn a product (or background) photo into a ready-to-edit ad prompt."""
    backend, _ = studio.backend(CallClass.GENERAL)
    log.info(f"Extracting prompt from image: call_class=general model={studio.config.text_model}")
    try:
        text, grounding = await asyncio.to_thread(
            backend.describe_image, image, EXTRACT_INSTRUCTION, model=studio.config.text_model
        )
    except AdStudioError:
        raise
    except Exception as e:
        if is_credential_rejection(str(e)):
            raise studio.credential_rejected() from e
        log.error(f"Error extracting prompt from image: {e}")
        raise GenerationServiceError(f"Failed to extract prompt: {e}") from e
    return ExtractPromptResponse(prompt=text, grounding=grounding)
