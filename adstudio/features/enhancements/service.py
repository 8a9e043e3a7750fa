# adstudio/features/enhancements/service.py
import asyncio

from pydantic import ValidationError

from adstudio.errors import AdStudioError, GenerationServiceError, MalformedEnhancementResponse, MissingRequiredInput
from adstudio.lib.backends import is_credential_rejection
from adstudio.lib.credentials import CallClass
from adstudio.lib.json_tools import extract_json_block
from adstudio.logger import get_logger
from adstudio.studio import Studio

from .prompt import SYSTEM, build_enhancement_prompt
from .schemas import EnhancementResult

log = get_logger(__name__)

async def derive_enhancements(instruction_text: str, *, studio: Studio) -> EnhancementResult:
    if not (instruction_text or "").strip():
        raise MissingRequiredInput("A scene description is required to suggest enhancements.")
    backend, _ = studio.backend(CallClass.GENERAL)
    log.info(f"Deriving video enhancements: call_class=general model={studio.config.text_model}")
    try:
        raw = await asyncio.to_thread(
            backend.generate_json,
            build_enhancement_prompt(scene=instruction_text),
            schema=EnhancementResult,
            model=studio.config.text_model,
            system=SYSTEM,
        )
    except AdStudioError:
        raise
    except Exception as e:
        if is_credential_rejection(str(e)):
            raise studio.credential_rejected() from e
        log.error(f"Error deriving enhancements: {e}")
        raise GenerationServiceError(f"Failed to generate enhancements: {e}") from e

    try:
        return EnhancementResult.model_validate_json(extract_json_block(raw))
    except ValidationError as e:
        log.warning(f"Enhancement response did not match the schema: {e.error_count()} error(s)")
        raise MalformedEnhancementResponse(f"Enhancement response was not valid: {e}") from e
