# adstudio/features/image_ad/service.py
import asyncio

from adstudio.constants import find_preset
from adstudio.errors import (
    AdStudioError,
    EmptyGenerationResult,
    GenerationServiceError,
    MissingRequiredInput,
)
from adstudio.lib.backends import is_credential_rejection
from adstudio.lib.credentials import CallClass
from adstudio.lib.media import attachment_bytes, attachment_from_base64, suggest_aspect_ratio
from adstudio.logger import get_logger
from adstudio.schemas import ImageGenerationRequest, ImageResolution, MediaResult, WatermarkSpec
from adstudio.studio import Studio

from .prompt import compose_image_request
from .schemas import GenerateImageAdRequest

log = get_logger(__name__)


def build_image_request(req: GenerateImageAdRequest) -> ImageGenerationRequest:
    """Decode the uploaded images, fill defaults and compose the generation request."""
    product = attachment_from_base64(req.product_image_base64)
    model = attachment_from_base64(req.model_image_base64)
    background = attachment_from_base64(req.background_image_base64)

    instruction_text = req.prompt
    if not instruction_text.strip() and req.preset:
        preset = find_preset(req.preset)
        if preset is None:
            raise MissingRequiredInput(f"Unknown preset: {req.preset}")
        instruction_text = preset["prompt"]

    aspect_ratio, resolution = req.aspect_ratio, req.resolution
    if aspect_ratio is None and product is not None:
        aspect_ratio, suggested = suggest_aspect_ratio(attachment_bytes(product))
        resolution = resolution or suggested
        log.info(f"Suggested aspect ratio {aspect_ratio.value} from the product image")

    wm = req.watermark
    watermark = WatermarkSpec(
        enabled=wm.enabled,
        kind=wm.kind,
        text=wm.text,
        image=attachment_from_base64(wm.image_base64),
        position=wm.position,
        opacity=wm.opacity,
    )
    return compose_image_request(
        product,
        model,
        background,
        instruction_text=instruction_text,
        aspect_ratio=aspect_ratio,
        resolution=resolution or ImageResolution.R2K,
        watermark=watermark,
    )


async def generate_image_ad(request: ImageGenerationRequest, *, studio: Studio) -> MediaResult:
    backend, _ = studio.backend(CallClass.GENERAL)
    log.info(
        f"Generating ad image: call_class=general model={studio.config.image_model} "
        f"attachments={[r.value for r in request.roles]} aspect={request.aspect_ratio.value}"
    )
    try:
        result = await asyncio.to_thread(backend.generate_image, request, model=studio.config.image_model)
    except AdStudioError:
        raise
    except Exception as e:
        if is_credential_rejection(str(e)):
            raise studio.credential_rejected() from e
        log.error(f"Error generating ad image: {e}")
        raise GenerationServiceError(f"Failed to generate image: {e}") from e

    if result is None:
        raise EmptyGenerationResult("No image was generated. Try a different prompt.")
    log.info(f"Ad image generated ({result.media.mime_type}, {len(result.grounding)} grounding chunks)")
    return result
