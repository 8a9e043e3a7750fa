from fastapi import APIRouter

from adstudio.constants import IMAGE_RESOLUTION_PRESETS, PRESET_PROMPTS
from adstudio.lib.media import decode_base64_image, suggest_aspect_ratio

from .schemas import Preset, PresetsResponse, SuggestAspectRatioRequest, SuggestAspectRatioResponse

router = APIRouter(prefix="/api/v1", tags=["presets"])

@router.get("/presets", response_model=PresetsResponse)
def list_presets():
    return PresetsResponse(
        presets=[Preset(**p) for p in PRESET_PROMPTS],
        resolutions={
            aspect.value: {res.value: px for res, px in by_res.items()}
            for aspect, by_res in IMAGE_RESOLUTION_PRESETS.items()
        },
    )

@router.post("/aspect-ratio/suggest", response_model=SuggestAspectRatioResponse)
def suggest_aspect_ratio_endpoint(req: SuggestAspectRatioRequest):
    data, _ = decode_base64_image(req.image_base64)
    aspect, resolution = suggest_aspect_ratio(data)
    return SuggestAspectRatioResponse(
        aspect_ratio=aspect,
        resolution=resolution,
        pixels=IMAGE_RESOLUTION_PRESETS[aspect][resolution],
    )
