from fastapi import APIRouter, Depends

from adstudio.errors import MissingRequiredInput
from adstudio.lib.media import attachment_from_base64
from adstudio.studio import Studio, get_studio

from .schemas import ExtractPromptRequest, ExtractPromptResponse
from .service import extract_prompt

router = APIRouter(prefix="/api/v1", tags=["prompts"])

@router.post("/prompts/extract", response_model=ExtractPromptResponse)
async def extract_prompt_endpoint(req: ExtractPromptRequest, studio: Studio = Depends(get_studio)):
    image = attachment_from_base64(req.image_base64)
    if image is None:
        raise MissingRequiredInput(f"Please upload a {req.source} image first.")
    return await extract_prompt(image, studio=studio)
