from fastapi import APIRouter, Depends
from fastapi.responses import Response

from adstudio.lib.media import attachment_bytes
from adstudio.lib.storage import upload_bytes_to_gcs
from adstudio.logger import get_logger
from adstudio.studio import Studio, get_studio

from .schemas import GenerateImageAdRequest, ImageAdResponse
from .service import build_image_request, generate_image_ad

log = get_logger(__name__)
router = APIRouter(prefix="/api/v1", tags=["image"])

_EXT = {"image/png": "png", "image/jpeg": "jpg", "image/webp": "webp"}

@router.post("/generate/image", response_model=ImageAdResponse)
async def generate_image_endpoint(req: GenerateImageAdRequest, studio: Studio = Depends(get_studio)):
    request = build_image_request(req)
    result = await generate_image_ad(request, studio=studio)
    media = result.media

    if req.return_mode == "file":
        return Response(content=attachment_bytes(media), media_type=media.mime_type)

    storage = None
    image_url = media.to_data_url()
    if req.return_mode == "signed_url":
        storage = upload_bytes_to_gcs(
            attachment_bytes(media),
            content_type=media.mime_type,
            filename=f"ad.{_EXT.get(media.mime_type, 'png')}",
            subdir="images",
        )
        image_url = storage["signed_url"]

    return ImageAdResponse(
        image_url=image_url,
        mime_type=media.mime_type,
        aspect_ratio=request.aspect_ratio,
        resolution=request.resolution,
        grounding=result.grounding,
        storage=storage,
    )
