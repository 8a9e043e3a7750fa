import asyncio
import os
import uuid
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from adstudio.errors import AdStudioError
from adstudio.lib.media import attachment_from_base64
from adstudio.lib.paths import is_job_id, job_dir, make_job_dir_with_id
from adstudio.lib.storage import upload_file_to_gcs
from adstudio.logger import get_logger
from adstudio.studio import Studio, get_studio

from .prompt import compose_video_request
from .schemas import GenerateVideoAdRequest, VideoAdResponse
from .service import download_result, generate_video_ad

log = get_logger(__name__)
router = APIRouter(prefix="/api/v1", tags=["video"])

VIDEO_FILENAME = "video.mp4"

@router.post("/generate/video", response_model=VideoAdResponse)
async def generate_video_endpoint(req: GenerateVideoAdRequest, studio: Studio = Depends(get_studio)):
    request = compose_video_request(
        attachment_from_base64(req.start_frame_base64),
        attachment_from_base64(req.end_frame_base64),
        instruction_text=req.prompt,
        aspect_ratio=req.aspect_ratio,
        resolution=req.resolution,
    )
    result = await generate_video_ad(
        request,
        scene_text=req.prompt,
        studio=studio,
        with_enhancements=req.with_enhancements,
    )
    outcome = result.outcome

    storage = None
    delivery_error = None
    if req.return_mode == "reference":
        # bare URI; the caller authorizes it with their own key
        job_id = uuid.uuid4().hex
        video_url = outcome.job.result_uri
    else:
        job_id, workdir = make_job_dir_with_id()
        try:
            local = await asyncio.to_thread(
                download_result,
                outcome.locator,
                os.path.join(workdir, VIDEO_FILENAME),
                on_credential_rejected=studio.credential_rejected,
            )
            if req.return_mode == "signed_url":
                storage = await asyncio.to_thread(
                    upload_file_to_gcs, local, content_type="video/mp4", subdir=f"videos/{job_id}"
                )
                video_url = storage["signed_url"]
                if not studio.config.keep_outputs:
                    os.remove(local)
            else:
                video_url = f"/api/v1/videos/{job_id}"
        except Exception as e:
            # the job already succeeded; hand back the bare URI instead of dropping it
            log.warning(f"Video {job_id} finished but delivery failed: {e}")
            if isinstance(e, AdStudioError):
                delivery_error = e.message
            else:
                delivery_error = f"Failed to store the generated video: {e}"
            storage = None
            video_url = outcome.job.result_uri

    return VideoAdResponse(
        job_id=job_id,
        state=outcome.history[-1].value,
        polls=outcome.polls,
        video_url=video_url,
        storage=storage,
        state_history=[s.value for s in outcome.history],
        enhancements=result.enhancements,
        enhancement_error=result.enhancement_error,
        delivery_error=delivery_error,
    )

@router.get("/videos/{job_id}")
def get_video(job_id: str):
    if not is_job_id(job_id):
        raise HTTPException(400, "Invalid job id")
    path = os.path.join(job_dir(job_id, create=False), VIDEO_FILENAME)
    if not os.path.exists(path):
        raise HTTPException(404, "Video not found")
    return FileResponse(path, media_type="video/mp4", filename=f"ad_{job_id}.mp4")
