from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adstudio.config import config
from adstudio.errors import AdStudioError
from adstudio.features.credentials.router import router as credentials_router
from adstudio.features.image_ad.router import router as image_ad_router
from adstudio.features.presets.router import router as presets_router
from adstudio.features.prompt_extract.router import router as prompt_extract_router
from adstudio.features.speech.router import router as speech_router
from adstudio.features.video_ad.router import router as video_ad_router
from adstudio.logger import get_logger
from adstudio.studio import build_studio

log = get_logger(__name__)

app = FastAPI(title="Ad Studio API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials=config.allowed_origins != ["*"],  # browsers reject "*" with credentials
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],  # for downloads via FileResponse
)

# one credential context and playback queue per process
app.state.studio = build_studio(config)
log.info(f"Ad Studio ready: provider={config.provider} credential={'yes' if app.state.studio.credentials.is_available() else 'no'}")

@app.exception_handler(AdStudioError)
async def ad_studio_error_handler(request: Request, exc: AdStudioError):
    log.warning(f"{request.method} {request.url.path} -> {exc.status_code} {type(exc).__name__}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

app.include_router(presets_router)
app.include_router(credentials_router)
app.include_router(prompt_extract_router)
app.include_router(image_ad_router)
app.include_router(video_ad_router)
app.include_router(speech_router)
