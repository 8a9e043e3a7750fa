from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from adstudio.lib.audio import TimelineSink
from adstudio.studio import Studio, get_studio

from .schemas import ScheduledSpeech, SpeakRequest
from .service import speak

router = APIRouter(prefix="/api/v1", tags=["speech"])

@router.post("/speech", response_model=ScheduledSpeech)
async def speak_endpoint(req: SpeakRequest, studio: Studio = Depends(get_studio)):
    scheduled = await speak(req.script, studio=studio)
    return ScheduledSpeech(start=scheduled.start, duration=scheduled.duration, end=scheduled.end)

@router.get("/speech/timeline.wav")
def timeline_endpoint(studio: Studio = Depends(get_studio)):
    sink = studio.playback.sink
    if not isinstance(sink, TimelineSink):
        raise HTTPException(404, "The active audio sink does not keep a timeline")
    return Response(content=sink.to_wav(), media_type="audio/wav")
