# adstudio/features/speech/schemas.py
from pydantic import BaseModel, Field

class SpeakRequest(BaseModel):
    script: str = Field(..., description="Text to read aloud (usually the voice-over script)")

class ScheduledSpeech(BaseModel):
    start: float = Field(..., description="Timeline position in seconds")
    duration: float
    end: float
