# adstudio/features/enhancements/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List

class EnhancementResult(BaseModel):
    """Creative extras derived from a finished video's scene description."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    music: str = Field(..., description="Background music style suggestion")
    subtitles: List[str] = Field(..., description="Subtitle lines in display order")
    voice_over_script: str = Field(..., description="Short voice-over script")
