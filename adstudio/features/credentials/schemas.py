# adstudio/features/credentials/schemas.py
from pydantic import BaseModel, Field

class SetCredentialRequest(BaseModel):
    api_key: str = Field("", description="Manual API key; empty clears it")

class CredentialStatus(BaseModel):
    has_manual: bool
    has_environment: bool
    has_platform: bool
    platform_required: bool
    available: bool
    video_available: bool
