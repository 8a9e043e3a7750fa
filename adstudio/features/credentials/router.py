from fastapi import APIRouter, Depends, HTTPException

from adstudio.lib.credentials import CallClass, CredentialContext
from adstudio.studio import Studio, get_studio

from .schemas import CredentialStatus, SetCredentialRequest

router = APIRouter(prefix="/api/v1", tags=["credentials"])

def _status(credentials: CredentialContext) -> CredentialStatus:
    # never echoes the key itself
    return CredentialStatus(**credentials.status(), video_available=credentials.is_available(CallClass.VIDEO))

@router.get("/credentials", response_model=CredentialStatus)
def credential_status(studio: Studio = Depends(get_studio)):
    return _status(studio.credentials)

@router.put("/credentials", response_model=CredentialStatus)
def save_credential(req: SetCredentialRequest, studio: Studio = Depends(get_studio)):
    studio.credentials.set(req.api_key)
    return _status(studio.credentials)

@router.delete("/credentials", response_model=CredentialStatus)
def clear_credential(studio: Studio = Depends(get_studio)):
    studio.credentials.clear()
    return _status(studio.credentials)

@router.post("/credentials/platform/select", response_model=CredentialStatus)
def select_platform_credential(studio: Studio = Depends(get_studio)):
    if not studio.credentials.request_platform_credential():
        raise HTTPException(409, "No platform key picker is configured (set REQUIRE_PLATFORM_CREDENTIAL=true)")
    return _status(studio.credentials)
