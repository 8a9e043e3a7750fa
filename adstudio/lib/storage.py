import os
import uuid
from datetime import timedelta
from typing import Any, Dict, Optional
from fastapi import HTTPException
from google.cloud import storage
from adstudio.config import config
from adstudio import logger

log = logger.get_logger(__name__)

_storage = None
def _client():
    global _storage
    if _storage is None:
        _storage = storage.Client()
    return _storage

def _signing_creds():
    import google.auth
    from google.auth import impersonated_credentials
    # Base creds from runtime (Cloud Run SA token)
    base_creds, _ = google.auth.default(scopes=["https://www.googleapis.com/auth/cloud-platform"])
    # A key file already carries a signer
    if getattr(base_creds, "signer", None):
        return base_creds
    # Otherwise impersonate a service account that CAN sign
    target_sa = os.getenv("GCS_SIGNING_SERVICE_ACCOUNT")
    if not target_sa:
        try:
            from google.auth.compute_engine import metadata
            target_sa = metadata.get_service_account_email()
        except Exception as e:
            log.warning(f"Could not read service account from metadata: {e}")
    if not target_sa:
        raise HTTPException(500, "Cannot sign URLs: set GCS_SIGNING_SERVICE_ACCOUNT to the service account email.")
    return impersonated_credentials.Credentials(
        source_credentials=base_creds,
        target_principal=target_sa,
        target_scopes=[
            "https://www.googleapis.com/auth/devstorage.read_write",
            "https://www.googleapis.com/auth/cloud-platform",
        ],
        lifetime=3600,
    )

def _bucket():
    if not config.gcs_bucket:
        raise HTTPException(500, "GCS_BUCKET not configured")
    return _client().bucket(config.gcs_bucket)

def _signed(blob, filename: str, content_type: str) -> str:
    return blob.generate_signed_url(
        version="v4",
        expiration=timedelta(seconds=config.signed_url_ttl),
        method="GET",
        response_disposition=f'inline; filename="{filename}"',
        response_type=content_type,
        credentials=_signing_creds(),
    )

def _result(object_name: str, signed_url: str, content_type: str) -> Dict[str, Any]:
    return {
        "bucket": config.gcs_bucket,
        "object": object_name,
        "gs_uri": f"gs://{config.gcs_bucket}/{object_name}",
        "signed_url": signed_url,
        "expires_in": config.signed_url_ttl,
        "content_type": content_type,
    }

def upload_bytes_to_gcs(
    data: bytes,
    *,
    content_type: str,
    filename: str,
    subdir: str = "ads",
    object_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Upload an in-memory result (generated image) and return a signed GET URL."""
    bucket = _bucket()
    if not object_name:
        object_name = f"{subdir}/{uuid.uuid4().hex}/{filename}"
    blob = bucket.blob(object_name)
    blob.cache_control = "public, max-age=31536000"
    blob.upload_from_string(data, content_type=content_type)
    log.info(f"Uploaded {len(data)} bytes to gs://{config.gcs_bucket}/{object_name}")
    return _result(object_name, _signed(blob, filename, content_type), content_type)

def upload_file_to_gcs(
    local_path: str,
    *,
    content_type: str,
    subdir: str = "ads",
    object_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Upload a file on disk (downloaded video) and return a signed GET URL."""
    bucket = _bucket()
    filename = os.path.basename(local_path)
    if not object_name:
        object_name = f"{subdir}/{uuid.uuid4().hex}/{filename}"
    blob = bucket.blob(object_name)
    blob.cache_control = "public, max-age=31536000"
    blob.upload_from_filename(local_path, content_type=content_type)
    log.info(f"Uploaded {local_path} to gs://{config.gcs_bucket}/{object_name}")
    return _result(object_name, _signed(blob, filename, content_type), content_type)
