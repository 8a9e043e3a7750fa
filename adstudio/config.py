# adstudio/config.py
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}

def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)

def _env_float(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return float(val)

def _env_csv(name: str, default: str = "*") -> List[str]:
    raw = os.getenv(name, default)
    return [x.strip() for x in raw.split(",") if x.strip()]

# Per-provider defaults for each call class
_PROVIDER_DEFAULTS = {
    "gemini": {
        "key_env": "GEMINI_API_KEY",
        "image_model": "gemini-2.5-flash-image",
        "text_model": "gemini-2.5-flash",
        "video_model": "veo-3.1-fast-generate-preview",
        "tts_model": "gemini-2.5-flash-preview-tts",
        "tts_voice": "Kore",
    },
    "openai": {
        "key_env": "OPENAI_API_KEY",
        "image_model": "gpt-image-1",
        "text_model": "gpt-4o-mini",
        "video_model": "sora-2",
        "tts_model": "gpt-4o-mini-tts",
        "tts_voice": "nova",
    },
}

@dataclass(frozen=True)
class Config:
    # Generation backend
    provider: str                  # valid: gemini, openai
    env_api_key: str               # environment-provided default credential
    image_model: str
    text_model: str
    video_model: str
    tts_model: str
    tts_voice: str
    # Video polling: interval * max attempts is the longest a caller waits
    video_poll_interval_seconds: float
    video_poll_max_attempts: int
    # Speech
    tts_sample_rate: int
    tts_channels: int
    # Credentials
    credential_store_path: Path
    require_platform_credential: bool
    # API / CORS
    allowed_origins: List[str]
    # Output handling
    keep_outputs: bool
    base_output_dir: Path
    # Logging
    log_level: str
    # GCS delivery
    gcs_bucket: str
    signed_url_ttl: int

def load_config() -> Config:
    provider = os.getenv("GENERATION_PROVIDER", "gemini").strip().lower()
    if provider not in _PROVIDER_DEFAULTS:
        raise ValueError(f"GENERATION_PROVIDER must be one of {sorted(_PROVIDER_DEFAULTS)}, got {provider!r}")
    defaults = _PROVIDER_DEFAULTS[provider]
    base_output_dir = Path(os.getenv("OUTPUT_DIR", str(Path(__file__).resolve().parent / "output")))
    return Config(
        provider = provider,
        env_api_key = os.getenv("API_KEY") or os.getenv(defaults["key_env"], ""),
        image_model = os.getenv("IMAGE_MODEL", defaults["image_model"]),
        text_model = os.getenv("TEXT_MODEL", defaults["text_model"]),
        video_model = os.getenv("VIDEO_MODEL", defaults["video_model"]),
        tts_model = os.getenv("TTS_MODEL", defaults["tts_model"]),
        tts_voice = os.getenv("TTS_VOICE", defaults["tts_voice"]),
        video_poll_interval_seconds = _env_float("VIDEO_POLL_INTERVAL_SECONDS", 10.0),
        video_poll_max_attempts = _env_int("VIDEO_POLL_MAX_ATTEMPTS", 60),
        tts_sample_rate = _env_int("TTS_SAMPLE_RATE", 24000),
        tts_channels = _env_int("TTS_CHANNELS", 1),
        credential_store_path = Path(os.getenv("CREDENTIAL_STORE_PATH", str(base_output_dir / "credentials.json"))),
        require_platform_credential = _env_bool("REQUIRE_PLATFORM_CREDENTIAL", False),
        allowed_origins = _env_csv("ALLOWED_ORIGINS", "*"),
        keep_outputs = _env_bool("KEEP_OUTPUTS", False),
        base_output_dir = base_output_dir,
        log_level = os.getenv("LOG_LEVEL", "INFO"),
        gcs_bucket = os.getenv("GCS_BUCKET", ""),
        signed_url_ttl = _env_int("GCS_SIGNED_URL_TTL", 3600),
    )

# Load once and ensure output directory exists
config = load_config()
config.base_output_dir.mkdir(parents=True, exist_ok=True)
