# adstudio/studio.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from functools import partial
from typing import Awaitable, Callable, Optional, Tuple

from fastapi import Request

from adstudio.config import Config, config
from adstudio.errors import CredentialRejected
from adstudio.lib.audio import PlaybackQueue, TimelineSink
from adstudio.lib.backends import BackendFactory, MediaBackend, make_backend
from adstudio.lib.credentials import (
    CallClass,
    CredentialContext,
    FlagPlatformChooser,
    JsonFileCredentialStore,
)


@dataclass
class Studio:
    """
    Everything a service call needs, passed explicitly: settings, the active
    credential context, the backend factory, the shared playback queue and the
    delay used between video polls.
    """
    config: Config
    credentials: CredentialContext
    backend_factory: BackendFactory
    playback: PlaybackQueue
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    def backend(self, call_class: CallClass = CallClass.GENERAL) -> Tuple[MediaBackend, str]:
        """Resolve the key once and bind a backend to it. Raises NoCredentialAvailable first."""
        token = self.credentials.resolve(call_class)
        return self.backend_factory(token), token

    def credential_rejected(self) -> CredentialRejected:
        """The key was refused: forget the platform selection so the next attempt re-prompts."""
        self.credentials.reset_platform_credential()
        return CredentialRejected()


def build_studio(cfg: Optional[Config] = None) -> Studio:
    cfg = cfg or config
    credentials = CredentialContext(
        env_default=cfg.env_api_key,
        store=JsonFileCredentialStore(cfg.credential_store_path),
        chooser=FlagPlatformChooser() if cfg.require_platform_credential else None,
    )
    credentials.load()
    sink = TimelineSink(sample_rate=cfg.tts_sample_rate, channels=cfg.tts_channels)
    return Studio(
        config=cfg,
        credentials=credentials,
        backend_factory=partial(make_backend, cfg.provider),
        playback=PlaybackQueue(sink),
    )


def get_studio(request: Request) -> Studio:
    return request.app.state.studio
