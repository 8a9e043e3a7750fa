# tests/conftest.py
import dataclasses
import os
import tempfile

# keep config side effects (output dir, credential file) out of the source tree
os.environ.setdefault("OUTPUT_DIR", tempfile.mkdtemp(prefix="adstudio_test_"))
os.environ.setdefault("GENERATION_PROVIDER", "gemini")

import pytest
from fastapi.testclient import TestClient

from adstudio.config import config
from adstudio.lib.audio import PlaybackQueue, TimelineSink
from adstudio.lib.credentials import CredentialContext, MemoryCredentialStore
from adstudio.studio import Studio

from tests.fakes import ENV_KEY, FakeBackend, FakeClock, FakeSleep

# -------- Fixtures --------
@pytest.fixture
def backend():
    return FakeBackend()

@pytest.fixture
def sleeper():
    return FakeSleep()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def studio(backend, sleeper, clock):
    cfg = dataclasses.replace(
        config,
        env_api_key=ENV_KEY,
        video_poll_interval_seconds=10.0,
        video_poll_max_attempts=60,
        tts_sample_rate=24000,
        tts_channels=1,
        keep_outputs=False,
    )
    credentials = CredentialContext(env_default=ENV_KEY, store=MemoryCredentialStore())
    credentials.load()
    sink = TimelineSink(sample_rate=24000, channels=1, clock=clock)
    return Studio(
        config=cfg,
        credentials=credentials,
        backend_factory=backend.bind,
        playback=PlaybackQueue(sink),
        sleep=sleeper,
    )

@pytest.fixture
def client(studio, monkeypatch, tmp_path):
    from adstudio import main
    from adstudio.lib import paths
    monkeypatch.setattr(main.app.state, "studio", studio)
    monkeypatch.setattr(paths, "data_dir", lambda: str(tmp_path))
    return TestClient(main.app)
