# tests/fakes.py
import base64
import io

import numpy as np
from PIL import Image

from adstudio.lib.backends import GenerationJob, ResultLocator
from adstudio.lib.media import encode_media
from adstudio.schemas import MediaResult

ENV_KEY = "env-test-key"

# -------- Utilities --------
def png_bytes(width: int = 8, height: int = 8, color=(10, 20, 30)) -> bytes:
    im = Image.new("RGB", (width, height), color)
    buf = io.BytesIO()
    im.save(buf, format="PNG")
    return buf.getvalue()

def png_data_url(width: int = 8, height: int = 8) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(width, height)).decode("ascii")

def pcm16(samples) -> bytes:
    return np.asarray(samples, dtype="<i2").tobytes()

VALID_ENHANCEMENTS = '{"music": "Upbeat synth pop", "subtitles": ["Fresh.", "Bold."], "voice_over_script": "Meet the bottle."}'

# -------- Fakes --------
class FakeBackend:
    """Scriptable MediaBackend. Every call is recorded in `calls` as (method, kwargs)."""

    name = "fake"

    def __init__(self):
        self.calls = []
        self.tokens = []
        self.image_result = MediaResult(media=encode_media(png_bytes()), grounding=[])
        self.image_error = None
        # start_video returns video_jobs[0]; each poll returns the next one
        self.video_jobs = [GenerationJob(handle="op-1", done=True, result_uri="https://media.example/v.mp4")]
        self.start_error = None
        self.poll_error_at = None
        self.poll_error = None
        self.polls = 0
        self.json_text = VALID_ENHANCEMENTS
        self.json_error = None
        self.speech = pcm16([0, 1000, -1000, 0] * 600)
        self.speech_error = None
        self.description = ("A glossy studio shot of the product.", [])

    def bind(self, token: str) -> "FakeBackend":
        self.tokens.append(token)
        return self

    def _record(self, method, **kwargs):
        self.calls.append((method, kwargs))

    def methods(self):
        return [m for m, _ in self.calls]

    def generate_image(self, req, *, model):
        self._record("generate_image", req=req, model=model)
        if self.image_error:
            raise self.image_error
        return self.image_result

    def start_video(self, req, *, model):
        self._record("start_video", req=req, model=model)
        if self.start_error:
            raise self.start_error
        return self.video_jobs[0]

    def poll_video(self, job):
        self.polls += 1
        self._record("poll_video", job=job)
        if self.poll_error_at == self.polls:
            raise self.poll_error
        return self.video_jobs[min(self.polls, len(self.video_jobs) - 1)]

    def generate_json(self, prompt, *, schema, model, system=""):
        self._record("generate_json", prompt=prompt, schema=schema, model=model, system=system)
        if self.json_error:
            raise self.json_error
        return self.json_text

    def synthesize_speech(self, script, *, model, voice):
        self._record("synthesize_speech", script=script, model=model, voice=voice)
        if self.speech_error:
            raise self.speech_error
        return self.speech

    def describe_image(self, image, instruction, *, model):
        self._record("describe_image", image=image, instruction=instruction, model=model)
        return self.description

    def authorize_result(self, uri, token):
        return ResultLocator(url=f"{uri}?key={token}")

class FakeSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)

class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

