# tests/test_backends.py
import base64
from types import SimpleNamespace

import pytest

from adstudio.features.enhancements.schemas import EnhancementResult
from adstudio.features.image_ad.prompt import compose_image_request
from adstudio.lib.backends import is_credential_rejection, make_backend
from adstudio.lib.backends.gemini import GeminiBackend, _grounding_chunks, _job_from_operation
from adstudio.lib.backends.openai_backend import OpenAIBackend, _job_from_video
from adstudio.lib.media import encode_media
from adstudio.schemas import AspectRatio, ImageResolution, WatermarkKind, WatermarkSpec

from tests.fakes import png_bytes

URI = "https://generativelanguage.example/v1beta/files/abc:download?alt=media"


def _image_request():
    return compose_image_request(
        encode_media(png_bytes()),
        instruction_text="blue bottle on white",
        aspect_ratio=AspectRatio.PORTRAIT_9_16,
        resolution=ImageResolution.R2K,
        watermark=WatermarkSpec(enabled=True, kind=WatermarkKind.IMAGE, image=encode_media(png_bytes(4, 4))),
    )


@pytest.mark.parametrize(
    "message, expected",
    [
        ("Requested entity was not found.", True),
        ("400 INVALID_ARGUMENT: API key not valid. Please pass a valid API key.", True),
        ("Error code: 401 - {'error': {'code': 'invalid_api_key'}}", True),
        ("Incorrect API key provided: sk-***", True),
        ("503 UNAVAILABLE: model overloaded", False),
        ("", False),
        (None, False),
    ],
)
def test_is_credential_rejection(message, expected):
    assert is_credential_rejection(message) is expected


def test_make_backend_rejects_unknown_provider():
    with pytest.raises(ValueError):
        make_backend("nope", "key")


# -------- Gemini --------
class _FakeModels:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        return self.response


def _candidate(parts, chunks=None):
    return SimpleNamespace(
        content=SimpleNamespace(parts=parts),
        grounding_metadata=SimpleNamespace(grounding_chunks=chunks or []),
    )


def test_gemini_generate_image_sends_instruction_last():
    image = png_bytes(3, 3)
    response = SimpleNamespace(candidates=[_candidate([
        SimpleNamespace(inline_data=None, text="Here you go"),
        SimpleNamespace(inline_data=SimpleNamespace(data=image, mime_type="image/png")),
    ], chunks=[SimpleNamespace(web=SimpleNamespace(uri="https://example.com", title="Ex"), maps=None)])])
    models = _FakeModels(response)
    backend = GeminiBackend("key", client=SimpleNamespace(models=models))
    req = _image_request()

    result = backend.generate_image(req, model="gemini-image")

    contents = models.calls[0]["contents"]
    assert len(contents) == len(req.attachments) + 1
    assert contents[-1].text == req.instruction
    assert base64.b64decode(result.media.data) == image
    assert result.grounding[0].web.uri == "https://example.com"


def test_gemini_generate_image_without_inline_data():
    response = SimpleNamespace(candidates=[_candidate([SimpleNamespace(inline_data=None, text="no image")])])
    backend = GeminiBackend("key", client=SimpleNamespace(models=_FakeModels(response)))
    assert backend.generate_image(_image_request(), model="m") is None


def test_gemini_speech_returns_raw_pcm():
    pcm = b"\x00\x01" * 10
    response = SimpleNamespace(candidates=[_candidate([SimpleNamespace(inline_data=SimpleNamespace(data=pcm, mime_type="audio/L16"))])])
    backend = GeminiBackend("key", client=SimpleNamespace(models=_FakeModels(response)))
    assert backend.synthesize_speech("hello", model="tts", voice="Kore") == pcm


def test_gemini_grounding_keeps_maps_reviews():
    maps = SimpleNamespace(
        uri="https://maps.example/place",
        title="Shop",
        place_answer_sources=SimpleNamespace(review_snippets=[SimpleNamespace(uri="https://maps.example/r1", title="R1", text="Great")]),
    )
    response = SimpleNamespace(candidates=[_candidate([], chunks=[
        SimpleNamespace(web=None, maps=maps),
        SimpleNamespace(web=None, maps=None),
    ])])
    chunks = _grounding_chunks(response)
    assert len(chunks) == 1
    assert chunks[0].maps.review_snippets[0].text == "Great"


def test_gemini_operation_snapshots():
    running = _job_from_operation(SimpleNamespace(done=False, error=None, response=None))
    assert not running.done and running.result_uri is None and running.error is None

    video = SimpleNamespace(video=SimpleNamespace(uri=URI))
    finished = _job_from_operation(SimpleNamespace(done=True, error=None, response=SimpleNamespace(generated_videos=[video])))
    assert finished.done and finished.result_uri == URI

    failed = _job_from_operation(SimpleNamespace(done=True, error={"message": "Requested entity was not found."}, response=None))
    assert failed.error == "Requested entity was not found."

    filtered = _job_from_operation(SimpleNamespace(
        done=True, error=None,
        response=SimpleNamespace(generated_videos=[], rai_media_filtered_reasons=["unsafe content"]),
    ))
    assert filtered.result_uri is None
    assert "unsafe content" in filtered.error


def test_gemini_authorize_result_appends_key():
    backend = GeminiBackend("key", client=SimpleNamespace())
    assert backend.authorize_result("https://x.example/v.mp4", "abc").url == "https://x.example/v.mp4?key=abc"
    assert backend.authorize_result(URI, "abc").url == URI + "&key=abc"
    assert backend.authorize_result(URI, "abc").headers == {}


# -------- OpenAI --------
class _FakeImages:
    def __init__(self, b64):
        self.b64 = b64
        self.calls = []

    def edit(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(data=[SimpleNamespace(b64_json=self.b64)])


class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def test_openai_generate_image_uploads_in_order():
    b64 = base64.b64encode(png_bytes(2, 2)).decode("ascii")
    images = _FakeImages(b64)
    backend = OpenAIBackend("key", client=SimpleNamespace(images=images, base_url="https://api.openai.com/v1/"))

    result = backend.generate_image(_image_request(), model="gpt-image-1")

    call = images.calls[0]
    assert [name for name, _, _ in call["image"]] == ["product.png", "watermark.png"]
    assert call["size"] == "1024x1536"
    assert result.media.data == b64


def test_openai_json_uses_strict_schema():
    completions = _FakeCompletions('{"music": "m", "subtitles": [], "voice_over_script": "v"}')
    backend = OpenAIBackend("key", client=SimpleNamespace(chat=SimpleNamespace(completions=completions)))

    raw = backend.generate_json("prompt", schema=EnhancementResult, model="gpt-4o-mini", system="sys")

    fmt = completions.calls[0]["response_format"]
    assert fmt["type"] == "json_schema"
    assert fmt["json_schema"]["strict"] is True
    assert fmt["json_schema"]["schema"]["additionalProperties"] is False
    assert completions.calls[0]["messages"][0] == {"role": "system", "content": "sys"}
    assert EnhancementResult.model_validate_json(raw).music == "m"


def test_openai_video_status_mapping():
    url = "https://api.openai.com/v1/videos/video_1/content"
    queued = _job_from_video(SimpleNamespace(id="video_1", status="in_progress"), url)
    assert not queued.done

    done = _job_from_video(SimpleNamespace(id="video_1", status="completed"), url)
    assert done.done and done.result_uri == url

    failed = _job_from_video(SimpleNamespace(id="video_1", status="failed", error=SimpleNamespace(message="moderation_blocked")), url)
    assert failed.done and failed.error == "moderation_blocked"


def test_openai_authorize_result_uses_bearer_header():
    backend = OpenAIBackend("key", client=SimpleNamespace())
    locator = backend.authorize_result("https://api.openai.com/v1/videos/v/content", "sk-test")
    assert locator.url == "https://api.openai.com/v1/videos/v/content"
    assert locator.headers == {"Authorization": "Bearer sk-test"}
