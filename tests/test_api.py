# tests/test_api.py
import dataclasses
import io
import wave

import requests

from adstudio.features.video_ad import router as video_router
from adstudio.features.video_ad import service as video_service
from adstudio.lib.backends import GenerationJob
from adstudio.lib.credentials import CredentialContext, MemoryCredentialStore

from tests.fakes import ENV_KEY, pcm16, png_data_url


def test_presets(client):
    resp = client.get("/api/v1/presets")
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["presets"]) == 10
    assert body["presets"][0]["name"] == "Luxury product showcase"
    assert body["resolutions"]["16:9"]["4K"] == "4096x2304 px"


def test_credentials_lifecycle(client, studio):
    resp = client.put("/api/v1/credentials", json={"api_key": "manual-secret"})
    assert resp.status_code == 200
    assert resp.json()["has_manual"] is True
    assert "manual-secret" not in resp.text
    assert studio.credentials.resolve() == "manual-secret"

    resp = client.delete("/api/v1/credentials")
    assert resp.json()["has_manual"] is False
    assert studio.credentials.resolve() == ENV_KEY

    resp = client.get("/api/v1/credentials")
    assert resp.json()["available"] is True


def test_platform_select_without_picker(client):
    resp = client.post("/api/v1/credentials/platform/select")
    assert resp.status_code == 409


def test_generate_image_inline(client, backend):
    resp = client.post("/api/v1/generate/image", json={
        "product_image_base64": png_data_url(),
        "prompt": "blue bottle on white",
        "aspect_ratio": "1:1",
        "watermark": {"enabled": True, "kind": "text", "text": "ACME", "position": "bottom-right", "opacity": 0.5},
    })
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["image_url"].startswith("data:image/png;base64,")
    assert body["aspect_ratio"] == "1:1"
    assert body["resolution"] == "2K"
    req = backend.calls[0][1]["req"]
    assert "ACME" in req.instruction


def test_generate_image_file(client):
    resp = client.post("/api/v1/generate/image", json={
        "product_image_base64": png_data_url(),
        "prompt": "blue bottle on white",
        "return_mode": "file",
    })
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content.startswith(b"\x89PNG")


def test_generate_image_missing_watermark_image(client, backend):
    resp = client.post("/api/v1/generate/image", json={
        "product_image_base64": png_data_url(),
        "prompt": "blue bottle on white",
        "watermark": {"enabled": True, "kind": "image"},
    })
    assert resp.status_code == 422
    assert resp.json()["error"] == "MissingWatermarkAsset"
    assert backend.calls == []


def test_generate_image_without_credential(client, studio, backend):
    studio.credentials = CredentialContext(store=MemoryCredentialStore())
    resp = client.post("/api/v1/generate/image", json={
        "product_image_base64": png_data_url(),
        "prompt": "blue bottle on white",
    })
    assert resp.status_code == 401
    assert resp.json()["error"] == "NoCredentialAvailable"
    assert backend.calls == []


def test_generate_image_unreadable_upload(client):
    resp = client.post("/api/v1/generate/image", json={
        "product_image_base64": "data:image/png;base64,aGVsbG8=",
        "prompt": "x",
    })
    assert resp.status_code == 400
    assert resp.json()["error"] == "UnreadableMedia"


def test_generate_video_download_and_fetch(client, backend, monkeypatch):
    fetched = {}

    def _fake_download(locator, dest_path, **kwargs):
        fetched["url"] = locator.url
        with open(dest_path, "wb") as f:
            f.write(b"fake-mp4")
        return dest_path

    monkeypatch.setattr(video_router, "download_result", _fake_download)
    backend.video_jobs = [
        GenerationJob(handle="op", done=False),
        GenerationJob(handle="op", done=True, result_uri="https://media.example/v.mp4"),
    ]

    resp = client.post("/api/v1/generate/video", json={
        "start_frame_base64": png_data_url(),
        "prompt": "bottle spinning",
    })
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["state"] == "succeeded"
    assert body["polls"] == 1
    assert body["enhancements"]["music"] == "Upbeat synth pop"
    assert body["enhancement_error"] is None
    assert body["delivery_error"] is None
    assert fetched["url"] == f"https://media.example/v.mp4?key={ENV_KEY}"
    assert ENV_KEY not in resp.text

    video = client.get(body["video_url"])
    assert video.status_code == 200
    assert video.content == b"fake-mp4"


def test_generate_video_keeps_result_when_download_fails(client, backend, monkeypatch):
    def _refuse(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(video_service.requests, "get", _refuse)
    backend.video_jobs = [GenerationJob(handle="op", done=True, result_uri="https://media.example/v.mp4")]

    resp = client.post("/api/v1/generate/video", json={
        "start_frame_base64": png_data_url(),
        "prompt": "bottle spinning",
    })
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["state"] == "succeeded"
    assert body["video_url"] == "https://media.example/v.mp4"
    assert body["enhancements"]["music"] == "Upbeat synth pop"
    assert "ConnectionError" in body["delivery_error"]
    assert ENV_KEY not in resp.text


def test_generate_video_keeps_result_when_upload_fails(client, backend, monkeypatch):
    def _fake_download(locator, dest_path, **kwargs):
        with open(dest_path, "wb") as f:
            f.write(b"fake-mp4")
        return dest_path

    def _broken_upload(*args, **kwargs):
        raise RuntimeError("bucket not configured")

    monkeypatch.setattr(video_router, "download_result", _fake_download)
    monkeypatch.setattr(video_router, "upload_file_to_gcs", _broken_upload)

    resp = client.post("/api/v1/generate/video", json={
        "start_frame_base64": png_data_url(),
        "prompt": "bottle spinning",
        "return_mode": "signed_url",
    })
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["video_url"] == "https://media.example/v.mp4"
    assert body["storage"] is None
    assert body["delivery_error"] == "Failed to store the generated video: bucket not configured"


def test_generate_video_reference_has_no_key(client, backend):
    resp = client.post("/api/v1/generate/video", json={
        "start_frame_base64": png_data_url(),
        "prompt": "bottle spinning",
        "return_mode": "reference",
        "with_enhancements": False,
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["video_url"] == "https://media.example/v.mp4"
    assert body["enhancements"] is None
    assert "generate_json" not in backend.methods()


def test_generate_video_failure(client, backend):
    backend.video_jobs = [GenerationJob(handle="op", done=True, error="Video blocked by safety filters")]
    resp = client.post("/api/v1/generate/video", json={"start_frame_base64": png_data_url(), "prompt": "x"})
    assert resp.status_code == 502
    assert resp.json() == {"error": "VideoGenerationFailed", "detail": "Video blocked by safety filters"}


def test_generate_video_timeout(client, studio, backend):
    studio.config = dataclasses.replace(studio.config, video_poll_max_attempts=2)
    backend.video_jobs = [GenerationJob(handle="op", done=False)]
    resp = client.post("/api/v1/generate/video", json={"start_frame_base64": png_data_url(), "prompt": "x"})
    assert resp.status_code == 504
    assert resp.json()["error"] == "VideoGenerationTimeout"


def test_unknown_video(client):
    assert client.get("/api/v1/videos/" + "0" * 32).status_code == 404
    assert client.get("/api/v1/videos/not-a-job").status_code == 400


def test_speech_and_timeline(client, backend):
    backend.speech = pcm16([500] * 24000)
    first = client.post("/api/v1/speech", json={"script": "Meet the bottle."}).json()
    second = client.post("/api/v1/speech", json={"script": "Fresh every day."}).json()
    assert first["start"] == 0.0
    assert second["start"] == first["end"]

    resp = client.get("/api/v1/speech/timeline.wav")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/wav"
    with wave.open(io.BytesIO(resp.content)) as wf:
        assert wf.getnframes() == 48000


def test_speech_without_audio(client, backend):
    backend.speech = None
    resp = client.post("/api/v1/speech", json={"script": "hello"})
    assert resp.status_code == 502
    assert resp.json()["error"] == "NoAudioReturned"


def test_extract_prompt(client, backend):
    resp = client.post("/api/v1/prompts/extract", json={"image_base64": png_data_url(), "source": "background"})
    assert resp.status_code == 200
    assert resp.json() == {"prompt": "A glossy studio shot of the product.", "grounding": []}
    assert "200-300 words" in backend.calls[0][1]["instruction"]


def test_suggest_aspect_ratio(client):
    resp = client.post("/api/v1/aspect-ratio/suggest", json={"image_base64": png_data_url(60, 120)})
    assert resp.status_code == 200
    assert resp.json() == {"aspect_ratio": "9:16", "resolution": "2K", "pixels": "1152x2048 px"}
