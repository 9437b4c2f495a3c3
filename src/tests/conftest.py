"""
Shared fixtures: fake ffmpeg processes and fake Google REST services.
"""

import base64
import io
import json
import subprocess
import wave
from pathlib import Path

import httpx
import pytest

from vidtranslate import io_ffmpeg
from vidtranslate.config import Settings


def silent_wav_bytes(seconds: float = 1.0, sample_rate: int = 16000) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(b"\x00\x00" * int(sample_rate * seconds))
    return buf.getvalue()


class FakeFFmpeg:
    """Stands in for subprocess.run; writes the file ffmpeg would have produced."""

    def __init__(self):
        self.calls: list[list[str]] = []
        self.fail_on: str | None = None
        self.write_partial_output = False

    @staticmethod
    def kind(cmd: list[str]) -> str:
        if "-vn" in cmd:
            return "extract"
        if "-map" in cmd:
            return "mux"
        return "copy"

    def __call__(self, cmd, **_kwargs):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        kind = self.kind(cmd)
        out = Path(cmd[-1])
        if kind == self.fail_on:
            if self.write_partial_output:
                out.write_bytes(b"half-written")
            return subprocess.CompletedProcess(cmd, 1, stdout="Invalid data found when processing input")
        if kind == "extract":
            out.write_bytes(silent_wav_bytes())
        else:
            out.write_bytes(b"muxed-video")
        return subprocess.CompletedProcess(cmd, 0, stdout="")

    def kinds(self) -> list[str]:
        return [self.kind(c) for c in self.calls]


class FakeGoogle:
    """httpx.MockTransport handler emulating speech, translate and TTS endpoints."""

    def __init__(self, transcript: str | None = "你好，世界", translated: str = "Hola, mundo"):
        self.transcript = transcript
        self.translated = translated
        self.audio: bytes | None = silent_wav_bytes(0.5, 24000)
        self.fail: dict[str, int] = {}
        self.requests: list[tuple[str, dict]] = []

    @staticmethod
    def service_for(url: httpx.URL) -> str:
        if url.host.startswith("speech"):
            return "speech"
        if url.host.startswith("translation"):
            return "translate"
        return "tts"

    def services_called(self) -> list[str]:
        return [name for name, _ in self.requests]

    def payload(self, service: str) -> dict:
        return next(body for name, body in self.requests if name == service)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        service = self.service_for(request.url)
        body = json.loads(request.content or b"{}")
        body["_key"] = request.url.params.get("key")
        self.requests.append((service, body))

        if service in self.fail:
            status = self.fail[service]
            return httpx.Response(status, json={"error": {"code": status, "message": f"{service} unavailable"}})
        if service == "speech":
            if self.transcript is None:
                return httpx.Response(200, json={})
            return httpx.Response(
                200, json={"results": [{"alternatives": [{"transcript": self.transcript, "confidence": 0.9}]}]}
            )
        if service == "translate":
            return httpx.Response(200, json={"data": {"translations": [{"translatedText": self.translated}]}})
        if self.audio is None:
            return httpx.Response(200, json={})
        return httpx.Response(200, json={"audioContent": base64.b64encode(self.audio).decode("ascii")})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir):
    return Settings(
        upload_dir=upload_dir,
        speech_api_key="speech-key",
        translate_api_key="translate-key",
        tts_api_key="tts-key",
        max_upload_bytes=1024 * 1024,
    )


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    fake = FakeFFmpeg()
    monkeypatch.setattr(io_ffmpeg.subprocess, "run", fake)
    return fake


@pytest.fixture
def google():
    return FakeGoogle()
