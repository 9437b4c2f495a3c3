"""
Tests for the speech, translation and text-to-speech clients.
"""

import base64

import httpx
import pytest

from vidtranslate.errors import StageTimeoutError, SynthesisError, UpstreamServiceError
from vidtranslate.google_rest import make_client
from vidtranslate.stt import transcribe_google
from vidtranslate.translation import get_language_name, translate_text
from vidtranslate.tts import synthesize_speech


@pytest.fixture
def client(google):
    with make_client(transport=google.transport()) as c:
        yield c


@pytest.fixture
def wav_file(tmp_path, google):
    path = tmp_path / "source.wav"
    path.write_bytes(google.audio)
    return path


def test_transcribe_sends_fixed_recognition_config(client, google, wav_file):
    """Audio goes inline as base64 with LINEAR16 / 16 kHz / Mandarin config."""
    text = transcribe_google(client, wav_file, "speech-key")

    assert text == "你好，世界"
    payload = google.payload("speech")
    assert payload["config"] == {
        "encoding": "LINEAR16",
        "sampleRateHertz": 16000,
        "languageCode": "cmn-Hans-CN",
    }
    assert base64.b64decode(payload["audio"]["content"]) == wav_file.read_bytes()
    assert payload["_key"] == "speech-key"


def test_transcribe_no_results_returns_empty_string(client, google, wav_file):
    """No recognition results is a degraded success, not an error."""
    google.transcript = None
    assert transcribe_google(client, wav_file, "speech-key") == ""


def test_transcribe_http_error(client, google, wav_file):
    google.fail["speech"] = 403
    with pytest.raises(UpstreamServiceError) as exc:
        transcribe_google(client, wav_file, "bad-key")
    assert exc.value.status_code == 403
    assert "speech unavailable" in exc.value.message


@pytest.mark.parametrize("body", [[{"msg": "bad gateway"}], "bad gateway"])
def test_non_object_error_body_is_upstream_error(tmp_path, body):
    transport = httpx.MockTransport(lambda request: httpx.Response(502, json=body))
    wav = tmp_path / "source.wav"
    wav.write_bytes(b"RIFF")

    with make_client(transport=transport) as c:
        with pytest.raises(UpstreamServiceError) as exc:
            transcribe_google(c, wav, "speech-key")
    assert exc.value.status_code == 502
    assert "bad gateway" in exc.value.message


def test_translate_requests_plain_text(client, google):
    result = translate_text(client, "你好，世界", "es", "translate-key")

    assert result == "Hola, mundo"
    payload = google.payload("translate")
    assert payload["source"] == "zh-CN"
    assert payload["target"] == "es"
    assert payload["format"] == "text"
    assert payload["q"] == "你好，世界"


def test_translate_passes_empty_text_through(client, google):
    """Empty input is returned unchanged without calling the service."""
    assert translate_text(client, "", "es", "translate-key") == ""
    assert translate_text(client, "   ", "es", "translate-key") == "   "
    assert google.requests == []


def test_translate_unsupported_language_surfaces_http_error(client, google):
    google.fail["translate"] = 400
    with pytest.raises(UpstreamServiceError) as exc:
        translate_text(client, "你好", "xx-invalid", "translate-key")
    assert exc.value.service == "translate"
    assert exc.value.status_code == 400


def test_translate_without_translations_fails():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": {"translations": []}}))
    with make_client(transport=transport) as c:
        with pytest.raises(UpstreamServiceError, match="no translations"):
            translate_text(c, "你好", "en", "k")


def test_synthesize_writes_decoded_audio(client, google, tmp_path):
    out = tmp_path / "dub.wav"
    synthesize_speech(client, "Hola, mundo", "es", out, "tts-key")

    assert out.read_bytes() == google.audio
    payload = google.payload("tts")
    assert payload["voice"] == {"languageCode": "es"}
    assert payload["audioConfig"] == {"audioEncoding": "LINEAR16"}
    assert payload["input"] == {"text": "Hola, mundo"}


def test_synthesize_without_audio_content_fails(client, google, tmp_path):
    """Missing audio is an explicit failure and nothing is written."""
    google.audio = None
    out = tmp_path / "dub.wav"

    with pytest.raises(SynthesisError):
        synthesize_speech(client, "Hola", "es", out, "tts-key")
    assert not out.exists()


def test_synthesize_empty_text_fails_without_request(client, google, tmp_path):
    with pytest.raises(SynthesisError, match="empty"):
        synthesize_speech(client, "", "es", tmp_path / "dub.wav", "tts-key")
    assert google.requests == []


def test_request_timeout_maps_to_stage_timeout(tmp_path):
    def slow(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with make_client(timeout=3.0, transport=httpx.MockTransport(slow)) as c:
        with pytest.raises(StageTimeoutError) as exc:
            translate_text(c, "你好", "en", "k")
    assert exc.value.timeout == 3.0


def test_get_language_name():
    assert get_language_name("es") == "Spanish"
    assert get_language_name("en-US") == "English"
    assert get_language_name("xx") == "XX"
