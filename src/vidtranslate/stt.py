"""
Speech-to-text via the Google Cloud Speech-to-Text v1 REST API.
"""

import base64
import logging
from pathlib import Path

import httpx

from .config import DEFAULT_SPEECH_URL, SAMPLE_RATE, SPEECH_ENCODING, SPEECH_SOURCE_LANGUAGE
from .google_rest import post_json

logger = logging.getLogger("vidtranslate")


def transcribe_google(
    client: httpx.Client,
    wav_path: Path,
    api_key: str | None,
    url: str = DEFAULT_SPEECH_URL,
    language: str = SPEECH_SOURCE_LANGUAGE,
) -> str:
    """
    Transcribe a 16 kHz mono PCM16 file and return the top transcript.

    The whole file is sent inline as base64. When the service reports no
    results the empty string is returned and the caller carries on with it.
    """
    audio_b64 = base64.b64encode(wav_path.read_bytes()).decode("ascii")
    payload = {
        "config": {
            "encoding": SPEECH_ENCODING,
            "sampleRateHertz": SAMPLE_RATE,
            "languageCode": language,
        },
        "audio": {"content": audio_b64},
    }

    logger.info(f"Transcribing {wav_path.name} (language: {language}) …")
    data = post_json(client, "speech", url, api_key, payload)

    results = data.get("results") or []
    if not results:
        logger.warning("Speech service returned no results; continuing with empty transcript.")
        return ""
    alternatives = results[0].get("alternatives") or []
    if not alternatives:
        logger.warning("First speech result has no alternatives; continuing with empty transcript.")
        return ""
    transcript = str(alternatives[0].get("transcript", ""))
    logger.info(f"Transcription completed: {len(transcript)} characters")
    return transcript
