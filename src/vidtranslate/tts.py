"""
Text-to-speech synthesis with Google Cloud Text-to-Speech.
"""

import base64
import binascii
import logging
from pathlib import Path

import httpx

from .config import DEFAULT_TTS_URL
from .errors import StorageError, SynthesisError
from .google_rest import post_json

logger = logging.getLogger("vidtranslate")


def synthesize_speech(
    client: httpx.Client,
    text: str,
    language_code: str,
    out_path: Path,
    api_key: str | None,
    url: str = DEFAULT_TTS_URL,
) -> None:
    """Synthesize LINEAR16 speech for text and write it to out_path."""
    if not text.strip():
        raise SynthesisError("Nothing to synthesize: translated text is empty")

    payload = {
        "input": {"text": text},
        "voice": {"languageCode": language_code},
        "audioConfig": {"audioEncoding": "LINEAR16"},
    }
    logger.info(f"Synthesizing speech ({language_code}, {len(text)} characters)...")
    data = post_json(client, "tts", url, api_key, payload)

    content = data.get("audioContent")
    if not content:
        raise SynthesisError("Text-to-speech returned no audio content")
    try:
        audio = base64.b64decode(content, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SynthesisError(f"Text-to-speech returned undecodable audio: {e}") from e

    try:
        out_path.write_bytes(audio)
    except OSError as e:
        raise StorageError(f"Failed to write synthesized audio {out_path.name}: {e}") from e
    logger.info(f"Saved synthesized audio -> {out_path} ({len(audio)} bytes)")
