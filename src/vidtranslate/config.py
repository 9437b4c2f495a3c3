"""
Runtime configuration loaded from the environment (and an optional .env file).
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger("vidtranslate")

# Contracts of the recognition/translation services, not tunables.
SAMPLE_RATE = 16000
SPEECH_ENCODING = "LINEAR16"
SPEECH_SOURCE_LANGUAGE = "cmn-Hans-CN"
TRANSLATE_SOURCE_LANGUAGE = "zh-CN"

DEFAULT_SPEECH_URL = "https://speech.googleapis.com/v1/speech:recognize"
DEFAULT_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"
DEFAULT_TTS_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


@dataclass(frozen=True)
class Settings:
    """Process-wide settings; one instance is shared by every request."""

    upload_dir: Path = Path("public") / "uploads"
    public_prefix: str = "/uploads"
    ffmpeg_bin: str = "ffmpeg"
    dubbing_enabled: bool = True

    speech_url: str = DEFAULT_SPEECH_URL
    translate_url: str = DEFAULT_TRANSLATE_URL
    tts_url: str = DEFAULT_TTS_URL
    speech_api_key: str | None = None
    translate_api_key: str | None = None
    tts_api_key: str | None = None

    max_upload_bytes: int = 500 * 1024 * 1024
    max_concurrent_jobs: int = 2
    tool_timeout: float = 600.0
    http_timeout: float = 120.0

    def require_api_keys(self) -> None:
        """Raise if any external service key needed for dubbing is missing."""
        missing = [
            name
            for name, value in (
                ("GOOGLE_SPEECH_API_KEY", self.speech_api_key),
                ("GOOGLE_TRANSLATE_API_KEY", self.translate_api_key),
                ("GOOGLE_TTS_API_KEY", self.tts_api_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Google API key is not set. Put GOOGLE_API_KEY in .env or environment.",
                missing_keys=missing,
            )


def load_settings(env_file: str | None = None) -> Settings:
    """Build Settings from environment variables, loading .env first."""
    load_dotenv(env_file or find_dotenv(usecwd=True))

    shared_key = os.getenv("GOOGLE_API_KEY")
    max_upload_mb = _float_env("VIDTRANSLATE_MAX_UPLOAD_MB", 500.0)
    max_jobs = int(_float_env("VIDTRANSLATE_MAX_JOBS", 2))
    if max_jobs < 1:
        raise ConfigurationError("VIDTRANSLATE_MAX_JOBS must be at least 1")
    public_prefix = "/" + os.getenv("VIDTRANSLATE_PUBLIC_PREFIX", "/uploads").strip().strip("/")
    if public_prefix == "/":
        raise ConfigurationError("VIDTRANSLATE_PUBLIC_PREFIX must name a path below /, e.g. /uploads")

    settings = Settings(
        upload_dir=Path(os.getenv("VIDTRANSLATE_UPLOAD_DIR", str(Path("public") / "uploads"))),
        public_prefix=public_prefix,
        ffmpeg_bin=os.getenv("VIDTRANSLATE_FFMPEG", "ffmpeg"),
        dubbing_enabled=_bool_env("VIDTRANSLATE_DUBBING", True),
        speech_url=os.getenv("VIDTRANSLATE_SPEECH_URL", DEFAULT_SPEECH_URL),
        translate_url=os.getenv("VIDTRANSLATE_TRANSLATE_URL", DEFAULT_TRANSLATE_URL),
        tts_url=os.getenv("VIDTRANSLATE_TTS_URL", DEFAULT_TTS_URL),
        speech_api_key=os.getenv("GOOGLE_SPEECH_API_KEY") or shared_key,
        translate_api_key=os.getenv("GOOGLE_TRANSLATE_API_KEY") or shared_key,
        tts_api_key=os.getenv("GOOGLE_TTS_API_KEY") or shared_key,
        max_upload_bytes=int(max_upload_mb * 1024 * 1024),
        max_concurrent_jobs=max_jobs,
        tool_timeout=_float_env("VIDTRANSLATE_TOOL_TIMEOUT", 600.0),
        http_timeout=_float_env("VIDTRANSLATE_HTTP_TIMEOUT", 120.0),
    )
    logger.debug(
        "Settings: upload_dir=%s dubbing=%s max_jobs=%d",
        settings.upload_dir,
        settings.dubbing_enabled,
        settings.max_concurrent_jobs,
    )
    return settings
