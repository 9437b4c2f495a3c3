"""
Translation module for converting Chinese transcripts into the target language.
"""

import logging

import httpx

from .config import DEFAULT_TRANSLATE_URL, TRANSLATE_SOURCE_LANGUAGE
from .errors import UpstreamServiceError
from .google_rest import post_json

logger = logging.getLogger("vidtranslate")


def translate_text(
    client: httpx.Client,
    text: str,
    target_language: str,
    api_key: str | None,
    url: str = DEFAULT_TRANSLATE_URL,
    source_language: str = TRANSLATE_SOURCE_LANGUAGE,
) -> str:
    """
    Translate text with the Google Cloud Translation v2 API.

    Args:
        client: HTTP client for the request
        text: Text to translate
        target_language: Target language code, passed through unchecked
        api_key: Translation API key
        url: Endpoint override
        source_language: Source language code

    Returns:
        Translated plain text
    """
    if not text.strip():
        return text

    payload = {
        "q": text,
        "source": source_language,
        "target": target_language,
        "format": "text",
    }
    logger.info(f"Translating text ({source_language} -> {target_language})...")
    data = post_json(client, "translate", url, api_key, payload)

    translations = (data.get("data") or {}).get("translations") or []
    if not translations:
        raise UpstreamServiceError("translate", "Translation response contained no translations")
    translated_text = str(translations[0].get("translatedText", ""))
    logger.info(f"Translation completed: {len(text)} -> {len(translated_text)} characters")
    return translated_text


def get_language_name(language_code: str) -> str:
    """Get human-readable language name from language code."""
    language_names = {
        "en": "English",
        "es": "Spanish",
        "fr": "French",
        "de": "German",
        "it": "Italian",
        "pt": "Portuguese",
        "ru": "Russian",
        "ja": "Japanese",
        "ko": "Korean",
        "ar": "Arabic",
        "hi": "Hindi",
        "vi": "Vietnamese",
        "th": "Thai",
        "id": "Indonesian",
        "tr": "Turkish",
        "zh": "Chinese",
    }
    return language_names.get(language_code.split("-")[0].lower(), language_code.upper())
