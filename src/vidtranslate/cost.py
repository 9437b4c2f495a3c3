"""
Cost estimation for the external speech and translation services.
"""

DEFAULT_RATES: dict[str, float] = {
    "stt_per_min": 0.024,
    "translate_per_mchar": 20.0,
    "tts_per_mchar": 4.0,
}


def estimate_costs(
    audio_minutes: float,
    *,
    transcript_chars: int,
    translated_chars: int,
    rates: dict[str, float] | None = None,
) -> dict[str, float]:
    """Estimate what one dub costs across recognition, translation and synthesis."""
    rates = {**DEFAULT_RATES, **(rates or {})}
    stt_cost = audio_minutes * float(rates["stt_per_min"])
    translate_cost = (transcript_chars / 1_000_000.0) * float(rates["translate_per_mchar"])
    tts_cost = (translated_chars / 1_000_000.0) * float(rates["tts_per_mchar"])
    return {
        "stt_cost": stt_cost,
        "translate_cost": translate_cost,
        "tts_cost": tts_cost,
        "total": stt_cost + translate_cost + tts_cost,
    }
