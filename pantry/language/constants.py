# Langues proposées au seed (ensure_seeded) ; la langue par défaut est settings.PANTRY_DEFAULT_LANGUAGE
SUPPORTED_LANGUAGES = {
    "ar": "Arabic",
    "bn": "Bengali",
    "de": "German",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "hi": "Hindi",
    "id": "Indonesian",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "ms": "Malay",
    "pt": "Portuguese",
    "ru": "Russian",
    "th": "Thai",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "ur": "Urdu",
    "vi": "Vietnamese",
    "zh": "Chinese",
}


def language_display_name(code: str) -> str:
    return SUPPORTED_LANGUAGES.get((code or "").lower(), code)
