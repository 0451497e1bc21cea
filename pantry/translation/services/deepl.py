import requests
from django.conf import settings

from ..exceptions import TranslationFailed

# indice de contexte envoyé à DeepL (n'est pas traduit ni facturé)
CONTEXT_HINTS = {
    "category": "Name of a food category in a food pantry inventory.",
    "foodItem": "Name of a food item in a food pantry inventory.",
    "customInput": "Short text from a food pantry inventory.",
}


class DeepLError(TranslationFailed):
    pass


def _deepl_base_url() -> str:
    is_free = getattr(settings, "DEEPL_IS_FREE", False)
    return "https://api-free.deepl.com" if is_free else "https://api.deepl.com"


def deepl_translate_many(
        texts: list[str],
        source: str,
        target: str,
        context: str | None = None,
) -> list[str]:
    """
    Appelle DeepL pour traduire plusieurs textes en une requête.
    Retourne la liste traduite dans le même ordre.
    """
    if not settings.DEEPL_AUTH_KEY:
        raise DeepLError("DEEPL_AUTH_KEY is not configured")

    if not texts:
        return []

    url = f"{_deepl_base_url()}/v2/translate"

    # DeepL accepte text=... répété (form-encoded)
    data = [
        ("text", t) for t in texts
    ]
    data += [
        ("source_lang", source.upper()),
        ("target_lang", target.upper()),
    ]
    hint = CONTEXT_HINTS.get(context or "")
    if hint:
        data.append(("context", hint))

    headers = {
        "Authorization": f"DeepL-Auth-Key {settings.DEEPL_AUTH_KEY}",
    }

    try:
        resp = requests.post(url, data=data, headers=headers, timeout=20)
    except requests.RequestException as e:
        raise DeepLError(f"DeepL unreachable: {e}") from e

    if resp.status_code != 200:
        raise DeepLError(f"DeepL error {resp.status_code}: {resp.text[:300]}")

    try:
        payload = resp.json()
    except ValueError as e:
        raise DeepLError(f"DeepL returned an invalid response: {resp.text[:300]}") from e

    translations = payload.get("translations") or []
    if len(translations) != len(texts):
        raise DeepLError(f"DeepL returned {len(translations)} translations for {len(texts)} texts")
    return [(t.get("text") or "").strip() for t in translations]


def deepl_translate(text: str, target: str, context: str) -> str:
    out = deepl_translate_many([text], settings.PANTRY_DEFAULT_LANGUAGE, target, context=context)
    return out[0]
