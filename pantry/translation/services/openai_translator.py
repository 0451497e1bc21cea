from django.conf import settings
from language.constants import language_display_name
from openai import OpenAI, OpenAIError

from ..exceptions import TranslationFailed

SYSTEM_PROMPTS = {
    "category": (
        "You are a professional translator specializing in food categories. "
        "Translate the following category name to {language}. "
        "Keep the translation concise and commonly used in food contexts. "
        "Answer with the translation only."
    ),
    "foodItem": (
        "You are a professional translator specializing in food items. "
        "Translate the following food item name to {language}. "
        "Use the most common term that would be recognized by native speakers. "
        "Answer with the translation only."
    ),
    "customInput": (
        "You are a professional translator working for a food pantry. "
        "Translate the following text to {language}. "
        "Answer with the translation only."
    ),
}


class OpenAiTranslator:
    def __init__(self, client: OpenAI | None = None):
        if client is None:
            if not settings.OPENAI_API_KEY:
                raise TranslationFailed("OPENAI_API_KEY is not configured")
            client = OpenAI(api_key=settings.OPENAI_API_KEY, max_retries=3)
        self.client = client
        self.model = settings.OPENAI_MODEL

    def translate(self, text: str, target: str, context: str) -> str:
        prompt = SYSTEM_PROMPTS.get(context, SYSTEM_PROMPTS["customInput"])
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": prompt.format(language=language_display_name(target))},
                    {"role": "user", "content": text},
                ],
                temperature=0.3,
                max_tokens=100,
            )
        except OpenAIError as e:
            raise TranslationFailed(f"OpenAI error: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        translation = (content or "").strip()
        if not translation:
            raise TranslationFailed("Translation failed - empty response")
        return translation
