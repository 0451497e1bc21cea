import logging

from core.exceptions import LanguageStateError, PantryValidationError
from django.conf import settings
from django.db import transaction
from translation.tasks import schedule_language_sweep

from .constants import SUPPORTED_LANGUAGES, language_display_name
from .models import Language

logger = logging.getLogger(__name__)


def get_default_language_code() -> str:
    return settings.PANTRY_DEFAULT_LANGUAGE


def ensure_seeded() -> list[Language]:
    """
    Seed idempotent des langues supportées.
    - la langue par défaut est créée active, les autres inactives
    - une langue déjà présente n'est jamais modifiée
    Retourne les langues créées.
    """
    default_code = get_default_language_code()
    created_langs = []

    with transaction.atomic():
        for code, name in SUPPORTED_LANGUAGES.items():
            lang, created = Language.objects.get_or_create(
                code=code,
                defaults={"name": name, "active": code == default_code},
            )
            if created:
                created_langs.append(lang)

        # langue par défaut hors liste (ex: PANTRY_DEFAULT_LANGUAGE="nl")
        lang, created = Language.objects.get_or_create(
            code=default_code,
            defaults={"name": language_display_name(default_code), "active": True},
        )
        if created:
            created_langs.append(lang)

    logger.info("ensure_seeded: %s language(s) created", len(created_langs))
    return created_langs


def _check_can_deactivate(language: Language) -> None:
    if language.is_default:
        raise LanguageStateError("default_language", "The default language cannot be deactivated.")


def _activated(language: Language) -> None:
    if language.active and not language.is_default:
        schedule_language_sweep(language.pk)


def add_language(code: str, name: str | None = None, active: bool = True) -> Language:
    code = (code or "").strip().lower()
    if not code:
        raise PantryValidationError("required", "Language code is required", field="code")
    if Language.objects.filter(code=code).exists():
        raise PantryValidationError("exists", f"Language code '{code}' already exists", field="code")

    with transaction.atomic():
        language = Language.objects.create(
            code=code,
            name=(name or "").strip() or _default_name(code),
            active=active,
        )
        _activated(language)

    logger.info("add_language: created code=%s active=%s", language.code, language.active)
    return language


def _default_name(code: str) -> str:
    name = language_display_name(code)
    return name if name != code else code.upper()


def set_language_active(language: Language, active: bool) -> bool:
    """Retourne True si l'état a changé."""
    if language.active == active:
        return False
    if not active:
        _check_can_deactivate(language)

    with transaction.atomic():
        language.active = active
        language.save(update_fields=["active"])
        _activated(language)

    logger.info("set_language_active: code=%s active=%s", language.code, active)
    return True


def bulk_update_languages(changes: list[dict]) -> list[Language]:
    """
    changes = [{"code": "fr", "active": True}, ...]
    Retourne les langues dont l'état a changé. Désactiver une langue ne
    supprime pas ses traductions ; activer déclenche un balayage complet.
    """
    codes = [(c.get("code") or "").strip().lower() for c in changes]
    by_code = {lang.code: lang for lang in Language.objects.filter(code__in=codes)}

    missing = sorted(set(codes) - set(by_code))
    if missing:
        raise PantryValidationError("unknown", f"Unknown language code(s): {', '.join(missing)}", field="languages")

    for code, change in zip(codes, changes):
        if not change["active"]:
            _check_can_deactivate(by_code[code])

    changed = []
    with transaction.atomic():
        for code, change in zip(codes, changes):
            if set_language_active(by_code[code], bool(change["active"])):
                changed.append(by_code[code])

    logger.info("bulk_update_languages: changed=%s", [lang.code for lang in changed])
    return changed


def delete_language(language: Language) -> None:
    """Supprime la langue et ses traductions (cascade). La langue par défaut reste."""
    if language.is_default:
        raise LanguageStateError("default_language", "The default language cannot be deleted.", field="code")
    code = language.code
    language.delete()
    logger.info("delete_language: deleted code=%s", code)
