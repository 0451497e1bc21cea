"""
Règles de validation partagées par les catégories et les articles.

`validate_name` est la porte d'entrée unique (côté serveur) pour tout nom de
catégorie / d'article : elle rejette, elle ne corrige pas (sauf la casse).
`sanitize_name_input` n'est qu'un aperçu pendant la saisie.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from category.models import Category
from fooditem.models import FoodItem

from .exceptions import ItemLimitError, NameValidationError
from .models import EntityType

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 36
NAME_MIN_LENGTH = 3
NAME_MIN_LETTERS = 3

_LETTER_RE = re.compile(r"[a-zA-Z]")
_MULTI_SPACE_RE = re.compile(r"\s{2,}")


def _same_length(char: str, convert) -> str:
    # ß -> SS, ﬁ -> FI, İ -> i̇ : on garde le caractère tel quel
    converted = convert(char)
    return converted if len(converted) == len(char) else char


def title_case(value: str) -> str:
    return " ".join(
        "".join(_same_length(c, str.upper if i == 0 else str.lower) for i, c in enumerate(word))
        for word in value.split(" ")
    )


def validate_name(raw: str, entity_type: str, existing_id: int | None = None) -> str:
    """
    Valide un nom de catégorie / d'article et retourne sa forme normalisée (Title Case).

    Les règles sont appliquées dans l'ordre et la première qui échoue lève
    `NameValidationError`. L'unicité est vérifiée sur les DEUX collections
    (catégories + articles), sans tenir compte de la casse ; `existing_id`
    exclut l'entité elle-même (dans sa propre collection) lors d'une mise à jour.
    """
    name = (raw or "").strip()

    if len(name) > NAME_MAX_LENGTH:
        raise NameValidationError(
            NameValidationError.TOO_LONG,
            f"Input cannot exceed {NAME_MAX_LENGTH} characters, including spaces.",
        )

    if len(name) < NAME_MIN_LENGTH:
        raise NameValidationError(
            NameValidationError.TOO_SHORT,
            "Input must be at least three characters long.",
        )

    if len(_LETTER_RE.findall(name)) < NAME_MIN_LETTERS:
        raise NameValidationError(
            NameValidationError.TOO_FEW_LETTERS,
            "Input must include at least three letters.",
        )

    if _MULTI_SPACE_RE.search(name):
        raise NameValidationError(
            NameValidationError.EXTRA_SPACES,
            "Input contains unnecessary spaces.",
        )

    words = name.lower().split()
    if len(set(words)) != len(words):
        raise NameValidationError(
            NameValidationError.REPEATED_WORDS,
            "Input contains repeated words.",
        )

    _check_unique(name, entity_type, existing_id)

    return title_case(name)


def _check_unique(name: str, entity_type: str, existing_id: int | None) -> None:
    categories = Category.objects.filter(name__iexact=name)
    if existing_id is not None and entity_type == EntityType.CATEGORY:
        categories = categories.exclude(pk=existing_id)
    if categories.exists():
        logger.info("validate_name: duplicate category name=%r entity_type=%s", name, entity_type)
        raise NameValidationError(
            NameValidationError.DUPLICATE_NAME,
            "This category already exists."
            if entity_type == EntityType.CATEGORY
            else "This name already exists as a category.",
        )

    food_items = FoodItem.objects.filter(name__iexact=name)
    if existing_id is not None and entity_type == EntityType.FOOD_ITEM:
        food_items = food_items.exclude(pk=existing_id)
    if food_items.exists():
        logger.info("validate_name: duplicate food item name=%r entity_type=%s", name, entity_type)
        raise NameValidationError(
            NameValidationError.DUPLICATE_NAME,
            "This food item already exists."
            if entity_type == EntityType.FOOD_ITEM
            else "This name already exists as a food item.",
        )


@dataclass
class SanitizedName:
    value: str
    warnings: list[str] = field(default_factory=list)


def sanitize_name_input(value: str) -> SanitizedName:
    """Aperçu pendant la saisie : tronque, compacte les espaces, avertit (sans rejeter)."""
    value = value or ""
    warnings = []

    if len(value) > NAME_MAX_LENGTH:
        value = value[:NAME_MAX_LENGTH]
        warnings.append(f"Input cannot exceed {NAME_MAX_LENGTH} characters")

    value = _MULTI_SPACE_RE.sub(" ", value)

    words = [w for w in value.lower().split(" ") if w]
    if len(set(words)) != len(words):
        warnings.append("Input contains repeated words")

    return SanitizedName(value=title_case(value), warnings=warnings)


def validate_item_limit(limit, global_limit: int) -> int:
    try:
        limit_num = int(limit)
    except (TypeError, ValueError):
        raise ItemLimitError("invalid", "Item limit must be a number")

    if limit_num < 0:
        raise ItemLimitError("negative", "Item limit cannot be negative")

    if limit_num > global_limit:
        raise ItemLimitError("above_global_limit", f"Item limit cannot exceed global limit of {global_limit}")

    return limit_num
