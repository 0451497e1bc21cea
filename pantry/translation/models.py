from category.models import Category
from core.models import EntityType
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _
from fooditem.models import FoodItem
from language.models import Language


class Translation(models.Model):
    """
    Nom d'une catégorie OU d'un article dans une langue donnée.
    Une seule ligne par (entité, langue) : les écritures passent par
    translation.store.upsert_translation.
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name="translations",
        null=True,
        blank=True,
    )
    food_item = models.ForeignKey(
        FoodItem,
        on_delete=models.CASCADE,
        related_name="translations",
        null=True,
        blank=True,
    )
    language = models.ForeignKey(
        Language,
        on_delete=models.CASCADE,
        related_name="translations",
    )

    translated_text = models.CharField(_("translated text"), max_length=255)
    # True = texte généré (remplaçable), False = saisie manuelle
    is_automatic = models.BooleanField(_("automatic"), default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]
        verbose_name = _("Translation")
        verbose_name_plural = _("Translations")
        constraints = [
            models.UniqueConstraint(fields=["category", "language"], name="uniq_translation_category_language"),
            models.UniqueConstraint(fields=["food_item", "language"], name="uniq_translation_food_item_language"),
        ]

    def __str__(self):
        return f"{self.entity_type}#{self.entity_id} [{self.language.code}] {self.translated_text}"

    @property
    def entity_type(self) -> str:
        return EntityType.CATEGORY if self.category_id else EntityType.FOOD_ITEM

    @property
    def entity_id(self) -> int | None:
        return self.category_id or self.food_item_id

    def clean(self):
        if bool(self.category_id) == bool(self.food_item_id):
            raise ValidationError(_("A translation belongs to exactly one category or one food item."))
