from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class EntityType(models.TextChoices):
    """Entités dont le nom est validé puis traduit automatiquement."""

    CATEGORY = "category", _("Category")
    FOOD_ITEM = "foodItem", _("Food item")


class PantrySettings(models.Model):
    """
    Réglages globaux (une seule ligne, pk=1).
    Seul `global_upper_limit` est utilisé : plafond de `FoodItem.item_limit`.
    """

    DEFAULT_GLOBAL_UPPER_LIMIT = 10

    global_upper_limit = models.PositiveIntegerField(
        _("global upper limit"),
        default=DEFAULT_GLOBAL_UPPER_LIMIT,
        validators=[MinValueValidator(1)],
        help_text=_("Limite maximale autorisée pour item_limit d'un article"),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Pantry settings")
        verbose_name_plural = _("Pantry settings")

    def __str__(self):
        return f"Pantry settings (limit={self.global_upper_limit})"

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "PantrySettings":
        obj, _created = cls.objects.get_or_create(pk=1)
        return obj
