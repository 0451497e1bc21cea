from category.models import Category
from django.db import models
from django.utils.translation import gettext_lazy as _


class FoodItem(models.Model):
    PER_HOUSEHOLD = "perHousehold"
    PER_PERSON = "perPerson"
    LIMIT_TYPE_CHOICES = [(PER_HOUSEHOLD, _("Per household")), (PER_PERSON, _("Per person"))]

    name = models.CharField(_("name"), max_length=36, unique=True)
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="food_items",
    )

    image_url = models.URLField(blank=True, default="")
    thumbnail_url = models.URLField(blank=True, default="")

    # 0 = pas de limite propre à l'article
    item_limit = models.PositiveIntegerField(default=0)
    limit_type = models.CharField(max_length=16, choices=LIMIT_TYPE_CHOICES, default=PER_HOUSEHOLD)

    in_stock = models.BooleanField(default=True, db_index=True)
    must_go = models.BooleanField(default=False)
    low_supply = models.BooleanField(default=False)

    # régimes
    kosher = models.BooleanField(default=False)
    halal = models.BooleanField(default=False)
    vegetarian = models.BooleanField(default=False)
    vegan = models.BooleanField(default=False)
    gluten_free = models.BooleanField(default=False)
    organic = models.BooleanField(default=False)
    ready_to_eat = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = _("Food item")
        verbose_name_plural = _("Food items")

    def __str__(self):
        return self.name or f"FoodItem#{self.pk}"


class FoodItemCustomField(models.Model):
    food_item = models.ForeignKey(FoodItem, related_name="custom_fields", on_delete=models.CASCADE)
    key = models.CharField(max_length=100)
    value = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.key}={self.value}"
