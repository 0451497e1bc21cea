from django.db import models
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    """
    Catégorie d'articles (ex: Fruits, Conserves).
    Le nom est normalisé (Title Case) et unique aussi vis-à-vis des articles :
    voir core.validation.validate_name.
    """

    name = models.CharField(_("name"), max_length=36, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = _("Category")
        verbose_name_plural = _("Categories")

    def __str__(self):
        return self.name or f"Category#{self.pk}"
