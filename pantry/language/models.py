# language/models.py
from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class ActiveLanguageManager(models.Manager):
    def get_queryset(self):
        return super().get_queryset().filter(active=True)


class Language(models.Model):
    """
    Langue gérée par l'application.
    Chaque langue active (sauf la langue par défaut) reçoit une traduction
    automatique des noms de catégories et d'articles.
    """

    code = models.CharField(
        _("code"),
        max_length=10,
        unique=True,
        help_text=_("Code ISO (ex: fr, es, zh)")
    )

    name = models.CharField(
        _("name"),
        max_length=100,
        help_text=_("Nom lisible (ex: French, Spanish)")
    )

    active = models.BooleanField(
        _("active"),
        default=True,
        help_text=_("Langue cible des traductions automatiques")
    )

    objects = models.Manager()
    active_objects = ActiveLanguageManager()

    class Meta:
        ordering = ["code"]
        verbose_name = _("Language")
        verbose_name_plural = _("Languages")

    def __str__(self):
        return f"{self.code} — {self.name}"

    @property
    def is_default(self) -> bool:
        return self.code == settings.PANTRY_DEFAULT_LANGUAGE
