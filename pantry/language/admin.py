from django.contrib import admin, messages

from core.exceptions import LanguageStateError

from .models import Language
from .services import set_language_active


@admin.register(Language)
class LanguageAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "active",)
    list_filter = ("active",)
    search_fields = ("code", "name",)
    ordering = ("code",)
    actions = ["activate_languages", "deactivate_languages"]

    def get_readonly_fields(self, request, obj=None):
        # l'état actif passe par les actions (balayage des traductions)
        if obj is not None:
            return ("active",)
        return ()

    def save_model(self, request, obj, form, change):
        active = obj.active
        if not change:
            obj.active = False
        super().save_model(request, obj, form, change)
        if not change and active:
            set_language_active(obj, True)

    @admin.action(description="Activer les langues sélectionnées")
    def activate_languages(self, request, queryset):
        changed = sum(set_language_active(lang, True) for lang in queryset)
        self.message_user(request, f"{changed} langue(s) activée(s).", messages.SUCCESS)

    @admin.action(description="Désactiver les langues sélectionnées")
    def deactivate_languages(self, request, queryset):
        changed = 0
        for lang in queryset:
            try:
                changed += set_language_active(lang, False)
            except LanguageStateError as e:
                self.message_user(request, f"{lang.code}: {e.message}", messages.ERROR)
        self.message_user(request, f"{changed} langue(s) désactivée(s).", messages.SUCCESS)
