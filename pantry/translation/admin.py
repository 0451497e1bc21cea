from django.contrib import admin

from .models import Translation


@admin.register(Translation)
class TranslationAdmin(admin.ModelAdmin):
    list_display = ("id", "translated_text", "category", "food_item", "language", "is_automatic", "updated_at")
    list_filter = ("language", "is_automatic")
    search_fields = ("translated_text", "category__name", "food_item__name")
    readonly_fields = ("created_at", "updated_at")
    list_select_related = ("language", "category", "food_item")

    def save_model(self, request, obj, form, change):
        # toute édition dans l'admin est une saisie manuelle
        if change and "translated_text" in form.changed_data:
            obj.is_automatic = False
        super().save_model(request, obj, form, change)
