from django import forms
from django.contrib import admin
from translation.tasks import schedule_automatic_translations

from .exceptions import NameValidationError
from .models import PantrySettings
from .validation import validate_name


class ValidatedNameAdminMixin:
    """
    Même règle de nommage que l'API + relance des traductions si le nom change.
    """

    entity_type = None

    def get_form(self, request, obj=None, **kwargs):
        form = super().get_form(request, obj, **kwargs)
        entity_type = self.entity_type

        def clean_name(form_self):
            try:
                return validate_name(
                    form_self.cleaned_data.get("name", ""),
                    entity_type,
                    existing_id=form_self.instance.pk,
                )
            except NameValidationError as e:
                raise forms.ValidationError(e.message, code=e.code)

        form.clean_name = clean_name
        return form

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        if not change or "name" in form.changed_data:
            schedule_automatic_translations(self.entity_type, obj.pk)


@admin.register(PantrySettings)
class PantrySettingsAdmin(admin.ModelAdmin):
    list_display = ("id", "global_upper_limit", "updated_at")
    readonly_fields = ("updated_at",)

    def has_add_permission(self, request):
        return not PantrySettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
