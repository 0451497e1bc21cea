from core.admin import ValidatedNameAdminMixin
from core.exceptions import ItemLimitError
from core.models import EntityType, PantrySettings
from core.validation import validate_item_limit
from django import forms
from django.contrib import admin

from .models import FoodItem, FoodItemCustomField


class FoodItemAdminForm(forms.ModelForm):
    class Meta:
        model = FoodItem
        fields = "__all__"

    def clean_item_limit(self):
        try:
            return validate_item_limit(
                self.cleaned_data.get("item_limit"),
                PantrySettings.load().global_upper_limit,
            )
        except ItemLimitError as e:
            raise forms.ValidationError(e.message, code=e.code)


class FoodItemCustomFieldInline(admin.TabularInline):
    model = FoodItemCustomField
    extra = 0


@admin.register(FoodItem)
class FoodItemAdmin(ValidatedNameAdminMixin, admin.ModelAdmin):
    form = FoodItemAdminForm
    entity_type = EntityType.FOOD_ITEM
    list_display = ("id", "name", "category", "in_stock", "item_limit", "limit_type", "updated_at")
    list_filter = ("category", "in_stock", "must_go", "low_supply", "limit_type")
    search_fields = ("name",)
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [FoodItemCustomFieldInline]
