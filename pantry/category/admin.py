from core.admin import ValidatedNameAdminMixin
from core.models import EntityType
from django.contrib import admin

from .models import Category


@admin.register(Category)
class CategoryAdmin(ValidatedNameAdminMixin, admin.ModelAdmin):
    entity_type = EntityType.CATEGORY
    list_display = ("id", "name", "created_at", "updated_at")
    search_fields = ("name",)
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")
