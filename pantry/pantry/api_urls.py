from django.urls import path, include

app_name = 'api'
urlpatterns = [
    path("category/", include(("category.api_urls", "category-api"), namespace="category-api")),
    path("food-item/", include(("fooditem.api_urls", "fooditem-api"), namespace="fooditem-api")),
    path("language/", include(("language.api_urls", "lang-api"), namespace="lang-api")),
    path("translation/", include(("translation.api_urls", "translation-api"), namespace="translation-api")),
    path("core/", include(("core.api_urls", "core-api"), namespace="core-api")),
]
