from rest_framework.routers import DefaultRouter

from .views import TranslationViewSet

app_name = "translation-api"

router = DefaultRouter()
router.register(r"", TranslationViewSet, basename="translation")

urlpatterns = router.urls
