from rest_framework.routers import DefaultRouter

from .views import FoodItemViewSet

app_name = "fooditem-api"

router = DefaultRouter()
router.register(r"", FoodItemViewSet, basename="food-item")

urlpatterns = router.urls
