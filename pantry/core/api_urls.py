from django.urls import path

from .views import NamePreviewView

app_name = "core-api"

urlpatterns = [
    path("name-preview/", NamePreviewView.as_view(), name="name-preview"),
]
