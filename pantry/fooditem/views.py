import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import (
    extend_schema,
    extend_schema_view,
    OpenApiParameter,
    OpenApiResponse,
    OpenApiTypes,
)
from pantry.tools import ErrorDetailSerializer, PantryModelViewSet
from rest_framework import filters, status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from .models import FoodItem
from .serializers import FoodItemReadSerializer, FoodItemWriteSerializer
from .services import delete_food_item

logger = logging.getLogger(__name__)

FOOD_ITEM_ID_PARAM = OpenApiParameter(
    name="food_item_id",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.PATH,
    required=True,
    description="ID de l'article.",
)


@extend_schema_view(
    list=extend_schema(
        tags=["FoodItem"],
        summary="Lister les articles",
        description=(
                "Liste des articles avec catégorie, champs libres et traductions.\n\n"
                "Supporte :\n"
                "- `category`, `in_stock`, `must_go`, `low_supply` (DjangoFilterBackend)\n"
                "- `search` (sur `name`)\n"
                "- `ordering` (`name`, `id`, `created_at`)\n"
        ),
        parameters=[
            OpenApiParameter(
                name="category",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filtre par ID de catégorie.",
            ),
            OpenApiParameter(
                name="in_stock",
                type=OpenApiTypes.BOOL,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Filtre sur la disponibilité.",
            ),
        ],
        responses={
            200: FoodItemReadSerializer(many=True),
            401: OpenApiResponse(response=ErrorDetailSerializer, description="Unauthorized"),
        },
    ),
    retrieve=extend_schema(
        tags=["FoodItem"],
        summary="Récupérer un article",
        parameters=[FOOD_ITEM_ID_PARAM],
        responses={
            200: FoodItemReadSerializer,
            401: OpenApiResponse(response=ErrorDetailSerializer, description="Unauthorized"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
    create=extend_schema(
        tags=["FoodItem"],
        summary="Créer un article",
        description=(
                "Le nom suit les mêmes règles que les catégories (unique parmi catégories ET articles).\n"
                "`item_limit` ne peut dépasser la limite globale.\n\n"
                "Les traductions automatiques sont générées en arrière-plan (non attendues)."
        ),
        request=FoodItemWriteSerializer,
        responses={
            201: FoodItemReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
        },
    ),
    update=extend_schema(
        tags=["FoodItem"],
        summary="Mettre à jour un article (PUT)",
        parameters=[FOOD_ITEM_ID_PARAM],
        request=FoodItemWriteSerializer,
        responses={
            200: FoodItemReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
    partial_update=extend_schema(
        tags=["FoodItem"],
        summary="Mettre à jour un article (PATCH)",
        description="Seuls les champs fournis sont modifiés ; traduction relancée uniquement si le nom change.",
        parameters=[FOOD_ITEM_ID_PARAM],
        request=FoodItemWriteSerializer,
        responses={
            200: FoodItemReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
    destroy=extend_schema(
        tags=["FoodItem"],
        summary="Supprimer un article",
        description="Supprime aussi ses traductions et champs libres.",
        parameters=[FOOD_ITEM_ID_PARAM],
        responses={
            204: OpenApiResponse(description="No Content"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
)
class FoodItemViewSet(PantryModelViewSet):
    queryset = (
        FoodItem.objects.all()
        .select_related("category")
        .prefetch_related("custom_fields", "translations", "translations__language")
    )
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["category", "in_stock", "must_go", "low_supply"]
    search_fields = ["name"]
    ordering_fields = ["name", "id", "created_at"]
    ordering = ["name"]
    lookup_field = "pk"
    lookup_url_kwarg = "food_item_id"

    def get_serializer_class(self):
        if self.action in ["list", "retrieve"]:
            return FoodItemReadSerializer
        return FoodItemWriteSerializer

    def get_permissions(self):
        if self.action in ["list", "retrieve"]:
            return [IsAuthenticated()]
        return [IsAdminUser()]

    def _read_response(self, instance, status_code):
        data = FoodItemReadSerializer(instance, context=self.get_serializer_context()).data
        return Response(data, status=status_code)

    def create(self, request, *args, **kwargs):
        self._log_call(
            method_name="create",
            endpoint="POST /api/food-item/",
            input_expected="body JSON: FoodItemWriteSerializer",
            output="201 + FoodItemReadSerializer | 400",
        )
        write_serializer = self.get_serializer(data=request.data)
        write_serializer.is_valid(raise_exception=True)
        instance = write_serializer.save()
        return self._read_response(instance, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        self._log_call(
            method_name="partial_update" if partial else "update",
            endpoint="PUT/PATCH /api/food-item/{food_item_id}/",
            input_expected="path food_item_id + body JSON (FoodItemWriteSerializer)",
            output="200 + FoodItemReadSerializer | 400 | 404",
            extra={"food_item_id": kwargs.get("food_item_id")},
        )
        instance = self.get_object()
        write_serializer = self.get_serializer(instance, data=request.data, partial=partial)
        write_serializer.is_valid(raise_exception=True)
        write_serializer.save()
        # relit aussi les prefetch (custom_fields, translations)
        return self._read_response(self.get_queryset().get(pk=instance.pk), status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        self._log_call(
            method_name="destroy",
            endpoint="DELETE /api/food-item/{food_item_id}/",
            input_expected="path food_item_id, body vide",
            output="204 | 404",
            extra={"food_item_id": kwargs.get("food_item_id")},
        )
        delete_food_item(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)
