import logging

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

from .models import Category
from .serializers import CategoryReadSerializer, CategoryWriteSerializer
from .services import delete_category

logger = logging.getLogger(__name__)

CATEGORY_ID_PARAM = OpenApiParameter(
    name="category_id",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.PATH,
    required=True,
    description="ID de la catégorie.",
)


@extend_schema_view(
    list=extend_schema(
        tags=["Category"],
        summary="Lister les catégories",
        description=(
                "Liste des catégories avec leurs traductions.\n\n"
                "Supporte :\n"
                "- `search` (DRF SearchFilter sur `name`)\n"
                "- `ordering` (`name`, `id`, `created_at`)\n"
        ),
        responses={
            200: CategoryReadSerializer(many=True),
            401: OpenApiResponse(response=ErrorDetailSerializer, description="Unauthorized"),
        },
    ),
    retrieve=extend_schema(
        tags=["Category"],
        summary="Récupérer une catégorie",
        parameters=[CATEGORY_ID_PARAM],
        responses={
            200: CategoryReadSerializer,
            401: OpenApiResponse(response=ErrorDetailSerializer, description="Unauthorized"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
    create=extend_schema(
        tags=["Category"],
        summary="Créer une catégorie",
        description=(
                "Le nom est validé (longueur 3..36, 3 lettres min., pas d'espaces doublés, "
                "pas de mots répétés, unique parmi catégories ET articles) puis mis en Title Case.\n\n"
                "Les traductions automatiques sont générées en arrière-plan (non attendues)."
        ),
        request=CategoryWriteSerializer,
        responses={
            201: CategoryReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
        },
    ),
    update=extend_schema(
        tags=["Category"],
        summary="Renommer une catégorie (PUT)",
        parameters=[CATEGORY_ID_PARAM],
        request=CategoryWriteSerializer,
        responses={
            200: CategoryReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
    partial_update=extend_schema(
        tags=["Category"],
        summary="Renommer une catégorie (PATCH)",
        parameters=[CATEGORY_ID_PARAM],
        request=CategoryWriteSerializer,
        responses={
            200: CategoryReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
    destroy=extend_schema(
        tags=["Category"],
        summary="Supprimer une catégorie",
        description="Supprime aussi ses traductions. Refusé (409) si des articles y sont rattachés.",
        parameters=[CATEGORY_ID_PARAM],
        responses={
            204: OpenApiResponse(description="No Content"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
            409: OpenApiResponse(response=ErrorDetailSerializer, description="Category is used by food items"),
        },
    ),
)
class CategoryViewSet(PantryModelViewSet):
    queryset = Category.objects.all().prefetch_related("translations", "translations__language")
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["name"]
    ordering_fields = ["name", "id", "created_at"]
    ordering = ["name"]
    lookup_field = "pk"
    lookup_url_kwarg = "category_id"

    def get_serializer_class(self):
        if self.action in ["list", "retrieve"]:
            return CategoryReadSerializer
        return CategoryWriteSerializer

    def get_permissions(self):
        if self.action in ["list", "retrieve"]:
            return [IsAuthenticated()]
        return [IsAdminUser()]

    def _read_response(self, instance, status_code):
        data = CategoryReadSerializer(instance, context=self.get_serializer_context()).data
        return Response(data, status=status_code)

    def create(self, request, *args, **kwargs):
        self._log_call(
            method_name="create",
            endpoint="POST /api/category/",
            input_expected="body JSON: {name}",
            output="201 + CategoryReadSerializer | 400",
        )
        write_serializer = self.get_serializer(data=request.data)
        write_serializer.is_valid(raise_exception=True)
        instance = write_serializer.save()
        return self._read_response(instance, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        self._log_call(
            method_name="partial_update" if partial else "update",
            endpoint="PUT/PATCH /api/category/{category_id}/",
            input_expected="path category_id + body JSON: {name}",
            output="200 + CategoryReadSerializer | 400 | 404",
            extra={"category_id": kwargs.get("category_id")},
        )
        instance = self.get_object()
        write_serializer = self.get_serializer(instance, data=request.data, partial=partial)
        write_serializer.is_valid(raise_exception=True)
        instance = write_serializer.save()
        instance.refresh_from_db()
        return self._read_response(instance, status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        self._log_call(
            method_name="destroy",
            endpoint="DELETE /api/category/{category_id}/",
            input_expected="path category_id, body vide",
            output="204 | 404 | 409",
            extra={"category_id": kwargs.get("category_id")},
        )
        delete_category(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)
