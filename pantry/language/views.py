from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import (
    extend_schema,
    extend_schema_view,
    OpenApiExample,
    OpenApiParameter,
    OpenApiResponse,
    OpenApiTypes,
)
from pantry.tools import ErrorDetailSerializer, PantryModelViewSet
from rest_framework import filters, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from .models import Language
from .serializers import (
    LanguageBulkUpdateResponseSerializer,
    LanguageBulkUpdateSerializer,
    LanguageReadSerializer,
    LanguageWriteSerializer,
)
from .services import bulk_update_languages, delete_language

LANG_ID_PARAM = OpenApiParameter(
    name="lang_id",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.PATH,
    required=True,
    description="ID de la langue.",
)


@extend_schema_view(
    list=extend_schema(
        tags=["Language"],
        summary="Lister les langues",
        description=(
                "Liste des langues.\n\n"
                "Supporte :\n"
                "- `active` (DjangoFilterBackend)\n"
                "- `search` (DRF SearchFilter sur `code`, `name`)\n"
                "- `ordering` (DRF OrderingFilter sur `code`, `name`, `id`)\n"
        ),
        parameters=[
            OpenApiParameter(
                name="search",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Recherche simple sur code/name.",
            ),
            OpenApiParameter(
                name="ordering",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description='Tri (ex: "code", "-name", "id").',
            ),
        ],
        responses={
            200: LanguageReadSerializer(many=True),
            401: OpenApiResponse(response=ErrorDetailSerializer, description="Unauthorized"),
        },
    ),
    retrieve=extend_schema(
        tags=["Language"],
        summary="Récupérer une langue",
        parameters=[LANG_ID_PARAM],
        responses={
            200: LanguageReadSerializer,
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
            401: OpenApiResponse(response=ErrorDetailSerializer, description="Unauthorized"),
        },
    ),
    create=extend_schema(
        tags=["Language"],
        summary="Créer une langue",
        description=(
                "`name` est optionnel (nom connu pour les codes supportés, sinon le code en majuscules). "
                "Une langue créée active est traduite en arrière-plan pour toutes les catégories et articles."
        ),
        request=LanguageWriteSerializer,
        responses={
            201: LanguageReadSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
        },
    ),
    update=extend_schema(
        tags=["Language"],
        summary="Mettre à jour une langue (PUT)",
        description="Activer une langue déclenche le balayage des traductions. La langue par défaut reste active.",
        parameters=[LANG_ID_PARAM],
        request=LanguageWriteSerializer,
        responses={
            200: LanguageReadSerializer,
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
        },
    ),
    partial_update=extend_schema(
        tags=["Language"],
        summary="Mettre à jour une langue (PATCH)",
        parameters=[LANG_ID_PARAM],
        request=LanguageWriteSerializer,
        responses={
            200: LanguageReadSerializer,
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
        },
    ),
    destroy=extend_schema(
        tags=["Language"],
        summary="Supprimer une langue",
        description="Supprime aussi ses traductions. Refusé pour la langue par défaut.",
        parameters=[LANG_ID_PARAM],
        responses={
            204: OpenApiResponse(description="No Content"),
            400: OpenApiResponse(description="Default language"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
        },
    ),
)
class LanguageViewSet(PantryModelViewSet):
    queryset = Language.objects.all().order_by("code")

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["active"]
    search_fields = ["code", "name"]
    ordering_fields = ["code", "name", "id"]
    ordering = ["code"]
    lookup_field = "pk"
    lookup_url_kwarg = "lang_id"

    def get_serializer_class(self):
        if self.action in ["list", "retrieve", "active"]:
            return LanguageReadSerializer
        if self.action == "bulk_update":
            return LanguageBulkUpdateSerializer
        return LanguageWriteSerializer

    def get_permissions(self):
        if self.action in ["list", "retrieve", "active"]:
            return [IsAuthenticated()]
        return [IsAdminUser()]

    def create(self, request, *args, **kwargs):
        self._log_call(
            method_name="create",
            endpoint="POST /api/language/",
            input_expected="body JSON: {code, name?, active?}",
            output="201 + LanguageReadSerializer | 400",
        )
        write_serializer = self.get_serializer(data=request.data)
        write_serializer.is_valid(raise_exception=True)
        instance = write_serializer.save()
        return Response(LanguageReadSerializer(instance).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        self._log_call(
            method_name="partial_update" if partial else "update",
            endpoint="PUT/PATCH /api/language/{lang_id}/",
            input_expected="path lang_id + body JSON: {code?, name?, active?}",
            output="200 + LanguageReadSerializer | 400 | 404",
            extra={"lang_id": kwargs.get("lang_id")},
        )
        instance = self.get_object()
        write_serializer = self.get_serializer(instance, data=request.data, partial=partial)
        write_serializer.is_valid(raise_exception=True)
        instance = write_serializer.save()
        return Response(LanguageReadSerializer(instance).data, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        self._log_call(
            method_name="destroy",
            endpoint="DELETE /api/language/{lang_id}/",
            input_expected="path lang_id, body vide",
            output="204 | 400 | 404",
            extra={"lang_id": kwargs.get("lang_id")},
        )
        delete_language(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Language"],
        summary="Langues actives",
        description="Langues actives, triées par code (langue par défaut incluse).",
        responses={
            200: LanguageReadSerializer(many=True),
            401: OpenApiResponse(response=ErrorDetailSerializer, description="Unauthorized"),
        },
    )
    @action(detail=False, methods=["get"], url_path="active")
    def active(self, request):
        languages = Language.active_objects.order_by("code")
        return Response(LanguageReadSerializer(languages, many=True).data)

    @extend_schema(
        tags=["Language"],
        summary="Activer / désactiver plusieurs langues",
        description=(
                "Applique tous les changements ou aucun (codes inconnus, langue par défaut désactivée -> 400).\n"
                "Chaque langue nouvellement active est traduite en arrière-plan ; "
                "désactiver une langue conserve ses traductions."
        ),
        request=LanguageBulkUpdateSerializer,
        responses={
            200: LanguageBulkUpdateResponseSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
        },
        examples=[
            OpenApiExample(
                name="Request example",
                value={"languages": [{"code": "es", "active": True}, {"code": "fr", "active": False}]},
                request_only=True,
            ),
        ],
    )
    @action(detail=False, methods=["post"], url_path="bulk-update")
    def bulk_update(self, request):
        self._log_call(
            method_name="bulk_update",
            endpoint="POST /api/language/bulk-update/",
            input_expected="body JSON: {languages: [{code, active}]}",
            output="200 + {changed: [...]} | 400",
        )
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        changed = bulk_update_languages(ser.validated_data["languages"])
        return Response(
            LanguageBulkUpdateResponseSerializer({"changed": changed}).data,
            status=status.HTTP_200_OK,
        )
