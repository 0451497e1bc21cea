import logging

import django_filters
from core.models import EntityType
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import (
    extend_schema,
    extend_schema_view,
    OpenApiExample,
    OpenApiParameter,
    OpenApiResponse,
    OpenApiTypes,
)
from pantry.tools import ErrorDetailSerializer, PantryViewSetMixin
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from .exceptions import TranslationFailed
from .models import Translation
from .serializers import (
    GenerateTranslationsSerializer,
    ManualTranslationSerializer,
    TranslateRequestSerializer,
    TranslateResponseSerializer,
    TranslationReadSerializer,
    TranslationUpdateSerializer,
)
from .services.translator import translate_many
from .store import get_entity, upsert_translation
from .tasks import schedule_automatic_translations

logger = logging.getLogger(__name__)

TRANSLATION_ID_PARAM = OpenApiParameter(
    name="translation_id",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.PATH,
    required=True,
    description="ID de la traduction.",
)

ENTITY_ID_PARAM = OpenApiParameter(
    name="entity_id",
    type=OpenApiTypes.INT,
    location=OpenApiParameter.PATH,
    required=True,
    description="ID de la catégorie / de l'article.",
)


class TranslationFilter(django_filters.FilterSet):
    language = django_filters.CharFilter(field_name="language__code", lookup_expr="iexact")
    type = django_filters.ChoiceFilter(choices=EntityType.choices, method="filter_type")

    class Meta:
        model = Translation
        fields = ["language", "category", "food_item", "is_automatic", "type"]

    def filter_type(self, queryset, name, value):
        if value == EntityType.CATEGORY:
            return queryset.filter(category__isnull=False)
        return queryset.filter(food_item__isnull=False)


@extend_schema_view(
    list=extend_schema(
        tags=["Translation"],
        summary="Lister les traductions",
        description=(
                "Filtres :\n"
                "- `language` (code, ex: `fr`)\n"
                "- `category` / `food_item` (ID)\n"
                "- `type` (`category` | `foodItem`)\n"
                "- `is_automatic`\n"
        ),
        responses={
            200: TranslationReadSerializer(many=True),
            401: OpenApiResponse(response=ErrorDetailSerializer, description="Unauthorized"),
        },
    ),
    retrieve=extend_schema(
        tags=["Translation"],
        summary="Récupérer une traduction",
        parameters=[TRANSLATION_ID_PARAM],
        responses={
            200: TranslationReadSerializer,
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
    update=extend_schema(
        tags=["Translation"],
        summary="Corriger une traduction (PUT)",
        description="Edition manuelle : la traduction passe en `is_automatic=false` et ne sera plus écrasée.",
        parameters=[TRANSLATION_ID_PARAM],
        request=TranslationUpdateSerializer,
        responses={
            200: TranslationReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
    partial_update=extend_schema(
        tags=["Translation"],
        summary="Corriger une traduction (PATCH)",
        parameters=[TRANSLATION_ID_PARAM],
        request=TranslationUpdateSerializer,
        responses={
            200: TranslationReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
    destroy=extend_schema(
        tags=["Translation"],
        summary="Supprimer une traduction",
        parameters=[TRANSLATION_ID_PARAM],
        responses={
            204: OpenApiResponse(description="No Content"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Not found"),
        },
    ),
)
class TranslationViewSet(
    PantryViewSetMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Pas de POST / sur la collection : les traductions sont créées
    par le pipeline automatique ou par les upserts manuels ci-dessous.
    """

    queryset = Translation.objects.all().select_related("language", "category", "food_item")
    filter_backends = [DjangoFilterBackend]
    filterset_class = TranslationFilter
    lookup_field = "pk"
    lookup_url_kwarg = "translation_id"

    def get_serializer_class(self):
        if self.action in ["update", "partial_update"]:
            return TranslationUpdateSerializer
        if self.action in ["upsert_category", "upsert_food_item"]:
            return ManualTranslationSerializer
        if self.action == "generate":
            return GenerateTranslationsSerializer
        if self.action == "translate":
            return TranslateRequestSerializer
        return TranslationReadSerializer

    def get_permissions(self):
        if self.action in ["list", "retrieve", "translate"]:
            return [IsAuthenticated()]
        return [IsAdminUser()]

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        self._log_call(
            method_name="partial_update" if partial else "update",
            endpoint="PUT/PATCH /api/translation/{translation_id}/",
            input_expected="path translation_id + body JSON: {translated_text}",
            output="200 + TranslationReadSerializer | 400 | 404",
            extra={"translation_id": kwargs.get("translation_id")},
        )
        instance = self.get_object()
        write_serializer = self.get_serializer(instance, data=request.data, partial=partial)
        write_serializer.is_valid(raise_exception=True)
        instance = write_serializer.save(is_automatic=False)
        return Response(TranslationReadSerializer(instance).data, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        self._log_call(
            method_name="destroy",
            endpoint="DELETE /api/translation/{translation_id}/",
            input_expected="path translation_id, body vide",
            output="204 | 404",
            extra={"translation_id": kwargs.get("translation_id")},
        )
        return super().destroy(request, *args, **kwargs)

    # ---------------------------------------------------------------------
    # Upsert manuel (entité, langue)
    # ---------------------------------------------------------------------

    def _manual_upsert(self, request, entity_type: str, entity_id: int):
        entity = get_entity(entity_type, entity_id)
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)

        translation, created = upsert_translation(
            entity_type,
            entity.pk,
            ser.validated_data["language"],
            ser.validated_data["translated_text"],
            is_automatic=False,
        )
        logger.info(
            "manual translation %s entity_type=%s entity_id=%s language=%s",
            "created" if created else "updated", entity_type, entity.pk, translation.language.code,
        )
        return Response(
            TranslationReadSerializer(translation).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(
        tags=["Translation"],
        summary="Traduction manuelle d'une catégorie",
        description="Crée ou remplace la traduction (catégorie, langue). `is_automatic` passe à false.",
        parameters=[ENTITY_ID_PARAM],
        request=ManualTranslationSerializer,
        responses={
            200: TranslationReadSerializer,
            201: TranslationReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Category not found"),
        },
    )
    @action(detail=False, methods=["post"], url_path=r"category/(?P<entity_id>\d+)")
    def upsert_category(self, request, entity_id=None):
        self._log_call(
            method_name="upsert_category",
            endpoint="POST /api/translation/category/{entity_id}/",
            input_expected="path entity_id + body JSON: {language, translated_text}",
            output="201|200 + TranslationReadSerializer | 400 | 404",
            extra={"entity_id": entity_id},
        )
        return self._manual_upsert(request, EntityType.CATEGORY, int(entity_id))

    @extend_schema(
        tags=["Translation"],
        summary="Traduction manuelle d'un article",
        description="Crée ou remplace la traduction (article, langue). `is_automatic` passe à false.",
        parameters=[ENTITY_ID_PARAM],
        request=ManualTranslationSerializer,
        responses={
            200: TranslationReadSerializer,
            201: TranslationReadSerializer,
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Food item not found"),
        },
    )
    @action(detail=False, methods=["post"], url_path=r"food-item/(?P<entity_id>\d+)")
    def upsert_food_item(self, request, entity_id=None):
        self._log_call(
            method_name="upsert_food_item",
            endpoint="POST /api/translation/food-item/{entity_id}/",
            input_expected="path entity_id + body JSON: {language, translated_text}",
            output="201|200 + TranslationReadSerializer | 400 | 404",
            extra={"entity_id": entity_id},
        )
        return self._manual_upsert(request, EntityType.FOOD_ITEM, int(entity_id))

    # ---------------------------------------------------------------------
    # Relance du pipeline automatique
    # ---------------------------------------------------------------------

    @extend_schema(
        tags=["Translation"],
        summary="Relancer les traductions automatiques d'une entité",
        description=(
                "Planifie la génération en arrière-plan pour chaque langue active "
                "(hors langue par défaut). Réponse immédiate, sans attendre le traducteur."
        ),
        request=GenerateTranslationsSerializer,
        responses={
            202: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Scheduled"),
            400: OpenApiResponse(response=OpenApiTypes.OBJECT, description="Validation error"),
            403: OpenApiResponse(response=ErrorDetailSerializer, description="Forbidden (admin only)"),
            404: OpenApiResponse(response=ErrorDetailSerializer, description="Entity not found"),
        },
        examples=[
            OpenApiExample(
                name="Request example",
                value={"entity_type": "foodItem", "entity_id": 12},
                request_only=True,
            ),
        ],
    )
    @action(detail=False, methods=["post"], url_path="generate")
    def generate(self, request):
        self._log_call(
            method_name="generate",
            endpoint="POST /api/translation/generate/",
            input_expected="body JSON: {entity_type, entity_id}",
            output="202 | 400 | 404",
        )
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        entity_type = ser.validated_data["entity_type"]
        entity = get_entity(entity_type, ser.validated_data["entity_id"])

        schedule_automatic_translations(entity_type, entity.pk)
        return Response(
            {"entity_type": entity_type, "entity_id": entity.pk, "status": "scheduled"},
            status=status.HTTP_202_ACCEPTED,
        )

    # ---------------------------------------------------------------------
    # Traduction libre (contexte customInput)
    # ---------------------------------------------------------------------

    @extend_schema(
        tags=["Translation"],
        summary="Traduire des textes libres",
        description=(
                "Traduit une liste de textes depuis la langue par défaut vers `target`. "
                "Les textes vides ne sont pas envoyés au traducteur et restent vides. "
                "Rien n'est enregistré."
        ),
        request=TranslateRequestSerializer,
        responses={
            200: TranslateResponseSerializer,
            400: OpenApiResponse(description="Validation error (payload invalide)"),
            401: OpenApiResponse(description="Unauthorized"),
            502: OpenApiResponse(response=ErrorDetailSerializer, description="Translator upstream error"),
        },
        examples=[
            OpenApiExample(
                name="Request example",
                value={"target": "es", "texts": ["Canned beans", "", "Rice"]},
                request_only=True,
            ),
            OpenApiExample(
                name="Response example",
                value={"translations": ["Frijoles enlatados", "", "Arroz"]},
                response_only=True,
            ),
            OpenApiExample(
                name="Translator error (502)",
                value={"detail": "DeepL error 456: Quota exceeded"},
                status_codes=["502"],
                response_only=True,
            ),
        ],
    )
    @action(detail=False, methods=["post"], url_path="translate")
    def translate(self, request):
        self._log_call(
            method_name="translate",
            endpoint="POST /api/translation/translate/",
            input_expected="body JSON: {target, texts}",
            output="200 + TranslateResponseSerializer | 400 | 502",
        )
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            out = translate_many(ser.validated_data["texts"], ser.validated_data["target"], "customInput")
        except TranslationFailed as e:
            logger.warning("translate: translator error target=%s reason=%s", ser.validated_data["target"], e)
            return Response({"detail": str(e)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(TranslateResponseSerializer({"translations": out}).data, status=status.HTTP_200_OK)
