from dataclasses import asdict

from drf_spectacular.utils import extend_schema, OpenApiExample, OpenApiResponse
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import NamePreviewRequestSerializer, NamePreviewResponseSerializer
from .validation import sanitize_name_input


@extend_schema(
    summary="Aperçu d'un nom pendant la saisie",
    description=(
            "Tronque à 36 caractères, compacte les espaces, met en Title Case et renvoie des avertissements. "
            "Purement indicatif : la validation réelle se fait à l'enregistrement."
    ),
    tags=["Core"],
    request=NamePreviewRequestSerializer,
    responses={
        200: NamePreviewResponseSerializer,
        400: OpenApiResponse(description="Validation error (payload invalide)"),
        401: OpenApiResponse(description="Unauthorized"),
    },
    examples=[
        OpenApiExample(
            name="Request example",
            value={"value": "canned   beans beans"},
            request_only=True,
        ),
        OpenApiExample(
            name="Response example",
            value={"value": "Canned Beans Beans", "warnings": ["Input contains repeated words"]},
            response_only=True,
        ),
    ],
)
class NamePreviewView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        req_ser = NamePreviewRequestSerializer(data=request.data)
        req_ser.is_valid(raise_exception=True)

        preview = sanitize_name_input(req_ser.validated_data["value"])
        return Response(NamePreviewResponseSerializer(asdict(preview)).data, status=status.HTTP_200_OK)
