import logging

from core.exceptions import PantryValidationError
from django.conf import settings
from django.db.models import ProtectedError
from django.http import Http404
from drf_spectacular.utils import inline_serializer
from rest_framework import serializers, status, viewsets
from rest_framework.exceptions import APIException, NotFound, ValidationError
from translation.exceptions import EntityNotFound

logger = logging.getLogger(__name__)

ErrorDetailSerializer = inline_serializer(
    name="ErrorDetail",
    fields={
        "detail": serializers.CharField(required=False),
    },
)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource is still referenced."
    default_code = "conflict"


def mask_sensitive_data(data):
    """
    Masque récursivement les champs sensibles dans dicts & listes.
    """
    if isinstance(data, dict):
        return {
            key: "***MASKED***"
            if key.lower() in settings.SENSITIVE_FIELDS
            else mask_sensitive_data(value)
            for key, value in data.items()
        }

    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]

    return data


def to_drf_exception(exc):
    """
    Erreurs métier -> exceptions DRF (400 / 404 / 409).
    Utilisable aussi hors viewset (APIView).
    """
    if isinstance(exc, PantryValidationError):
        return ValidationError(exc.as_detail(), code=exc.code)
    if isinstance(exc, ProtectedError):
        return Conflict(exc.args[0] if exc.args else None)
    if isinstance(exc, (Http404, EntityNotFound)):
        return NotFound()
    return exc


class PantryViewSetMixin:
    def _log_call(self, *, method_name: str, endpoint: str, input_expected: str, output: str,
                  extra: dict | None = None):
        """
        Log standardisé pour tracer :
        - endpoint
        - input/output
        - user
        - action
        - payload (masqué) + params
        """
        user_id = getattr(getattr(self.request, "user", None), "id", None)
        action = getattr(self, "action", None)

        try:
            masked_payload = mask_sensitive_data(self.request.data)
        except Exception:
            masked_payload = "<unreadable>"

        logger.info(
            "[%s] action=%s user=%s endpoint=%s input=%s output=%s payload=%s params=%s extra=%s",
            method_name,
            action,
            user_id,
            endpoint,
            input_expected,
            output,
            masked_payload,
            dict(getattr(self.request, "query_params", {})),
            extra or {},
        )

    def handle_exception(self, exc):
        """
        Loggue l'exception avec contexte, puis la convertit en réponse DRF.
        """
        expected = (PantryValidationError, APIException, Http404, EntityNotFound, ProtectedError)
        log = logger.warning if isinstance(exc, expected) else logger.exception
        log(
            "Erreur dans %s (action=%s, user=%s): %s",
            self.__class__.__name__,
            getattr(self, "action", None),
            getattr(getattr(self.request, "user", None), "id", None),
            exc,
        )
        return super().handle_exception(to_drf_exception(exc))


class PantryModelViewSet(PantryViewSetMixin, viewsets.ModelViewSet):
    pass
