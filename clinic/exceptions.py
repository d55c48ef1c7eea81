import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class ConflictError(APIException):
    """Business rule conflict (double admission, stale state ...)."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflito com o estado atual do registro.'
    default_code = 'conflict'


def _error_code(exc) -> str:
    if isinstance(exc, APIException):
        return exc.default_code
    if isinstance(exc, Http404):
        return 'not_found'
    if isinstance(exc, DjangoPermissionDenied):
        return 'permission_denied'
    return 'api_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("Unhandled error in %s", type(context.get('view')).__name__, exc_info=exc)
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    headers = {k: resp[k] for k in ('WWW-Authenticate', 'Retry-After') if resp.has_header(k)}
    return Response({'ok': False, 'error': {'code': _error_code(exc), 'message': detail}},
                    status=resp.status_code, headers=headers)
