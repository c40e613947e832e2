import logging

from django.db import IntegrityError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class AppError(exceptions.APIException):
    """Domain error carrying an HTTP status and optional structured details.

    Services raise these; only the exception handler turns them into
    responses.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed.'

    def __init__(self, message=None, status_code=None, details=None):
        super().__init__(message or self.default_detail)
        if status_code is not None:
            self.status_code = status_code
        self.message = str(self.detail)
        self.details = details


class NotFoundForHotel(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found for this hotel.'


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflicts with existing data.'


class PayloadTooLarge(AppError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_detail = 'Payload too large.'


def api_exception_handler(exc, context):
    """Single responder for every error raised by a view.

    Schema problems become 422, domain errors keep their own status,
    DRF's auth/permission/not-found errors are reshaped to ``{message}``,
    and anything unclassified is logged and hidden behind a generic 500.
    """
    if isinstance(exc, exceptions.ValidationError):
        set_rollback()
        return Response(
            {'message': 'Validation failed', 'issues': exc.detail},
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    if isinstance(exc, AppError):
        set_rollback()
        return Response(
            {'message': exc.message, 'details': exc.details},
            status=exc.status_code,
        )

    # Http404 / Django PermissionDenied / remaining APIExceptions
    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
        response.data = {'message': str(detail) if detail is not None else 'Request failed'}
        return response

    if isinstance(exc, IntegrityError):
        logger.warning('Integrity error: %s', exc)
        return Response(
            {'message': Conflict.default_detail},
            status=status.HTTP_409_CONFLICT,
        )

    view = context.get('view')
    logger.exception(
        'Unexpected error in %s', view.__class__.__name__ if view else 'unknown view',
        exc_info=exc,
    )
    return Response(
        {'message': 'Unexpected server error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
