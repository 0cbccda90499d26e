# ==================== UTILS/EXCEPTIONS.PY ====================
import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class LotNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Parking lot not found'
    default_code = 'lot_not_found'


class UserNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'User not found'
    default_code = 'user_not_found'


class SessionNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'No active session found'
    default_code = 'session_not_found'


class ActiveSessionExists(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'User already has an active session'
    default_code = 'active_session_exists'


class InsufficientCapacity(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Not enough available slots for requested booking'
    default_code = 'insufficient_capacity'


class InvalidSessionTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Parking session cannot change state.'
    default_code = 'invalid_session_transition'


def _first_message(detail):
    """Flatten DRF error detail (dict/list/str) down to its first message."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def envelope_exception_handler(exc, context):
    """Render every error as {"success": false, "message": ...}"""
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {str(exc)}"
        )
        return Response(
            {'success': False, 'message': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if isinstance(exc, ValidationError):
        message = _first_message(exc.detail)
    else:
        message = _first_message(response.data.get('detail', response.data)
                                 if isinstance(response.data, dict) else response.data)

    response.data = {'success': False, 'message': message}
    return response
