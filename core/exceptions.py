# core/exceptions.py
import traceback

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from rest_framework.exceptions import MethodNotAllowed
from rest_framework.views import exception_handler


def api_exception_handler(exc, context):
    """Reshape DRF's ``{"detail": ...}`` errors into the ``{"error": ...}`` body every handler returns."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, MethodNotAllowed):
        response.data = {'error': 'Method not allowed'}
    elif isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {'error': str(response.data['detail'])}
    return response


def require_setting(name):
    """Return a credential setting or fail before any external call is made."""
    value = getattr(settings, name, None)
    if not value:
        raise ImproperlyConfigured(f"{name} is not configured")
    return value


def error_payload(exc, error=None):
    """Body for a 500 response; the stack trace is only exposed in DEBUG."""
    if error is None:
        payload = {'error': str(exc)}
    else:
        payload = {'error': error, 'message': str(exc)}
    if settings.DEBUG:
        payload['details'] = ''.join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return payload


def first_error(errors):
    """Flatten serializer errors to the first human-readable message."""
    if isinstance(errors, dict):
        for value in errors.values():
            return first_error(value)
    if isinstance(errors, (list, tuple)) and errors:
        return first_error(errors[0])
    return str(errors)
