# apps/tracking/views.py
import logging
from functools import wraps

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.exceptions import error_payload, first_error
from . import services
from .serializers import ClickEventSerializer, ViewEventSerializer

logger = logging.getLogger(__name__)


def allow_any_origin(view):
    """Send ``Access-Control-Allow-Origin: *`` on every response, with or without an Origin header."""
    @wraps(view)
    def wrapped(request, *args, **kwargs):
        response = view(request, *args, **kwargs)
        response['Access-Control-Allow-Origin'] = '*'
        return response
    return wrapped


@allow_any_origin
@api_view(['POST', 'OPTIONS'])
def track_view(request):
    """Record a job view"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = ViewEventSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

    event = serializer.to_event()
    try:
        services.get_counter_service().record_view(event)
        return Response({'success': True})
    except Exception as e:
        logger.error(f"Error tracking view for job {event.job_id}: {str(e)}")
        return Response(error_payload(e), status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@allow_any_origin
@api_view(['POST', 'OPTIONS'])
def track_click(request):
    """Record a job click"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = ClickEventSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

    event = serializer.to_event()
    try:
        services.get_counter_service().record_click(event)
        return Response({'success': True})
    except Exception as e:
        logger.error(f"Error tracking click for job {event.job_id}: {str(e)}")
        return Response(error_payload(e), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
