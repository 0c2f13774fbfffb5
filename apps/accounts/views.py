# apps/accounts/views.py
import logging

from django.conf import settings
from firebase_admin import auth
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.exceptions import error_payload, first_error
from core.firebase import get_auth_client
from .linkedin import LinkedInClient, LinkedInError
from .serializers import LinkedInVerifySerializer, PasswordResetSerializer

logger = logging.getLogger(__name__)


@api_view(['POST', 'OPTIONS'])
def reset_password(request):
    """Generate a Firebase password-reset link for an existing account"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = PasswordResetSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)
    email = serializer.validated_data['email']

    try:
        client = get_auth_client()
        try:
            user = client.get_user_by_email(email)
        except auth.UserNotFoundError:
            return Response({
                'error': 'No account found with this email address',
                'suggestion': 'If you signed up with Google OAuth, please use "Sign in with Google" instead.',
            }, status=status.HTTP_404_NOT_FOUND)

        providers = [info.provider_id for info in user.provider_data]
        logger.info(f"Password reset requested for {user.uid} (providers: {', '.join(providers)})")

        action_code_settings = auth.ActionCodeSettings(url=settings.SITE_URL, handle_code_in_app=False)
        link = client.generate_password_reset_link(email, action_code_settings)

        payload = {
            'success': True,
            'message': 'Password reset link generated. In production, this would be sent via email.',
        }
        if 'password' not in providers:
            payload['note'] = ('Your account currently only has Google OAuth. '
                               'The reset link will enable email/password authentication.')
        if settings.DEBUG:
            payload['link'] = link
        return Response(payload)
    except Exception as e:
        logger.error(f"Error processing password reset: {str(e)}")
        return Response(error_payload(e), status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST', 'OPTIONS'])
def verify_linkedin(request):
    """Exchange a LinkedIn authorization code for the member's profile"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = LinkedInVerifySerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    if not settings.LINKEDIN_CLIENT_ID or not settings.LINKEDIN_CLIENT_SECRET:
        return Response({'error': 'LinkedIn credentials not configured'},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    redirect_uri = data.get('redirectUri') or f"{settings.SITE_URL}/auth/linkedin/callback"
    try:
        client = LinkedInClient(settings.LINKEDIN_CLIENT_ID, settings.LINKEDIN_CLIENT_SECRET)
        user_data, access_token = client.verify(data['code'], redirect_uri)
        return Response({'success': True, 'userData': user_data, 'accessToken': access_token})
    except LinkedInError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Error verifying LinkedIn: {str(e)}")
        return Response(error_payload(e), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
