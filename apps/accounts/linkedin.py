# apps/accounts/linkedin.py
import logging

import requests

logger = logging.getLogger(__name__)

TOKEN_URL = 'https://www.linkedin.com/oauth/v2/accessToken'
USERINFO_URL = 'https://api.linkedin.com/v2/userinfo'
EMAIL_URL = 'https://api.linkedin.com/v2/emailAddress?q=members&projection=(elements*(handle~))'


class LinkedInError(Exception):
    """The token exchange or profile fetch was refused by LinkedIn."""


def _localized(value):
    if isinstance(value, dict):
        return (value.get('localized') or {}).get('en_US', '')
    return ''


class LinkedInClient:
    def __init__(self, client_id, client_secret, timeout=15, session=None):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self.session = session or requests.Session()

    def exchange_code(self, code, redirect_uri):
        response = self.session.post(TOKEN_URL, data={
            'grant_type': 'authorization_code',
            'code': code,
            'redirect_uri': redirect_uri,
            'client_id': self.client_id,
            'client_secret': self.client_secret,
        }, timeout=self.timeout)
        if not response.ok:
            logger.error(f"LinkedIn token error: {response.text[:500]}")
            raise LinkedInError('Failed to exchange code for token')

        access_token = response.json().get('access_token')
        if not access_token:
            raise LinkedInError('No access token received')
        return access_token

    def fetch_profile(self, access_token):
        response = self.session.get(USERINFO_URL, headers=self._auth(access_token), timeout=self.timeout)
        if not response.ok:
            logger.error(f"LinkedIn profile error: {response.text[:500]}")
            raise LinkedInError('Failed to fetch LinkedIn profile')
        return response.json()

    def fetch_email(self, access_token):
        """Primary e-mail from the legacy endpoint, or ``None``; never raises."""
        try:
            response = self.session.get(EMAIL_URL, headers=self._auth(access_token), timeout=self.timeout)
            if not response.ok:
                return None
            elements = response.json().get('elements') or []
            if elements and elements[0].get('handle~'):
                return elements[0]['handle~'].get('emailAddress')
        except (requests.RequestException, ValueError) as e:
            logger.error(f"LinkedIn email error: {str(e)}")
        return None

    def verify(self, code, redirect_uri):
        access_token = self.exchange_code(code, redirect_uri)
        profile = self.fetch_profile(access_token)
        email = self.fetch_email(access_token)
        return build_user_data(profile, email), access_token

    @staticmethod
    def _auth(access_token):
        return {'Authorization': f'Bearer {access_token}'}


def build_user_data(profile, email=None):
    return {
        'linkedinId': profile.get('sub') or profile.get('id'),
        'firstName': profile.get('given_name') or _localized(profile.get('firstName')),
        'lastName': profile.get('family_name') or _localized(profile.get('lastName')),
        'email': email or profile.get('email') or '',
        'jobTitle': profile.get('headline') or '',
        'profilePicture': profile.get('picture') or profile.get('profilePicture') or '',
        'profileUrl': f"https://www.linkedin.com/in/{profile.get('preferred_username') or ''}",
    }
