# apps/alerts/emails.py
import logging
from urllib.parse import quote

import resend
from django.conf import settings
from django.template.loader import render_to_string
from django.utils import timezone

from core.exceptions import require_setting
from .tokens import make_unsubscribe_token

logger = logging.getLogger(__name__)

FREQUENCY_LABELS = {
    'realtime': 'Realtime',
    'daily': 'Daily',
    'weekly': 'Weekly',
}


def alert_links(alert_id, email):
    site_url = settings.SITE_URL
    return {
        'site_url': site_url,
        'unsubscribe_url': f"{site_url}/unsubscribe?token={quote(make_unsubscribe_token(alert_id, email), safe='')}",
        'preferences_url': f"{site_url}/alerts?email={quote(email)}",
    }


def send_email(to, subject, template_name, context):
    resend.api_key = require_setting('RESEND_API_KEY')
    html = render_to_string(template_name, context)
    result = resend.Emails.send({
        'from': settings.ALERTS_FROM_EMAIL,
        'to': [to],
        'subject': subject,
        'html': html,
    })
    logger.info(f"Sent '{subject}' to {to}")
    return result


def send_welcome_email(alert_id, email, frequency):
    label = FREQUENCY_LABELS[frequency]
    if frequency == 'realtime':
        subject = 'Welcome to Partnerships Careers - Realtime Job Alerts!'
    else:
        subject = f'Welcome to Partnerships Careers - {label} Job Alerts!'
    context = {
        'frequency': frequency,
        'frequency_label': label,
        'year': timezone.now().year,
        **alert_links(alert_id, email),
    }
    return send_email(email, subject, 'alerts/emails/welcome.html', context)


def send_frequency_updated_email(alert_id, email, frequency):
    context = {
        'frequency': frequency,
        'frequency_label': FREQUENCY_LABELS[frequency],
        **alert_links(alert_id, email),
    }
    return send_email(email, 'Job Alert Preferences Updated', 'alerts/emails/frequency_updated.html', context)
