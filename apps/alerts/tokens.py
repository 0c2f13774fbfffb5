# apps/alerts/tokens.py
import base64
import binascii


class InvalidToken(ValueError):
    pass


def make_unsubscribe_token(alert_id, email):
    """``base64(alertId:email)``; the e-mail is expected already normalized."""
    return base64.b64encode(f"{alert_id}:{email}".encode('utf-8')).decode('ascii')


def read_unsubscribe_token(token):
    """Return ``(alert_id, email)``, splitting on the first ``:``."""
    # a raw "+" in a query string arrives as a space
    token = (token or '').strip().replace(' ', '+')
    try:
        decoded = base64.b64decode(token, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidToken('Invalid token format') from e

    alert_id, sep, email = decoded.partition(':')
    if not sep or not alert_id or not email:
        raise InvalidToken('Invalid token format')
    return alert_id, email
