# apps/payments/gateway.py
import logging

import stripe

from core.exceptions import require_setting

logger = logging.getLogger(__name__)


def get_stripe():
    """The ``stripe`` module with the secret key applied."""
    stripe.api_key = require_setting('STRIPE_SECRET_KEY')
    return stripe


def cancel_subscription_quietly(subscription_id):
    """Cancel a subscription, logging instead of raising when Stripe refuses."""
    if not subscription_id:
        return False
    try:
        get_stripe().Subscription.cancel(subscription_id)
        logger.info(f"Cancelled Stripe subscription {subscription_id}")
        return True
    except stripe.StripeError as e:
        logger.error(f"Error canceling Stripe subscription {subscription_id}: {str(e)}")
        return False
