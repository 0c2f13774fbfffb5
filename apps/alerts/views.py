# apps/alerts/views.py
import logging

from django.conf import settings
from django.shortcuts import render
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.exceptions import error_payload, first_error, require_setting
from apps.payments.gateway import cancel_subscription_quietly, get_stripe
from . import emails
from .repository import JobAlertRepository, normalize_email, now_iso
from .serializers import AlertEmailSerializer, AlertPreferenceSerializer
from .tokens import InvalidToken, read_unsubscribe_token

logger = logging.getLogger(__name__)


def _invalid(serializer):
    return Response({'error': first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST', 'OPTIONS'])
def subscribe_job_alerts(request):
    """Daily or weekly alert signup; realtime goes through checkout instead"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = AlertPreferenceSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)
    email = serializer.validated_data['email']
    frequency = serializer.validated_data['frequency']

    if frequency == 'realtime':
        return Response({
            'success': True,
            'requiresCheckout': True,
            'message': 'Please complete checkout to activate realtime alerts',
        })

    try:
        alerts = JobAlertRepository()
        alert = alerts.find_by_email(email)
        timestamp = now_iso()

        if alert is not None:
            if alert.frequency == 'realtime':
                cancel_subscription_quietly(alert.subscription_id)
            alerts.update(alert.id, {
                'frequency': frequency,
                'stripeSubscriptionId': None,
                'updatedAt': timestamp,
                'isActive': True,
            })
        else:
            alert = alerts.create({
                'email': email,
                'frequency': frequency,
                'subscribedAt': timestamp,
                'updatedAt': timestamp,
                'isActive': True,
            })

        emails.send_welcome_email(alert.id, email, frequency)
        return Response({
            'success': True,
            'message': 'Subscription created successfully',
            'alertId': alert.id,
            'subscriptionId': None,
        })
    except Exception as e:
        logger.error(f"Error subscribing {email} to job alerts: {str(e)}")
        return Response(error_payload(e, error='Failed to subscribe to job alerts'),
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST', 'OPTIONS'])
def update_alert_frequency(request):
    """Change frequency, starting or cancelling the realtime subscription as needed"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = AlertPreferenceSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)
    email = serializer.validated_data['email']
    frequency = serializer.validated_data['frequency']

    try:
        alerts = JobAlertRepository()
        alert = alerts.find_by_email(email)
        if alert is None:
            return Response({'error': 'Job alert not found'}, status=status.HTTP_404_NOT_FOUND)

        customer_id = alert.customer_id
        subscription_id = alert.subscription_id

        if frequency == 'realtime' and alert.frequency != 'realtime':
            client = get_stripe()
            price_id = require_setting('STRIPE_REALTIME_ALERTS_PRICE_ID')
            if not customer_id:
                customer = client.Customer.create(email=email, metadata={'alertId': alert.id})
                customer_id = customer.id
            subscription = client.Subscription.create(
                customer=customer_id,
                items=[{'price': price_id}],
                metadata={'alertId': alert.id, 'email': email},
            )
            subscription_id = subscription.id
        elif frequency != 'realtime' and alert.frequency == 'realtime' and subscription_id:
            get_stripe().Subscription.cancel(subscription_id)
            subscription_id = None

        alerts.update(alert.id, {
            'frequency': frequency,
            'stripeCustomerId': customer_id,
            'stripeSubscriptionId': subscription_id,
            'updatedAt': now_iso(),
        })

        emails.send_frequency_updated_email(alert.id, email, frequency)
        return Response({
            'success': True,
            'message': 'Alert frequency updated successfully',
            'frequency': frequency,
            'subscriptionId': subscription_id or None,
        })
    except Exception as e:
        logger.error(f"Error updating alert frequency for {email}: {str(e)}")
        return Response(error_payload(e, error='Failed to update alert frequency'),
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'POST'])
def unsubscribe(request):
    """HTML page for e-mail links (GET), JSON for the web client (POST)"""
    if request.method == 'GET':
        return _unsubscribe_page(request)

    serializer = AlertEmailSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)
    email = serializer.validated_data['email']

    try:
        alerts = JobAlertRepository()
        alert = alerts.find_by_email(email)
        if alert is None:
            return Response({'error': 'Job alert not found'}, status=status.HTTP_404_NOT_FOUND)

        cancel_subscription_quietly(alert.subscription_id)
        alerts.deactivate(alert.id)
        return Response({'success': True, 'message': 'Successfully unsubscribed'})
    except Exception as e:
        logger.error(f"Error unsubscribing {email}: {str(e)}")
        return Response(error_payload(e, error='Failed to unsubscribe'),
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _unsubscribe_page(request):
    token = request.query_params.get('token')
    if not token:
        return render(request, 'alerts/unsubscribe_invalid.html', status=400)

    context = {'site_url': settings.SITE_URL}
    try:
        alert_id, email = read_unsubscribe_token(token)
        alerts = JobAlertRepository()
        alert = alerts.get(alert_id)
        if alert is None or normalize_email(alert.email) != normalize_email(email):
            raise InvalidToken('Alert not found')

        cancel_subscription_quietly(alert.subscription_id)
        alerts.deactivate(alert.id)
    except Exception as e:
        logger.error(f"Error processing unsubscribe: {str(e)}")
        return render(request, 'alerts/unsubscribe_error.html', context, status=400)

    logger.info(f"Alert {alert_id} unsubscribed via e-mail link")
    return render(request, 'alerts/unsubscribe_success.html', context)


@api_view(['POST', 'OPTIONS'])
def create_realtime_checkout(request):
    """Subscription-mode Checkout Session for paid realtime alerts"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = AlertEmailSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)
    email = serializer.validated_data['email']

    try:
        client = get_stripe()
        price_id = require_setting('STRIPE_REALTIME_ALERTS_PRICE_ID')
        alert = JobAlertRepository().find_or_create_pending(email)

        site_url = settings.SITE_URL
        session = client.checkout.Session.create(
            payment_method_types=['card'],
            line_items=[{'price': price_id, 'quantity': 1}],
            mode='subscription',
            customer_email=email,
            success_url=f"{site_url}?alert_subscription=success&alert_id={alert.id}",
            cancel_url=f"{site_url}?alert_subscription=cancelled",
            metadata={'type': 'realtime_alerts', 'email': email, 'alertId': alert.id},
            subscription_data={'metadata': {'email': email, 'alertId': alert.id}},
        )
        return Response({'sessionId': session.id, 'url': session.url})
    except Exception as e:
        logger.error(f"Error creating realtime checkout for {email}: {str(e)}")
        return Response(error_payload(e, error='Failed to create checkout session'),
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST', 'OPTIONS'])
def create_realtime_subscription(request):
    """Incomplete subscription whose first payment is confirmed by an embedded form"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = AlertEmailSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer)
    email = serializer.validated_data['email']

    try:
        client = get_stripe()
        price_id = require_setting('STRIPE_REALTIME_ALERTS_PRICE_ID')
        if not price_id.startswith('price_'):
            raise ValueError(f"Invalid Stripe price ID format: {price_id}")

        alerts = JobAlertRepository()
        alert = alerts.find_or_create_pending(email)

        customer_id = alert.customer_id
        if not customer_id:
            customer = client.Customer.create(email=email, metadata={'alertId': alert.id, 'email': email})
            customer_id = customer.id
            alerts.update(alert.id, {'stripeCustomerId': customer_id, 'updatedAt': now_iso()})

        metadata = {'type': 'realtime_alerts', 'email': email, 'alertId': alert.id}
        subscription = client.Subscription.create(
            customer=customer_id,
            items=[{'price': price_id}],
            payment_behavior='default_incomplete',
            payment_settings={
                'save_default_payment_method': 'on_subscription',
                'payment_method_types': ['card'],
            },
            expand=['latest_invoice.payment_intent'],
            metadata=metadata,
        )

        intent = subscription.latest_invoice.payment_intent if subscription.latest_invoice else None
        if not intent or not intent.client_secret:
            raise ValueError('Failed to create payment intent for subscription')

        client.PaymentIntent.modify(intent.id, metadata={**metadata, 'subscriptionId': subscription.id})

        return Response({
            'clientSecret': intent.client_secret,
            'subscriptionId': subscription.id,
            'customerId': customer_id,
            'alertId': alert.id,
        })
    except Exception as e:
        logger.error(f"Error creating realtime subscription for {email}: {str(e)}")
        return Response(error_payload(e, error='Failed to create subscription'),
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)
