# apps/payments/views.py
import json
import logging

import stripe
from django.conf import settings
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.exceptions import error_payload, first_error, require_setting
from apps.alerts.repository import JobAlertRepository
from apps.listings.repository import JobRepository
from .gateway import get_stripe
from .serializers import CheckoutSerializer, ConfirmPaymentSerializer, PaymentIntentSerializer

logger = logging.getLogger(__name__)


@api_view(['POST', 'OPTIONS'])
def create_checkout(request):
    """Stripe Checkout Session for featuring a job listing"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = CheckoutSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    try:
        client = get_stripe()
        price_id = require_setting('STRIPE_PRICE_ID')
        site_url = settings.SITE_URL
        session = client.checkout.Session.create(
            payment_method_types=['card'],
            line_items=[{'price': price_id, 'quantity': 1}],
            mode='payment',
            success_url=f"{site_url}?payment=success&session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{site_url}?payment=cancelled",
            metadata={
                'jobId': data['jobId'],
                'employerId': data['employerId'],
                'jobTitle': data['jobTitle'],
            },
            client_reference_id=data['jobId'],
        )
        logger.info(f"Checkout session {session.id} created for job {data['jobId']}")
        return Response({'sessionId': session.id, 'url': session.url})
    except Exception as e:
        logger.error(f"Error creating checkout session: {str(e)}")
        return Response(error_payload(e), status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST', 'OPTIONS'])
def create_payment_intent(request):
    """PaymentIntent carrying the job to publish once paid"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = PaymentIntentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    try:
        intent = get_stripe().PaymentIntent.create(
            amount=settings.STRIPE_AMOUNT,
            currency='usd',
            metadata={
                'type': 'new_job',
                'employerId': data['employerId'],
                'jobData': json.dumps(data['jobData']),
            },
            automatic_payment_methods={'enabled': True},
        )
        return Response({'clientSecret': intent.client_secret, 'paymentIntentId': intent.id})
    except Exception as e:
        logger.error(f"Error creating payment intent: {str(e)}")
        return Response(error_payload(e), status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST', 'OPTIONS'])
def confirm_payment(request):
    """Check a PaymentIntent succeeded and hand its job data back to the client"""
    if request.method == 'OPTIONS':
        return Response(status=status.HTTP_200_OK)

    serializer = ConfirmPaymentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)
    intent_id = serializer.validated_data['paymentIntentId']

    try:
        intent = get_stripe().PaymentIntent.retrieve(intent_id)
        if intent.status != 'succeeded':
            return Response({'error': 'Payment not completed'}, status=status.HTTP_400_BAD_REQUEST)

        metadata = intent.metadata
        return Response({
            'success': True,
            'paymentIntentId': intent_id,
            'jobData': json.loads(metadata['jobData']),
            'employerId': metadata['employerId'],
            'message': 'Payment confirmed',
        })
    except Exception as e:
        logger.error(f"Error confirming payment {intent_id}: {str(e)}")
        return Response(error_payload(e), status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@csrf_exempt
def stripe_webhook(request):
    """
    Stripe event receiver.

    A plain Django view: the signature covers the exact request bytes, so the
    body must not pass through DRF's parsers first.
    """
    if request.method != 'POST':
        return JsonResponse({'error': 'Method not allowed'}, status=405)

    try:
        webhook_secret = require_setting('STRIPE_WEBHOOK_SECRET')
        client = get_stripe()
    except Exception as e:
        logger.error(f"Stripe webhook is not configured: {str(e)}")
        return JsonResponse(error_payload(e), status=500)

    signature = request.headers.get('Stripe-Signature', '')
    try:
        event = client.Webhook.construct_event(request.body, signature, webhook_secret)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.error(f"Webhook signature verification failed: {str(e)}")
        return HttpResponse(f"Webhook Error: {str(e)}", status=400, content_type='text/plain')

    event_type = event.get('type')
    logger.info(f"Stripe event {event.get('id')} received: {event_type}")

    if event_type == 'checkout.session.completed':
        session = event['data']['object']
        try:
            handle_checkout_completed(session)
        except Exception as e:
            logger.error(f"Error updating Firestore for session {session.get('id')}: {str(e)}")
            return JsonResponse(error_payload(e, error='Failed to update database'), status=500)

    return JsonResponse({'received': True})


def handle_checkout_completed(session):
    metadata = session.get('metadata') or {}

    job_id = metadata.get('jobId')
    if job_id:
        JobRepository().mark_featured(
            job_id,
            employer_id=metadata.get('employerId'),
            amount=session.get('amount_total'),
        )

    if metadata.get('type') == 'realtime_alerts' and metadata.get('alertId'):
        JobAlertRepository().activate_realtime(
            metadata['alertId'],
            customer_id=session.get('customer'),
            subscription_id=session.get('subscription'),
        )
