import hashlib
import hmac
import json
import time
from unittest import mock

import stripe
from django.test import SimpleTestCase, override_settings


def signed_header(payload, secret='whsec_test'):
    timestamp = int(time.time())
    signature = hmac.new(secret.encode(), f'{timestamp}.{payload}'.encode(), hashlib.sha256).hexdigest()
    return f't={timestamp},v1={signature}'


def checkout_event(metadata, **session):
    return json.dumps({
        'id': 'evt_1',
        'object': 'event',
        'type': 'checkout.session.completed',
        'data': {'object': {
            'id': 'cs_test_1',
            'object': 'checkout.session',
            'amount_total': 9900,
            'metadata': metadata,
            **session,
        }},
    })


class CheckoutTest(SimpleTestCase):
    def post(self, url, data):
        return self.client.post(url, data, content_type='application/json')

    @mock.patch('stripe.checkout.Session.create')
    def test_create_checkout(self, create):
        create.return_value = mock.Mock(id='cs_123', url='https://checkout.stripe.com/c/cs_123')

        response = self.post('/api/create-checkout', {
            'jobId': '42', 'jobTitle': 'Channel Director', 'employerId': 'emp_1',
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'sessionId': 'cs_123', 'url': 'https://checkout.stripe.com/c/cs_123'})
        kwargs = create.call_args.kwargs
        self.assertEqual(kwargs['mode'], 'payment')
        self.assertEqual(kwargs['line_items'], [{'price': 'price_featured_test', 'quantity': 1}])
        self.assertEqual(kwargs['metadata'], {'jobId': '42', 'employerId': 'emp_1', 'jobTitle': 'Channel Director'})
        self.assertEqual(kwargs['client_reference_id'], '42')
        self.assertTrue(kwargs['success_url'].startswith('https://jobs.example.com?payment=success'))
        self.assertIn('{CHECKOUT_SESSION_ID}', kwargs['success_url'])

    @mock.patch('stripe.checkout.Session.create')
    def test_missing_fields(self, create):
        response = self.post('/api/create-checkout', {'jobId': '42'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Missing required fields'})
        create.assert_not_called()

    @override_settings(STRIPE_SECRET_KEY='')
    @mock.patch('stripe.checkout.Session.create')
    def test_missing_secret_key_is_500(self, create):
        response = self.post('/api/create-checkout', {
            'jobId': '42', 'jobTitle': 'Channel Director', 'employerId': 'emp_1',
        })

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'STRIPE_SECRET_KEY is not configured')
        create.assert_not_called()

    @mock.patch('stripe.checkout.Session.create', side_effect=stripe.InvalidRequestError('No such price', 'price'))
    def test_stripe_error_is_500(self, create):
        response = self.post('/api/create-checkout', {
            'jobId': '42', 'jobTitle': 'Channel Director', 'employerId': 'emp_1',
        })

        self.assertEqual(response.status_code, 500)
        self.assertIn('No such price', response.json()['error'])


class PaymentIntentTest(SimpleTestCase):
    def post(self, url, data):
        return self.client.post(url, data, content_type='application/json')

    @mock.patch('stripe.PaymentIntent.create')
    def test_create_payment_intent(self, create):
        create.return_value = mock.Mock(id='pi_1', client_secret='pi_1_secret')
        job = {'title': 'Alliances Lead', 'company': 'Acme'}

        response = self.post('/api/create-payment-intent', {'jobData': job, 'employerId': 'emp_9'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'clientSecret': 'pi_1_secret', 'paymentIntentId': 'pi_1'})
        kwargs = create.call_args.kwargs
        self.assertEqual(kwargs['amount'], 9900)
        self.assertEqual(kwargs['currency'], 'usd')
        self.assertEqual(kwargs['metadata']['type'], 'new_job')
        self.assertEqual(json.loads(kwargs['metadata']['jobData']), job)

    def test_create_payment_intent_missing_job(self):
        response = self.post('/api/create-payment-intent', {'employerId': 'emp_9'})
        self.assertEqual(response.status_code, 400)

    @mock.patch('stripe.PaymentIntent.retrieve')
    def test_confirm_payment(self, retrieve):
        retrieve.return_value = mock.Mock(
            status='succeeded',
            metadata={'jobData': '{"title": "Alliances Lead"}', 'employerId': 'emp_9'},
        )

        response = self.post('/api/confirm-payment', {'paymentIntentId': 'pi_1'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            'success': True,
            'paymentIntentId': 'pi_1',
            'jobData': {'title': 'Alliances Lead'},
            'employerId': 'emp_9',
            'message': 'Payment confirmed',
        })

    @mock.patch('stripe.PaymentIntent.retrieve')
    def test_confirm_unpaid_intent(self, retrieve):
        retrieve.return_value = mock.Mock(status='requires_payment_method', metadata={})

        response = self.post('/api/confirm-payment', {'paymentIntentId': 'pi_1'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {'error': 'Payment not completed'})

    def test_confirm_without_id(self):
        response = self.post('/api/confirm-payment', {})
        self.assertEqual(response.json(), {'error': 'Missing paymentIntentId'})


@mock.patch('apps.payments.views.JobAlertRepository')
@mock.patch('apps.payments.views.JobRepository')
class StripeWebhookTest(SimpleTestCase):
    def deliver(self, payload, signature=None):
        return self.client.post(
            '/api/stripe-webhook', payload, content_type='application/json',
            HTTP_STRIPE_SIGNATURE=signature if signature is not None else signed_header(payload),
        )

    def test_bad_signature_writes_nothing(self, jobs, alerts):
        payload = checkout_event({'jobId': '42', 'employerId': 'emp_1'})

        response = self.deliver(payload, signature='t=1,v1=deadbeef')

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.content.decode().startswith('Webhook Error:'))
        jobs.assert_not_called()
        alerts.assert_not_called()

    def test_featured_job_checkout(self, jobs, alerts):
        payload = checkout_event({'jobId': '42', 'employerId': 'emp_1', 'jobTitle': 'Channel Director'})

        response = self.deliver(payload)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'received': True})
        jobs.return_value.mark_featured.assert_called_once_with('42', employer_id='emp_1', amount=9900)
        alerts.return_value.activate_realtime.assert_not_called()

    def test_realtime_alert_checkout(self, jobs, alerts):
        payload = checkout_event(
            {'type': 'realtime_alerts', 'alertId': 'alert_7', 'email': 'sam@example.com'},
            customer='cus_1', subscription='sub_1',
        )

        response = self.deliver(payload)

        self.assertEqual(response.status_code, 200)
        alerts.return_value.activate_realtime.assert_called_once_with(
            'alert_7', customer_id='cus_1', subscription_id='sub_1',
        )
        jobs.return_value.mark_featured.assert_not_called()

    def test_other_events_are_acknowledged(self, jobs, alerts):
        payload = json.dumps({'id': 'evt_2', 'object': 'event', 'type': 'invoice.paid',
                              'data': {'object': {'id': 'in_1', 'object': 'invoice'}}})

        response = self.deliver(payload)

        self.assertEqual(response.json(), {'received': True})
        jobs.assert_not_called()

    def test_firestore_failure_is_500(self, jobs, alerts):
        jobs.return_value.mark_featured.side_effect = RuntimeError('deadline exceeded')
        payload = checkout_event({'jobId': '42'})

        response = self.deliver(payload)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], 'Failed to update database')

    @override_settings(STRIPE_WEBHOOK_SECRET='')
    def test_missing_secret_is_configuration_error(self, jobs, alerts):
        response = self.deliver(checkout_event({'jobId': '42'}))

        self.assertEqual(response.status_code, 500)
        jobs.assert_not_called()

    def test_get_not_allowed(self, jobs, alerts):
        response = self.client.get('/api/stripe-webhook')
        self.assertEqual(response.status_code, 405)
