from django.urls import path
from . import views

urlpatterns = [
    path('create-checkout', views.create_checkout, name='create-checkout'),
    path('create-payment-intent', views.create_payment_intent, name='create-payment-intent'),
    path('confirm-payment', views.confirm_payment, name='confirm-payment'),
    path('stripe-webhook', views.stripe_webhook, name='stripe-webhook'),
]
