from django.urls import path
from . import views

urlpatterns = [
    path('subscribe-job-alerts', views.subscribe_job_alerts, name='subscribe-job-alerts'),
    path('update-alert-frequency', views.update_alert_frequency, name='update-alert-frequency'),
    path('unsubscribe', views.unsubscribe, name='unsubscribe'),
    path('create-realtime-checkout', views.create_realtime_checkout, name='create-realtime-checkout'),
    path('create-realtime-subscription', views.create_realtime_subscription, name='create-realtime-subscription'),
]
