from django.apps import AppConfig


class TrackingConfig(AppConfig):
    name = 'apps.tracking'
    label = 'tracking'
    verbose_name = 'View and click tracking'
