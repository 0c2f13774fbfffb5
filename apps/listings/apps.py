from django.apps import AppConfig


class ListingsConfig(AppConfig):
    name = 'apps.listings'
    label = 'listings'
    verbose_name = 'Job listings'
