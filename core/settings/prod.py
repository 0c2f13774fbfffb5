from .base import *
from decouple import config, Csv

DEBUG = False
ALLOWED_HOSTS = config("DJANGO_ALLOWED_HOSTS", cast=Csv(), default="*.run.app")

SECRET_KEY = config("SECRET_KEY")
SITE_URL = config("SITE_URL", default="https://partnerships-careers.vercel.app")

# Security - Production hardened
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SECURE_CONTENT_TYPE_NOSNIFF = True

# GCP Production Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'stackdriver': {
            'class': 'google.cloud.logging.handlers.StructuredLogHandler',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['stackdriver'],
            'level': 'WARNING',
            'propagate': False,
        },
        'apps': {
            'handlers': ['stackdriver'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}
