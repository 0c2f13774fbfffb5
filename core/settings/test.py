from .base import *  # noqa

DEBUG = False
SECRET_KEY = "test-secret-key"
ALLOWED_HOSTS = ["testserver", "localhost"]

SITE_URL = "https://jobs.example.com"

TRACKING_STORE = {
    "BACKEND": "apps.tracking.repositories.memory.InMemoryTabularStore",
    "OPTIONS": {},
}

STRIPE_SECRET_KEY = "sk_test_123"
STRIPE_WEBHOOK_SECRET = "whsec_test"
STRIPE_PRICE_ID = "price_featured_test"
STRIPE_REALTIME_ALERTS_PRICE_ID = "price_realtime_test"
RESEND_API_KEY = "re_test"
OPENAI_API_KEY = "sk-openai-test"
LINKEDIN_CLIENT_ID = "linkedin-client"
LINKEDIN_CLIENT_SECRET = "linkedin-secret"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "loggers": {
        "django": {"handlers": ["null"], "propagate": False},
        "apps": {"handlers": ["null"], "propagate": False},
    },
}
