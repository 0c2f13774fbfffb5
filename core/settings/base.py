from pathlib import Path

from decouple import config, Csv

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = config("SECRET_KEY", default="dev-only-not-secure")
DEBUG = config("DEBUG", cast=bool, default=False)
ALLOWED_HOSTS = config("DJANGO_ALLOWED_HOSTS", cast=Csv(), default="localhost,127.0.0.1")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "corsheaders",
    "rest_framework",
    "drf_spectacular",
    "apps.tracking",
    "apps.payments",
    "apps.alerts",
    "apps.accounts",
    "apps.listings",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "core.urls"
WSGI_APPLICATION = "core.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {"context_processors": []},
    },
]

# Nothing is persisted locally: every record lives in Sheety, Firestore or Stripe.
DATABASES = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Public serverless-style endpoints: no sessions, no auth.
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
        "rest_framework.parsers.MultiPartParser",
    ],
    "EXCEPTION_HANDLER": "core.exceptions.api_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Partnerships Careers API",
    "DESCRIPTION": "Tracking, payments, job alerts and listing tools for the job board",
    "VERSION": "1.0.0",
}

# CORS
CORS_ALLOW_ALL_ORIGINS = True
CORS_ALLOW_METHODS = ("GET", "POST", "OPTIONS")
CORS_ALLOW_HEADERS = ("content-type", "stripe-signature")

SITE_URL = config("SITE_URL", default="http://localhost:3000")

# Spreadsheet datastore (Sheety) used by the view/click counters
SHEETY_API_URL = config(
    "SHEETY_API_URL",
    default="https://api.sheety.co/4ce55d1d0ad684ea192b042bd2f3b53d/partnershipsCareersDb",
)
SHEETY_TOKEN = config("SHEETY_TOKEN", default="")
SHEETY_TIMEOUT = config("SHEETY_TIMEOUT", cast=int, default=10)

TRACKING_STORE = {
    "BACKEND": "apps.tracking.repositories.sheety.SheetyStore",
    "OPTIONS": {
        "base_url": SHEETY_API_URL,
        "token": SHEETY_TOKEN,
        "timeout": SHEETY_TIMEOUT,
    },
}
TRACKING_ATOMIC_INCREMENTS = config("TRACKING_ATOMIC_INCREMENTS", cast=bool, default=True)

# Stripe
STRIPE_SECRET_KEY = config("STRIPE_SECRET_KEY", default="")
STRIPE_WEBHOOK_SECRET = config("STRIPE_WEBHOOK_SECRET", default="")
STRIPE_PRICE_ID = config("STRIPE_PRICE_ID", default="")
STRIPE_AMOUNT = config("STRIPE_AMOUNT", cast=int, default=9900)
STRIPE_REALTIME_ALERTS_PRICE_ID = config(
    "STRIPE_REALTIME_ALERTS_PRICE_ID", default="price_1SW0FACaW2Du37V1Xwv0hG6w"
)
FEATURED_LISTING_DAYS = config("FEATURED_LISTING_DAYS", cast=int, default=30)

# Firebase Admin (Firestore + Auth)
FIREBASE_PROJECT_ID = config("FIREBASE_PROJECT_ID", default="")
FIREBASE_CLIENT_EMAIL = config("FIREBASE_CLIENT_EMAIL", default="")
FIREBASE_PRIVATE_KEY = config("FIREBASE_PRIVATE_KEY", default="")
FIREBASE_SERVICE_ACCOUNT_FILE = config("FIREBASE_SERVICE_ACCOUNT_FILE", default="")

# Resend
RESEND_API_KEY = config("RESEND_API_KEY", default="")
ALERTS_FROM_EMAIL = config(
    "ALERTS_FROM_EMAIL", default="Partnerships Careers <alerts@partnershipscareers.com>"
)

# OpenAI
OPENAI_API_KEY = config("OPENAI_API_KEY", default="")
OPENAI_MODEL = config("OPENAI_MODEL", default="gpt-4o-mini")

# LinkedIn OAuth
LINKEDIN_CLIENT_ID = config("LINKEDIN_CLIENT_ID", default="")
LINKEDIN_CLIENT_SECRET = config("LINKEDIN_CLIENT_SECRET", default="")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
        },
        "apps": {
            "handlers": ["console"],
            "level": config("APP_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
    },
}
