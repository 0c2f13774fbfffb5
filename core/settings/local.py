from .base import *  # noqa
from decouple import config

DEBUG = True
SECRET_KEY = config("SECRET_KEY", default="dev-only-not-secure")
ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

SITE_URL = config("SITE_URL", default="http://localhost:3000")

# Counters live in process memory unless a Sheety URL is forced for local runs
if config("LOCAL_USE_SHEETY", cast=bool, default=False):
    TRACKING_STORE = {
        "BACKEND": "apps.tracking.repositories.sheety.SheetyStore",
        "OPTIONS": {
            "base_url": SHEETY_API_URL,
            "token": SHEETY_TOKEN,
            "timeout": SHEETY_TIMEOUT,
        },
    }
else:
    TRACKING_STORE = {
        "BACKEND": "apps.tracking.repositories.memory.InMemoryTabularStore",
        "OPTIONS": {
            "atomic_increment": config("LOCAL_ATOMIC_STORE", cast=bool, default=False),
        },
    }

LOGGING["loggers"]["apps"]["level"] = "DEBUG"
