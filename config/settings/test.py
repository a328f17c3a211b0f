# config/settings/test.py
from .base import *  # noqa

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Never call the real geocoder from tests; tests that need it patch requests.
GEOCODING = {**GEOCODING, "ENABLED": False}

LOGGING["loggers"]["testimony_core"]["level"] = "DEBUG"
# let pytest's caplog see application records
LOGGING["loggers"]["testimony_core"]["propagate"] = True
