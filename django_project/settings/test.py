from .base import *

DEBUG = False

ALLOWED_HOSTS = ["testserver"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

LOGGING["loggers"]["parking"]["level"] = "WARNING"
LOGGING["loggers"]["services"]["level"] = "WARNING"
