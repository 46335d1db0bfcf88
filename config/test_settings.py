from .settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

TIME_ZONE = "UTC"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

Q_CLUSTER = {**Q_CLUSTER, "sync": True}  # noqa: F405

LOGGING["loggers"]["competitions"]["level"] = "WARNING"  # noqa: F405
