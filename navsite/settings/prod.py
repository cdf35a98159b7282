# navsite/settings/prod.py
from .base import *

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME", "navsite_db"),
        "USER": os.getenv("DB_USER", "navsite"),
        "PASSWORD": os.getenv("DB_PASSWORD"),
        "HOST": os.getenv("DB_HOST", "127.0.0.1"),
        "PORT": os.getenv("DB_PORT", "5432"),
        "CONN_MAX_AGE": int(os.getenv("DB_CONN_MAX_AGE", "60")),
    }
}

SITE_DOMAIN = os.getenv('SITE_DOMAIN')
if not SITE_DOMAIN:
    raise RuntimeError("SITE_DOMAIN is not set in production.")

ALLOWED_HOSTS = [SITE_DOMAIN, "127.0.0.1"]
CSRF_TRUSTED_ORIGINS = [f"https://{SITE_DOMAIN}"]

# Production always warms the public tree after an authoring write
NAVIGATION["WARM_AFTER_INVALIDATE"] = env_flag("NAVIGATION_WARM_AFTER_INVALIDATE", default=True)
