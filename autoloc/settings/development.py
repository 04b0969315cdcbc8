"""
Local settings for working on the agency site.

Runs against SQLite unless DATABASE_URL points elsewhere, prints booking and
invoice emails to the console and logs the rental apps at DEBUG.
"""
from .base import *

DEBUG = True

if not config('DATABASE_URL', default=''):
    DATABASES['default'] = dj_database_url.parse(f"sqlite:///{BASE_DIR / 'db.sqlite3'}")

try:
    import debug_toolbar
    INSTALLED_APPS += ['debug_toolbar']
    MIDDLEWARE.insert(1, 'debug_toolbar.middleware.DebugToolbarMiddleware')
except ImportError:
    pass

INTERNAL_IPS = ['127.0.0.1']

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'
SITE_URL = config('SITE_URL', default='http://127.0.0.1:8000')

# Lockouts get in the way of switching between the seeded accounts
AXES_ENABLED = False

LOGGING['loggers']['apps'] = {'handlers': ['console'], 'level': 'DEBUG', 'propagate': False}

STORAGES = {**STORAGES, 'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'}}
