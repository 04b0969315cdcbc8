"""
Settings used by the pytest suite: in-memory SQLite, no external services.
"""
import os

os.environ.setdefault('SECRET_KEY', 'autoloc-test-secret-key')
os.environ.setdefault('DATABASE_URL', 'sqlite://:memory:')

from .base import *  # noqa: E402

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

STORAGES = {**STORAGES, 'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'}}
STATICFILES_DIRS = []

AXES_ENABLED = False

LOGGING['root']['level'] = 'WARNING'
