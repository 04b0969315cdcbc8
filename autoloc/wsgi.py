"""
WSGI config for the AutoLoc car rental site.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'autoloc.settings.production')

application = get_wsgi_application()
