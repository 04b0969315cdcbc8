"""
Deployed agency site behind an HTTPS load balancer.

Server errors are mailed to ADMINS, a comma-separated list of addresses,
sent from the reservations sender address.
"""
from .base import *

DEBUG = False

ADMINS = [(email, email) for email in config('ADMINS', default='', cast=Csv())]
SERVER_EMAIL = DEFAULT_FROM_EMAIL

SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
USE_X_FORWARDED_HOST = True

# SSL terminates at the load balancer
SECURE_SSL_REDIRECT = False
SECURE_HSTS_SECONDS = config('SECURE_HSTS_SECONDS', default=31536000, cast=int)
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
X_FRAME_OPTIONS = 'DENY'
SECURE_CONTENT_TYPE_NOSNIFF = True

# Invoice PDFs and booking confirmations link back here, so it must be https
SITE_URL = config('SITE_URL', default='https://autoloc.fr')

LOGGING['handlers']['mail_admins'] = {
    'class': 'django.utils.log.AdminEmailHandler',
    'level': 'ERROR',
}
LOGGING['loggers']['django.request'] = {
    'handlers': ['console', 'mail_admins'],
    'level': 'ERROR',
    'propagate': False,
}
