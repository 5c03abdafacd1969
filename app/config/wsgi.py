"""
WSGI config for the Django application.

Provided for traditional deployments (gunicorn, mod_wsgi); the ASGI entry
point in config/asgi.py serves the same application.

This file exposes the WSGI callable as a module-level variable named `application`.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
