"""
WSGI config for the Django application.

WSGI serves the HTTP API only. The chat socket (/ws/chat/) needs the ASGI
application in config/asgi.py, so production runs under an ASGI server and
this entry point exists for management tooling and plain HTTP deployments.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
