"""
WSGI config for the POS dashboard gateway.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'posdash.config.settings')

application = get_wsgi_application()
