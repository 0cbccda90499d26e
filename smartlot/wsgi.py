"""
WSGI config for the smartlot project.

Served with: gunicorn --bind 0.0.0.0:8000 smartlot.wsgi:application
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'smartlot.settings')

application = get_wsgi_application()
