# ==================== SMARTLOT/CELERY.PY ====================
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'smartlot.settings')

app = Celery('smartlot')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
