# ==================== NOTIFICATIONS/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
import logging

from .models import Notification

logger = logging.getLogger(__name__)


@shared_task
def deliver_notification_email(notification_id):
    """Email a recorded notification to its user"""
    try:
        notification = Notification.objects.select_related('user').get(id=notification_id)
    except Notification.DoesNotExist:
        logger.warning(f"Notification {notification_id} vanished before delivery")
        return False

    if not notification.user.email:
        return False

    send_mail(
        notification.title,
        notification.message,
        settings.DEFAULT_FROM_EMAIL,
        [notification.user.email],
        fail_silently=False,
    )
    logger.info(f"Notification {notification_id} emailed to {notification.user.email}")
    return True
