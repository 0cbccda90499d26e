# ==================== NOTIFICATIONS/SERVICES.PY ====================
import logging
from django.conf import settings
from django.db import DatabaseError, transaction

from .models import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    """Append-only notification records for session events"""

    @staticmethod
    def emit(user, notification_type, title, message, parking_lot=None, session=None):
        """Persist one notification and queue its email delivery.

        Called after the session and lot changes have committed. A failure
        here is logged and reported as None; it never undoes the state
        change that triggered it.
        """
        try:
            with transaction.atomic():
                notification = Notification.objects.create(
                    user=user,
                    type=notification_type,
                    title=title,
                    message=message,
                    metadata={
                        'parkingLot': parking_lot.id if parking_lot else None,
                        'session': session.id if session else None,
                    },
                )
        except DatabaseError as e:
            logger.error(f"Error creating {notification_type} notification for user {user.pk}: {str(e)}")
            return None

        if settings.NOTIFICATION_EMAIL_ENABLED and user.email:
            from .tasks import deliver_notification_email
            transaction.on_commit(lambda: deliver_notification_email.delay(notification.id), robust=True)

        logger.info(f"Notification {notification.id} ({notification_type}) recorded for user {user.pk}")
        return notification
