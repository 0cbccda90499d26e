from django.core import mail
from django.test import TestCase, override_settings

from notifications.models import Notification
from notifications.services import NotificationService
from notifications.tasks import deliver_notification_email
from .utils import make_lot, make_user


class NotificationTestCase(TestCase):
    def setUp(self):
        self.user = make_user('driver1')
        self.lot = make_lot()

    def test_emit_records_metadata(self):
        notification = NotificationService.emit(
            self.user, Notification.TYPE_CHECKIN, 'Check-in Successful', 'Recorded.', parking_lot=self.lot
        )
        self.assertEqual(notification.metadata, {'parkingLot': self.lot.id, 'session': None})
        self.assertFalse(notification.is_read)

    @override_settings(NOTIFICATION_EMAIL_ENABLED=True)
    def test_email_queued_after_commit(self):
        with self.captureOnCommitCallbacks() as callbacks:
            NotificationService.emit(self.user, Notification.TYPE_BOOKING, 'Booking Canceled', 'Canceled.')
        self.assertEqual(len(callbacks), 1)

    def test_email_not_queued_when_disabled(self):
        with self.captureOnCommitCallbacks() as callbacks:
            NotificationService.emit(self.user, Notification.TYPE_BOOKING, 'Booking Canceled', 'Canceled.')
        self.assertEqual(callbacks, [])

    def test_deliver_sends_email(self):
        notification = Notification.objects.create(
            user=self.user, type=Notification.TYPE_CHECKOUT, title='Check-out Successful', message='Total: NPR 100.'
        )
        self.assertTrue(deliver_notification_email(notification.id))
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, 'Check-out Successful')
        self.assertEqual(mail.outbox[0].to, ['driver1@test.com'])

    def test_deliver_missing_notification(self):
        self.assertFalse(deliver_notification_email(999999))
        self.assertEqual(mail.outbox, [])
