from django.conf import settings
from django.db import models


class Notification(models.Model):
    """User-facing event record; written once, never edited by the core"""
    TYPE_CHECKIN = 'checkin'
    TYPE_CHECKOUT = 'checkout'
    TYPE_BOOKING = 'booking'

    TYPE_CHOICES = (
        (TYPE_CHECKIN, 'Check-in'),
        (TYPE_CHECKOUT, 'Check-out'),
        (TYPE_BOOKING, 'Booking'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, db_index=True)
    title = models.CharField(max_length=200)
    message = models.TextField()
    metadata = models.JSONField(default=dict)  # {"parkingLot": 1, "session": 42}
    is_read = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.get_type_display()} for {self.user}: {self.title}"
