from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator
from parking.models import ParkingLot
from utils.exceptions import InvalidSessionTransition


class ParkingSession(models.Model):
    STATUS_BOOKED = 'booked'
    STATUS_ACTIVE = 'active'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELED = 'canceled'

    STATUS_CHOICES = (
        (STATUS_BOOKED, 'Booked'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELED, 'Canceled'),
    )
    VEHICLE_TYPE_CHOICES = (
        ('car', 'Car'),
        ('bike', 'Bike'),
    )

    # Allowed moves; completed and canceled are terminal
    TRANSITIONS = {
        STATUS_BOOKED: (STATUS_ACTIVE, STATUS_CANCELED),
        STATUS_ACTIVE: (STATUS_COMPLETED,),
        STATUS_COMPLETED: (),
        STATUS_CANCELED: (),
    }

    # Relations
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='parking_sessions')
    parking_lot = models.ForeignKey(ParkingLot, on_delete=models.CASCADE, related_name='sessions')

    # Session details
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    vehicle_type = models.CharField(max_length=10, choices=VEHICLE_TYPE_CHOICES, default='car')
    slots = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    start_time = models.DateTimeField(null=True, blank=True)
    end_time = models.DateTimeField(null=True, blank=True)

    # Billing
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'status'], name='session_user_status_idx'),
            models.Index(fields=['user', 'parking_lot', 'status'], name='session_user_lot_status_idx'),
        ]

    def __str__(self):
        return f"Session {self.id} - {self.user} at {self.parking_lot.name} ({self.status})"

    @property
    def is_terminal(self):
        return not self.TRANSITIONS[self.status]

    def transition_to(self, new_status):
        """Move to `new_status`, refusing anything the lifecycle does not allow"""
        if new_status not in self.TRANSITIONS[self.status]:
            raise InvalidSessionTransition(
                f"Cannot move parking session {self.id} from {self.status} to {new_status}"
            )
        self.status = new_status
