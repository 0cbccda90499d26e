# parking/models.py

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator


def resolve_lot_status(occupied_spots, total_spots):
    """A lot is full once its occupied counter reaches capacity."""
    return ParkingLot.STATUS_FULL if occupied_spots >= total_spots else ParkingLot.STATUS_AVAILABLE


class ParkingLot(models.Model):
    STATUS_AVAILABLE = 'available'
    STATUS_FULL = 'full'

    TYPE_CHOICES = (
        ('car', 'Car'),
        ('bike', 'Bike'),
    )
    STATUS_CHOICES = (
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_FULL, 'Full'),
    )

    name = models.CharField(max_length=200)
    address = models.CharField(max_length=500, blank=True)
    lat = models.FloatField(validators=[MinValueValidator(-90), MaxValueValidator(90)])
    lon = models.FloatField(validators=[MinValueValidator(-180), MaxValueValidator(180)])

    # Capacity
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='car', db_index=True)
    total_spots = models.PositiveIntegerField()
    occupied_spots = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_AVAILABLE, db_index=True)

    # Pricing, whole currency units per started hour
    price_per_hour = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['created_at'], name='parking_lot_created_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.occupied_spots}/{self.total_spots})"

    def save(self, *args, **kwargs):
        self.status = resolve_lot_status(self.occupied_spots, self.total_spots)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'status' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['status']
        super().save(*args, **kwargs)

    @property
    def available_spots(self):
        return max(0, self.total_spots - self.occupied_spots)
