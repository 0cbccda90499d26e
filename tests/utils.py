from decimal import Decimal
from django.contrib.auth import get_user_model

from parking.models import ParkingLot

User = get_user_model()


def make_user(username='driver1', role='user', **extra):
    return User.objects.create_user(
        username=username,
        email=f'{username}@test.com',
        password='testpass123',
        role=role,
        **extra
    )


def make_lot(name='Test Parking', total_spots=5, occupied_spots=0, price_per_hour=Decimal('100'),
             lat=27.7172, lon=85.3240, type='car'):
    return ParkingLot.objects.create(
        name=name,
        address='Test Address',
        lat=lat,
        lon=lon,
        type=type,
        total_spots=total_spots,
        occupied_spots=occupied_spots,
        price_per_hour=price_per_hour,
    )
