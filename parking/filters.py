# ============================= PARKING/FILTERS.PY =============================
import django_filters
from .models import ParkingLot


class ParkingLotFilter(django_filters.FilterSet):
    """Optional filters on the lot listing"""

    price_min = django_filters.NumberFilter(
        field_name='price_per_hour',
        lookup_expr='gte',
        label='Minimum Price Per Hour'
    )
    price_max = django_filters.NumberFilter(
        field_name='price_per_hour',
        lookup_expr='lte',
        label='Maximum Price Per Hour'
    )

    class Meta:
        model = ParkingLot
        fields = {
            'type': ['exact'],
            'status': ['exact'],
        }
