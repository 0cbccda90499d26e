# ==================== PARKING/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import ParkingLot


class ParkingLotSerializer(serializers.ModelSerializer):
    """Lot as the mobile client sees it (camelCase keys)"""
    totalSpots = serializers.IntegerField(source='total_spots', read_only=True)
    occupiedSpots = serializers.IntegerField(source='occupied_spots', read_only=True)
    availableSpots = serializers.IntegerField(source='available_spots', read_only=True)
    pricePerHour = serializers.DecimalField(source='price_per_hour', max_digits=10, decimal_places=2,
                                            coerce_to_string=False, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    distance = serializers.SerializerMethodField()

    class Meta:
        model = ParkingLot
        fields = ['id', 'name', 'address', 'lat', 'lon', 'type', 'status', 'totalSpots',
                  'occupiedSpots', 'availableSpots', 'pricePerHour', 'createdAt', 'distance']

    def get_distance(self, obj):
        """Distance in km, present only on proximity-sorted listings"""
        distance = getattr(obj, 'distance', None)
        return round(distance, 3) if distance is not None else None
