# ============================= PARKING VIEWS =============================
from rest_framework import viewsets, permissions
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from utils.distance_calculator import DistanceCalculator
from .models import ParkingLot
from .serializers import ParkingLotSerializer
from .filters import ParkingLotFilter


class ParkingLotViewSet(viewsets.GenericViewSet):
    """Public lot listing, nearest first when the caller sends coordinates"""

    queryset = ParkingLot.objects.all()
    serializer_class = ParkingLotSerializer
    permission_classes = [permissions.AllowAny]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ParkingLotFilter

    def list(self, request):
        """List parking lots
        Query params: lat, lon (optional, both required for sorting), type, status, price_min, price_max

        Example: /api/v1/parking/lots?lat=27.7172&lon=85.3240
        """
        lots = list(self.filter_queryset(self.get_queryset()))

        lat = request.query_params.get('lat')
        lon = request.query_params.get('lon')
        if lat and lon:
            try:
                latitude, longitude = DistanceCalculator.parse_coordinates(lat, lon)
            except ValueError:
                raise ValidationError('Invalid latitude or longitude')
            lots = DistanceCalculator.sort_by_distance(lots, latitude, longitude)

        serializer = self.get_serializer(lots, many=True)
        return Response({'success': True, 'data': serializer.data})
