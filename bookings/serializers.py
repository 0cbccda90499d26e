# ==================== BOOKINGS/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import ParkingSession
from parking.serializers import ParkingLotSerializer

MISSING_BOOKING_FIELDS = 'parkingLotId, startTime and endTime are required'
INVALID_SLOTS = 'slots must be a positive whole number'
REQUIRED_ERRORS = {'required': MISSING_BOOKING_FIELDS, 'null': MISSING_BOOKING_FIELDS}


class BlankAsMissingMixin:
    """Blank or zero input counts as a missing field"""

    def to_internal_value(self, data):
        if data == '' or data == 0:
            self.fail('required')
        return super().to_internal_value(data)


class BookingIdField(BlankAsMissingMixin, serializers.IntegerField):
    pass


class BookingTimeField(BlankAsMissingMixin, serializers.DateTimeField):
    pass


class StartSessionSerializer(serializers.Serializer):
    parkingLotId = serializers.IntegerField(
        error_messages={'required': 'parkingLotId is required', 'null': 'parkingLotId is required',
                        'invalid': 'parkingLotId must be an integer'}
    )
    vehicleType = serializers.ChoiceField(choices=ParkingSession.VEHICLE_TYPE_CHOICES, required=False)


class BookParkingSerializer(serializers.Serializer):
    """Body of POST /book; every field is checked before anything is written"""
    parkingLotId = BookingIdField(error_messages={**REQUIRED_ERRORS, 'invalid': 'parkingLotId must be an integer'})
    startTime = BookingTimeField(error_messages=REQUIRED_ERRORS)
    endTime = BookingTimeField(error_messages=REQUIRED_ERRORS)
    slots = serializers.IntegerField(
        default=1,
        min_value=1,
        error_messages={'invalid': INVALID_SLOTS, 'min_value': INVALID_SLOTS, 'null': INVALID_SLOTS,
                        'max_string_length': INVALID_SLOTS}
    )

    def validate(self, data):
        if data['endTime'] <= data['startTime']:
            raise serializers.ValidationError("endTime must be after startTime")
        return data


class GuardScanSerializer(serializers.Serializer):
    """Payload decoded from the user's QR code by the guard app"""
    userId = serializers.IntegerField(
        error_messages={'required': 'userId and parkingLotId are required'}
    )
    parkingLotId = serializers.IntegerField(
        error_messages={'required': 'userId and parkingLotId are required'}
    )


class ParkingSessionSerializer(serializers.ModelSerializer):
    parkingLot = ParkingLotSerializer(source='parking_lot', read_only=True)
    user = serializers.PrimaryKeyRelatedField(read_only=True)
    vehicleType = serializers.CharField(source='vehicle_type', read_only=True)
    startTime = serializers.DateTimeField(source='start_time', read_only=True)
    endTime = serializers.DateTimeField(source='end_time', read_only=True)
    totalAmount = serializers.DecimalField(source='total_amount', max_digits=10, decimal_places=2,
                                           coerce_to_string=False, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = ParkingSession
        fields = ['id', 'user', 'parkingLot', 'status', 'vehicleType', 'slots', 'startTime', 'endTime',
                  'totalAmount', 'createdAt', 'updatedAt']
