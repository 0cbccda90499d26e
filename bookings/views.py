# ============================= BOOKINGS VIEWS =============================
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from utils.permissions import IsGuardOrAdmin
from .serializers import (
    StartSessionSerializer,
    BookParkingSerializer,
    GuardScanSerializer,
    ParkingSessionSerializer,
)
from .services import SessionService


class ParkingSessionViewSet(viewsets.ViewSet):
    """The caller's own parking sessions: start, book, cancel, complete"""

    permission_classes = [permissions.IsAuthenticated]

    @action(detail=False, methods=['get'])
    def active_session(self, request):
        """Ongoing session of the caller, or null"""
        session = SessionService.get_active_session(request.user)
        data = ParkingSessionSerializer(session).data if session else None
        return Response({'success': True, 'data': data})

    @action(detail=False, methods=['post'])
    def start_session(self, request):
        """Start a session now

        Body: { "parkingLotId": 1, "vehicleType": "car|bike" }
        """
        serializer = StartSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = SessionService.start_session(
            request.user,
            serializer.validated_data['parkingLotId'],
            serializer.validated_data.get('vehicleType'),
        )
        return Response(
            {'success': True, 'data': ParkingSessionSerializer(session).data},
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['post'])
    def book(self, request):
        """Reserve slots for a future window

        Body: { "parkingLotId": 1, "slots": 2, "startTime": "...", "endTime": "..." }
        """
        serializer = BookParkingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        session = SessionService.book_parking(
            request.user,
            data['parkingLotId'],
            data['slots'],
            data['startTime'],
            data['endTime'],
        )
        return Response(
            {'success': True, 'data': ParkingSessionSerializer(session).data},
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['get'])
    def bookings(self, request):
        """All of the caller's sessions, newest first"""
        sessions = SessionService.list_sessions(request.user)
        return Response({'success': True, 'data': ParkingSessionSerializer(sessions, many=True).data})

    @action(detail=True, methods=['patch'])
    def cancel(self, request, booking_id=None):
        """Cancel a booked session and release its slots"""
        session = SessionService.cancel_booking(request.user, booking_id)
        return Response({'success': True, 'data': ParkingSessionSerializer(session).data})

    @action(detail=False, methods=['post'])
    def complete_session(self, request):
        """End the caller's active session and bill it"""
        session = SessionService.complete_session(request.user)
        return Response({'success': True, 'data': ParkingSessionSerializer(session).data})


class GuardViewSet(viewsets.ViewSet):
    """QR scans at the gate, guard or admin only

    Body: { "userId": 7, "parkingLotId": 1 }
    """

    permission_classes = [permissions.IsAuthenticated, IsGuardOrAdmin]

    def _scan(self, request):
        serializer = GuardScanSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data['userId'], serializer.validated_data['parkingLotId']

    @action(detail=False, methods=['post'])
    def entry(self, request):
        user_id, parking_lot_id = self._scan(request)
        session = SessionService.guard_entry(user_id, parking_lot_id)
        return Response({
            'success': True,
            'message': 'Entry successful',
            'data': ParkingSessionSerializer(session).data,
        })

    @action(detail=False, methods=['post'])
    def exit(self, request):
        user_id, parking_lot_id = self._scan(request)
        session = SessionService.guard_exit(user_id, parking_lot_id)
        return Response({
            'success': True,
            'message': 'Exit successful',
            'data': ParkingSessionSerializer(session).data,
        })
