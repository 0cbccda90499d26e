# ==================== BOOKINGS/SERVICES.PY ====================
import logging
from decimal import Decimal
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from notifications.models import Notification
from notifications.services import NotificationService
from parking.models import ParkingLot
from parking.services import OccupancyService
from utils.exceptions import ActiveSessionExists, LotNotFound, SessionNotFound, UserNotFound
from .billing import compute_charge
from .models import ParkingSession

logger = logging.getLogger(__name__)

NEWEST_FIRST = ('-created_at', '-id')


def _format_amount(amount):
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal(1)))
    return str(amount)


class SessionService:
    """Parking session lifecycle: booked -> active -> completed, booked -> canceled.

    Every operation writes the session and the lot counter in one
    transaction. Notifications are emitted after that transaction commits
    and are best effort.
    """

    @staticmethod
    def _get_lot(parking_lot_id):
        try:
            return ParkingLot.objects.get(pk=parking_lot_id)
        except ParkingLot.DoesNotExist:
            raise LotNotFound()

    @staticmethod
    def _get_user(user_id):
        try:
            return get_user_model().objects.get(pk=user_id)
        except get_user_model().DoesNotExist:
            raise UserNotFound()

    @staticmethod
    def _locked(queryset):
        """Newest matching session, row-locked until the transaction ends"""
        return (queryset.select_for_update(of=('self',))
                .select_related('parking_lot', 'user')
                .order_by(*NEWEST_FIRST)
                .first())

    @staticmethod
    def get_active_session(user):
        return (ParkingSession.objects.filter(user=user, status=ParkingSession.STATUS_ACTIVE)
                .select_related('parking_lot')
                .order_by(*NEWEST_FIRST)
                .first())

    @staticmethod
    def list_sessions(user):
        """All of the user's sessions, newest first, lot joined"""
        return (ParkingSession.objects.filter(user=user)
                .select_related('parking_lot')
                .order_by(*NEWEST_FIRST))

    @staticmethod
    def start_session(user, parking_lot_id, vehicle_type=None):
        """Self check-in: an active one-slot session starting now"""
        lot = SessionService._get_lot(parking_lot_id)

        with transaction.atomic():
            # Lock the user row so two concurrent starts cannot both pass the check
            get_user_model().objects.select_for_update().filter(pk=user.pk).first()

            if ParkingSession.objects.filter(user=user, status=ParkingSession.STATUS_ACTIVE).exists():
                raise ActiveSessionExists()

            session = ParkingSession.objects.create(
                user=user,
                parking_lot=lot,
                status=ParkingSession.STATUS_ACTIVE,
                vehicle_type=vehicle_type or lot.type,
                slots=1,
                start_time=timezone.now(),
            )
            updated_lot = OccupancyService.synchronize(lot.id, 1)

        if updated_lot:
            session.parking_lot = updated_lot
        logger.info(f"Session {session.id} started by user {user.pk} at lot {lot.id}")
        return session

    @staticmethod
    def book_parking(user, parking_lot_id, slots, start_time, end_time):
        """Reserve `slots` for a future window; capacity is taken immediately"""
        with transaction.atomic():
            lot = OccupancyService.reserve(parking_lot_id, slots)
            session = ParkingSession.objects.create(
                user=user,
                parking_lot=lot,
                status=ParkingSession.STATUS_BOOKED,
                vehicle_type='bike' if lot.type == 'bike' else 'car',
                slots=slots,
                start_time=start_time,
                end_time=end_time,
            )

        logger.info(f"Booking {session.id}: user {user.pk} reserved {slots} slot(s) at lot {lot.id}")
        return session

    @staticmethod
    def guard_entry(user_id, parking_lot_id):
        """QR check-in: activate the newest booking here, or admit a walk-in"""
        user = SessionService._get_user(user_id)
        lot = SessionService._get_lot(parking_lot_id)

        with transaction.atomic():
            session = SessionService._locked(ParkingSession.objects.filter(
                user=user, parking_lot=lot, status=ParkingSession.STATUS_BOOKED
            ))

            if session is None:
                session = ParkingSession.objects.create(
                    user=user,
                    parking_lot=lot,
                    status=ParkingSession.STATUS_ACTIVE,
                    vehicle_type=lot.type,
                    slots=1,
                    start_time=timezone.now(),
                )
                updated_lot = OccupancyService.synchronize(lot.id, 1)
                if updated_lot:
                    session.parking_lot = updated_lot
                logger.info(f"Walk-in session {session.id} for user {user.pk} at lot {lot.id}")
            else:
                # Slots were reserved when the booking was made
                session.transition_to(ParkingSession.STATUS_ACTIVE)
                session.start_time = timezone.now()
                session.save(update_fields=['status', 'start_time', 'updated_at'])
                logger.info(f"Booking {session.id} activated at lot {lot.id}")

        NotificationService.emit(
            user,
            Notification.TYPE_CHECKIN,
            'Check-in Successful',
            f"Your vehicle check-in was recorded at {lot.name}.",
            parking_lot=lot,
            session=session,
        )
        return session

    @staticmethod
    def _settle(session):
        """Bill and close an active session, then free its slots"""
        end_time = timezone.now()
        start_time = session.start_time or session.created_at
        total_amount = compute_charge(start_time, end_time, session.parking_lot.price_per_hour)

        session.transition_to(ParkingSession.STATUS_COMPLETED)
        session.end_time = end_time
        session.total_amount = total_amount
        session.save(update_fields=['status', 'end_time', 'total_amount', 'updated_at'])

        updated_lot = OccupancyService.release(session.parking_lot_id, session.slots)
        if updated_lot:
            session.parking_lot = updated_lot
        logger.info(f"Session {session.id} completed, charged {total_amount}")
        return session

    @staticmethod
    def guard_exit(user_id, parking_lot_id):
        """QR check-out: settle the user's active session at this lot"""
        with transaction.atomic():
            session = SessionService._locked(ParkingSession.objects.filter(
                user_id=user_id, parking_lot_id=parking_lot_id, status=ParkingSession.STATUS_ACTIVE
            ))
            if session is None:
                raise SessionNotFound('No active session found for this user')
            SessionService._settle(session)

        NotificationService.emit(
            session.user,
            Notification.TYPE_CHECKOUT,
            'Check-out Successful',
            f"Your parking session was completed at {session.parking_lot.name}. "
            f"Total: {settings.BILLING_CURRENCY} {_format_amount(session.total_amount)}.",
            parking_lot=session.parking_lot,
            session=session,
        )
        return session

    @staticmethod
    def cancel_booking(user, booking_id):
        """Cancel one of the caller's booked sessions and release its slots"""
        with transaction.atomic():
            session = SessionService._locked(ParkingSession.objects.filter(
                pk=booking_id, user=user, status=ParkingSession.STATUS_BOOKED
            ))
            if session is None:
                raise SessionNotFound('Booked session not found or cannot be canceled')

            session.transition_to(ParkingSession.STATUS_CANCELED)
            session.end_time = timezone.now()
            session.save(update_fields=['status', 'end_time', 'updated_at'])

            updated_lot = OccupancyService.release(session.parking_lot_id, session.slots)
            if updated_lot:
                session.parking_lot = updated_lot

        logger.info(f"Booking {session.id} canceled by user {user.pk}")
        NotificationService.emit(
            user,
            Notification.TYPE_BOOKING,
            'Booking Canceled',
            f"Your booking at {session.parking_lot.name} was canceled.",
            parking_lot=session.parking_lot,
            session=session,
        )
        return session

    @staticmethod
    def complete_session(user):
        """Self check-out: settle the caller's active session"""
        with transaction.atomic():
            session = SessionService._locked(ParkingSession.objects.filter(
                user=user, status=ParkingSession.STATUS_ACTIVE
            ))
            if session is None:
                raise SessionNotFound('No active session found')
            return SessionService._settle(session)
