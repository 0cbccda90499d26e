# ==================== PARKING/SERVICES.PY ====================
import logging

from django.db.models import Case, F, Value, When
from django.db.models.functions import Greatest
from django.db.models.lookups import GreaterThanOrEqual
from django.utils import timezone

from utils.exceptions import LotNotFound, InsufficientCapacity
from .models import ParkingLot, resolve_lot_status

logger = logging.getLogger(__name__)

__all__ = ['OccupancyService', 'resolve_lot_status']

# Largest value a PositiveIntegerField column can hold
MAX_SPOTS = 2147483647


class OccupancyService:
    """Lot occupancy counter and its derived status.

    Every change is one conditional UPDATE: the counter moves and the status
    is recomputed from the new value in the same statement, so concurrent
    requests against the same lot never read-modify-write in Python.
    """

    @staticmethod
    def _occupancy_update(delta):
        occupied = Greatest(F('occupied_spots') + delta, Value(0))
        return {
            'occupied_spots': occupied,
            'status': Case(
                When(GreaterThanOrEqual(occupied, F('total_spots')), then=Value(ParkingLot.STATUS_FULL)),
                default=Value(ParkingLot.STATUS_AVAILABLE),
            ),
            'updated_at': timezone.now(),
        }

    @staticmethod
    def synchronize(lot_id, occupied_delta):
        """Apply `occupied_delta` to the lot and re-derive its status.

        Returns the refreshed lot, or None when the lot no longer exists.
        The counter never drops below zero.
        """
        updated = ParkingLot.objects.filter(pk=lot_id).update(
            **OccupancyService._occupancy_update(occupied_delta)
        )
        if not updated:
            logger.warning(f"Occupancy sync skipped, lot {lot_id} no longer exists (delta {occupied_delta})")
            return None

        lot = ParkingLot.objects.get(pk=lot_id)
        logger.info(f"Lot {lot_id} occupancy {occupied_delta:+d} -> {lot.occupied_spots}/{lot.total_spots} ({lot.status})")
        return lot

    @staticmethod
    def reserve(lot_id, slots):
        """Reserve `slots` only if they fit under the lot's capacity.

        Compare-and-increment in a single statement; two concurrent
        reservations for the last slot cannot both pass.
        """
        reserved = 0
        if slots <= MAX_SPOTS:
            reserved = ParkingLot.objects.filter(
                pk=lot_id,
                occupied_spots__lte=F('total_spots') - slots,
            ).update(**OccupancyService._occupancy_update(slots))

        if not reserved:
            if not ParkingLot.objects.filter(pk=lot_id).exists():
                raise LotNotFound()
            logger.info(f"Reservation of {slots} slot(s) rejected, lot {lot_id} lacks capacity")
            raise InsufficientCapacity()

        lot = ParkingLot.objects.get(pk=lot_id)
        logger.info(f"Lot {lot_id} reserved {slots} slot(s) -> {lot.occupied_spots}/{lot.total_spots} ({lot.status})")
        return lot

    @staticmethod
    def release(lot_id, slots):
        """Free the capacity a session held; at least one slot is always released."""
        return OccupancyService.synchronize(lot_id, -max(1, slots or 1))
