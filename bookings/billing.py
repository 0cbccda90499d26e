import math
from decimal import Decimal

SECONDS_PER_HOUR = 3600


def billable_hours(start_time, end_time):
    """Started hours between two instants, never less than one"""
    elapsed = (end_time - start_time).total_seconds()
    return max(1, math.ceil(elapsed / SECONDS_PER_HOUR))


def compute_charge(start_time, end_time, price_per_hour):
    """Charge for a session: whole started hours times the lot's hourly rate.

    A five minute stay bills one hour. No fractional hours are billed.
    """
    return billable_hours(start_time, end_time) * Decimal(str(price_per_hour))
