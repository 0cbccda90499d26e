# ==================== UTILS/DISTANCE_CALCULATOR.PY ====================
from geopy.distance import great_circle


class DistanceCalculator:
    """Distance helpers for proximity-sorted lot listings"""

    @staticmethod
    def get_distance_km(lat1, lon1, lat2, lon2):
        """Great-circle (haversine) distance in kilometers"""
        return great_circle((lat1, lon1), (lat2, lon2)).km

    @staticmethod
    def parse_coordinates(lat, lon):
        """Parse query-string coordinates; raises ValueError when out of range"""
        latitude = float(lat)
        longitude = float(lon)
        if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
            raise ValueError('Coordinates out of range')
        return latitude, longitude

    @staticmethod
    def sort_by_distance(lots, latitude, longitude):
        """Annotate each lot with `distance` (km) and return them nearest first"""
        for lot in lots:
            lot.distance = DistanceCalculator.get_distance_km(latitude, longitude, lot.lat, lot.lon)
        return sorted(lots, key=lambda lot: lot.distance)
