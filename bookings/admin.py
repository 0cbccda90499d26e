# ==================== BOOKINGS/ADMIN.PY ====================
from django.contrib import admin
from .models import ParkingSession

@admin.register(ParkingSession)
class ParkingSessionAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'parking_lot', 'status', 'slots', 'start_time', 'end_time', 'total_amount', 'created_at']
    list_filter = ['status', 'vehicle_type', 'created_at']
    search_fields = ['user__username', 'parking_lot__name']
    # Lifecycle and lot occupancy move together through the API only
    readonly_fields = ['user', 'parking_lot', 'status', 'slots', 'total_amount', 'created_at', 'updated_at']
