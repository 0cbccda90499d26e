# ==================== PARKING/ADMIN.PY ====================
from django.contrib import admin
from .models import ParkingLot

@admin.register(ParkingLot)
class ParkingLotAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'status', 'occupied_spots', 'total_spots', 'price_per_hour', 'created_at']
    list_filter = ['type', 'status', 'created_at']
    search_fields = ['name', 'address']
    readonly_fields = ['status', 'created_at', 'updated_at']
    fieldsets = (
        ('Basic Info', {'fields': ('name', 'address', 'type')}),
        ('Location', {'fields': ('lat', 'lon')}),
        ('Capacity', {'fields': ('total_spots', 'occupied_spots', 'status')}),
        ('Pricing', {'fields': ('price_per_hour',)}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
