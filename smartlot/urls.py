"""
URL configuration for the smartlot project.

Parking routes keep the mobile client's paths (no trailing slash) and live
under /api/v1/parking/.
"""
# ==================== SMARTLOT/URLS.PY ====================
from django.contrib import admin
from django.urls import path, include
from rest_framework_simplejwt.views import TokenRefreshView, TokenObtainPairView

from users.views import UserViewSet
from parking.views import ParkingLotViewSet
from bookings.views import ParkingSessionViewSet, GuardViewSet

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API versioning
    path('api/v1/', include([
        # Authentication endpoints
        path('auth/', include([
            path('register/', UserViewSet.as_view({'post': 'register'}), name='register'),
            path('login/', UserViewSet.as_view({'post': 'login'}), name='login'),
            path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
            path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
            path('profile/', UserViewSet.as_view({'get': 'profile', 'put': 'profile'}), name='profile'),
        ])),

        # Parking lots and sessions
        path('parking/', include([
            path('lots', ParkingLotViewSet.as_view({'get': 'list'}), name='lot-list'),
            path('active-session', ParkingSessionViewSet.as_view({'get': 'active_session'}), name='active-session'),
            path('start-session', ParkingSessionViewSet.as_view({'post': 'start_session'}), name='start-session'),
            path('book', ParkingSessionViewSet.as_view({'post': 'book'}), name='book'),
            path('bookings', ParkingSessionViewSet.as_view({'get': 'bookings'}), name='bookings'),
            path('bookings/<int:booking_id>/cancel', ParkingSessionViewSet.as_view({'patch': 'cancel'}),
                 name='cancel-booking'),
            path('complete-session', ParkingSessionViewSet.as_view({'post': 'complete_session'}),
                 name='complete-session'),

            # Guard QR scans
            path('guard/entry', GuardViewSet.as_view({'post': 'entry'}), name='guard-entry'),
            path('guard/exit', GuardViewSet.as_view({'post': 'exit'}), name='guard-exit'),
        ])),
    ])),
]
