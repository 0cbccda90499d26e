# ==================== UTILS/PERMISSIONS.PY ====================
from rest_framework import permissions


class IsGuardOrAdmin(permissions.BasePermission):
    """Only gate guards and admins may record QR entries and exits"""
    message = 'Only guards or admins can perform this action'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_guard)
