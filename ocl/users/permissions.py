from rest_framework import permissions


class IsAdmin(permissions.BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin)


class IsAdminOrOfficeUser(permissions.BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and (
            request.user.is_admin or request.user.is_office_user
        ))


class IsCorporateUser(permissions.BasePermission):
    """Corporate portal users with a linked corporate account."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated or not user.is_corporate:
            return False
        return user.portal_account is not None


class IsMedicineUser(permissions.BasePermission):
    """Medicine-service operators with a linked operator profile."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated or not user.is_medicine:
            return False
        return user.portal_account is not None
