from rest_framework.permissions import BasePermission, SAFE_METHODS

ROLES_CAN_MANAGE_SUPPLIERS = ('propietario', 'gerente_general', 'gerente')


def can_manage_suppliers(user):
    """Only owners and managers may create, edit or delete suppliers"""
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return (getattr(user, 'role', '') or '') in ROLES_CAN_MANAGE_SUPPLIERS


class CanManageSuppliers(BasePermission):
    """Read access for any authenticated user, writes for supplier managers"""
    message = 'no_permission'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return can_manage_suppliers(request.user)
