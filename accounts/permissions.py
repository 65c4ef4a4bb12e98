from rest_framework.permissions import BasePermission, SAFE_METHODS


class RolePermission(BasePermission):
    """Simple role-based permission helper.

    Use:
      RolePermission(allow_read={...}, allow_write={...}, allow_delete={...})

    `allow_delete` defaults to `allow_write` when not given.
    """

    def __init__(self, allow_read=None, allow_write=None, allow_delete=None):
        self.allow_read = set(allow_read or [])
        self.allow_write = set(allow_write or [])
        self.allow_delete = set(allow_delete) if allow_delete is not None else set(self.allow_write)

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if getattr(user, "is_superuser", False):
            return True

        role = getattr(user, "role", None)
        if request.method in SAFE_METHODS:
            return role in self.allow_read or role in self.allow_write
        if request.method == "DELETE":
            return role in self.allow_delete
        return role in self.allow_write
