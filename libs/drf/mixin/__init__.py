from .permission import RolePermissionMixin

__all__ = [
    "RolePermissionMixin",
]
