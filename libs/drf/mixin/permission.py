from typing import Iterable, Optional


class RolePermissionMixin:
    """
    Mixin declaring which user roles may run each action of a ViewSet.

    Class Attributes:
        role_permissions (dict): Action name to the roles allowed to run it
            (e.g., ``{"create": [UserRole.ADMIN]}``)
        default_roles (list | None): Roles for actions missing from ``role_permissions``;
            ``None`` means any authenticated user

    The check itself is done by ``apps.core.api.permissions.RoleBasedPermission``.
    """

    role_permissions: dict = {}
    default_roles: Optional[Iterable[str]] = None

    @classmethod
    def get_role_matrix(cls) -> dict:
        """
        Map every routed action of the viewset to its allowed roles.

        Returns:
            dict: Action name to list of roles, or ``None`` for unrestricted actions
        """
        actions = set(cls.role_permissions)
        for attr_name in dir(cls):
            if attr_name.startswith("_"):
                continue
            if hasattr(getattr(cls, attr_name), "mapping"):
                actions.add(attr_name)
        for standard in ("list", "retrieve", "create", "update", "partial_update", "destroy"):
            if hasattr(cls, standard):
                actions.add(standard)

        matrix = {}
        for action_name in sorted(actions):
            roles = cls.role_permissions.get(action_name, cls.default_roles)
            matrix[action_name] = list(roles) if roles is not None else None
        return matrix
