from django.utils.translation import gettext as _
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission


class RoleBasedPermission(BasePermission):
    """
    Permission class that checks the user's role against the roles a view allows
    for the current action.

    Views declare ``role_permissions``, a mapping of action name to allowed roles,
    and may set ``default_roles`` for actions missing from the mapping. Views that
    declare neither only require authentication.
    """

    def get_allowed_roles(self, view):
        action = getattr(view, "action", None)
        role_permissions = getattr(view, "role_permissions", None) or {}
        if action in role_permissions:
            return role_permissions[action]
        return getattr(view, "default_roles", None)

    def has_permission(self, request, view):
        """Verify that the authenticated user holds one of the allowed roles."""
        if not request.user or not request.user.is_authenticated:
            raise PermissionDenied(_("You need to login to perform this action"))

        allowed_roles = self.get_allowed_roles(view)

        # No role restriction declared for this action
        if allowed_roles is None:
            return True

        if request.user.has_role(*allowed_roles):
            return True

        raise PermissionDenied(_("You do not have permission to perform this action"))
