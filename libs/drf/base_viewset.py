"""
Base ViewSets carrying role-based permission declarations.

Every project viewset inherits from one of these classes and declares the roles
allowed per action through ``role_permissions`` / ``default_roles``.
"""

from rest_framework import viewsets

from libs.drf.mixin.permission import RolePermissionMixin


class BaseModelViewSet(RolePermissionMixin, viewsets.ModelViewSet):
    """
    Base ModelViewSet with role declarations.

    Example:
        class ProductionChainViewSet(BaseModelViewSet):
            queryset = ProductionChain.objects.all()
            serializer_class = ProductionChainSerializer
            default_roles = [UserRole.ADMIN, UserRole.LEADER]
            role_permissions = {"create": [UserRole.ADMIN]}
    """

    pass


class BaseReadOnlyModelViewSet(RolePermissionMixin, viewsets.ReadOnlyModelViewSet):
    """
    Base ReadOnlyModelViewSet with role declarations.

    Used by viewsets exposing list/retrieve plus custom actions only.
    """

    pass


class BaseGenericViewSet(RolePermissionMixin, viewsets.GenericViewSet):
    pass
