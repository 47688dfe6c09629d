"""Tests for RoleBasedPermission."""

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import PermissionDenied
from rest_framework.test import APIRequestFactory

from apps.core.api.permissions import RoleBasedPermission
from apps.core.constants import UserRole
from apps.core.models import User


class DummyView:
    default_roles = [UserRole.ADMIN, UserRole.LEADER]
    role_permissions = {"create": [UserRole.ADMIN]}

    def __init__(self, action):
        self.action = action


class OpenView:
    def __init__(self, action):
        self.action = action


@pytest.fixture
def permission():
    return RoleBasedPermission()


def make_request(user):
    request = APIRequestFactory().get("/")
    request.user = user
    return request


@pytest.mark.django_db
class TestRoleBasedPermission:
    def test_anonymous_user_is_rejected(self, permission):
        with pytest.raises(PermissionDenied):
            permission.has_permission(make_request(AnonymousUser()), OpenView("list"))

    def test_view_without_roles_only_requires_login(self, permission):
        user = User.objects.create_user(username="worker", email="worker@example.com", password="pass")

        assert permission.has_permission(make_request(user), OpenView("list"))

    def test_action_specific_roles(self, permission):
        leader = User.objects.create_user(
            username="leader", email="leader@example.com", password="pass", role=UserRole.LEADER
        )

        assert permission.has_permission(make_request(leader), DummyView("list"))
        with pytest.raises(PermissionDenied):
            permission.has_permission(make_request(leader), DummyView("create"))

    def test_user_role_outside_defaults(self, permission):
        user = User.objects.create_user(username="worker", email="worker@example.com", password="pass")

        with pytest.raises(PermissionDenied):
            permission.has_permission(make_request(user), DummyView("retrieve"))

    def test_superuser_holds_every_role(self, permission):
        admin = User.objects.create_superuser(
            username="root", email="root@example.com", password="pass", role=UserRole.USER
        )

        assert admin.has_role(UserRole.ADMIN)
        assert permission.has_permission(make_request(admin), DummyView("create"))


@pytest.mark.django_db
def test_members_of_lists_active_members_by_join_date():
    from apps.hrm.models import Department

    department = Department.objects.create(name="Cutting", code="CUT")
    first = User.objects.create_user(username="first", email="first@example.com", department=department)
    User.objects.create_user(username="inactive", email="inactive@example.com", department=department, is_active=False)
    second = User.objects.create_user(username="second", email="second@example.com", department=department)
    User.objects.create_user(username="elsewhere", email="elsewhere@example.com")

    assert list(User.objects.members_of(department)) == [first, second]
