"""Shared pytest fixtures for production tests."""

from datetime import date

import pytest
from django.contrib.auth import get_user_model

from apps.core.constants import UserRole
from apps.hrm.models import Department
from apps.production.kpi import CompletionLedger, build_plan
from apps.production.services import ChainKPIService, ProductionChainService

User = get_user_model()

# Monday 2025-01-06 to Friday 2025-01-17: two full working weeks
FIRST_MONDAY = date(2025, 1, 6)
SECOND_FRIDAY = date(2025, 1, 17)


@pytest.fixture
def ledger():
    return CompletionLedger()


@pytest.fixture
def two_week_plan():
    """23 units over 10 working days."""
    return build_plan(23, FIRST_MONDAY, SECOND_FRIDAY)


@pytest.fixture
def cutting(db):
    return Department.objects.create(name="Cutting", code="CUT")


@pytest.fixture
def sewing(db):
    return Department.objects.create(name="Sewing", code="SEW")


@pytest.fixture
def packing(db):
    return Department.objects.create(name="Packing", code="PACK")


@pytest.fixture
def cutter(cutting):
    return User.objects.create_user(username="cutter", email="cutter@example.com", password="pass", department=cutting)


@pytest.fixture
def sewer(sewing):
    return User.objects.create_user(username="sewer", email="sewer@example.com", password="pass", department=sewing)


@pytest.fixture
def leader(db):
    return User.objects.create_user(
        username="leader", email="leader@example.com", password="pass", role=UserRole.LEADER
    )


@pytest.fixture
def plain_user(db):
    return User.objects.create_user(username="worker", email="worker@example.com", password="pass")


@pytest.fixture
def chain(cutting, sewing):
    return ProductionChainService.create(
        name="Shirt line",
        steps=[{"department": cutting, "title": "Cut fabric"}, {"department": sewing, "title": "Sew"}],
    )


@pytest.fixture
def kpi(chain):
    return ChainKPIService.create(chain, 23, FIRST_MONDAY, SECOND_FRIDAY)
