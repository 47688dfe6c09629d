from apps.core.constants import UserRole
from apps.production.api.views import (
    ChainKPIViewSet,
    ChainTaskViewSet,
    KPIWeekAssignmentViewSet,
    ProductionChainViewSet,
)


def test_chain_role_matrix():
    matrix = ProductionChainViewSet.get_role_matrix()

    assert matrix["list"] == [UserRole.ADMIN, UserRole.LEADER]
    assert matrix["create"] == [UserRole.ADMIN]
    assert matrix["start"] == [UserRole.ADMIN]
    assert matrix["activities"] == [UserRole.ADMIN, UserRole.LEADER]


def test_kpi_role_matrix_lists_custom_actions():
    matrix = ChainKPIViewSet.get_role_matrix()

    assert matrix["toggle_day_completion"] == [UserRole.ADMIN, UserRole.LEADER]
    assert matrix["week_assignments"] == [UserRole.ADMIN, UserRole.LEADER]
    assert matrix["partial_update"] == [UserRole.ADMIN]
    assert matrix["destroy"] == [UserRole.ADMIN]
    assert "update" not in matrix


def test_unrestricted_viewset():
    matrix = ChainTaskViewSet.get_role_matrix()

    assert matrix["complete"] is None
    assert matrix["list"] is None


def test_assignment_actions_only_require_login():
    matrix = KPIWeekAssignmentViewSet.get_role_matrix()

    assert matrix["accept"] is None
    assert matrix["day_result"] is None
