"""Tests for the week assignment endpoints."""

from datetime import date

import pytest
from rest_framework import status
from rest_framework.test import APIClient

from apps.production.models import KPIWeekAssignment
from apps.production.services import KPIAssignmentService

from .conftest import FIRST_MONDAY

KPI_URL = "/api/production/kpis/"
BASE_URL = "/api/production/assignments/"


def week_url(kpi, week_index=1):
    return f"{KPI_URL}{kpi.pk}/weeks/{week_index}/assignments/"


def assignment_url(assignment, suffix=""):
    return f"{BASE_URL}{assignment.pk}/{suffix}"


def first_error(response):
    return response.json()["error"]["errors"][0]


def client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def steps(chain):
    return {step.step_order: step for step in chain.steps.all()}


@pytest.fixture
def assignment(kpi, steps, cutter):
    [saved] = KPIAssignmentService.assign_week(
        kpi,
        1,
        [{"step": steps[1], "assignee": cutter, "day_amounts": {FIRST_MONDAY: 2, date(2025, 1, 7): 1}}],
    )
    return saved


@pytest.mark.django_db
class TestWeekAssignmentsAPI:
    def test_assign_and_list(self, api_client, kpi, steps, cutter, sewer):
        response = api_client.post(
            week_url(kpi),
            {
                "assignments": [
                    {
                        "step": steps[1].pk,
                        "assignee": cutter.pk,
                        "day_amounts": {"2025-01-06": 3, "2025-01-07": 2},
                        "day_titles": {"2025-01-06": ["Collars"]},
                    },
                    {"step": steps[2].pk, "assignee": sewer.pk, "day_amounts": {"2025-01-06": 3}},
                ]
            },
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert [item["step_order"] for item in data] == [1, 2]
        assert data[0]["assigned_value"] == 5
        assert data[0]["day_titles"] == {"2025-01-06": ["Collars"]}
        assert data[1]["department"] == steps[2].department_id

        listed = api_client.get(week_url(kpi)).json()["data"]
        assert len(listed) == 2

    def test_assign_above_day_target(self, api_client, kpi, steps, cutter):
        response = api_client.post(
            week_url(kpi),
            {"assignments": [{"step": steps[1].pk, "assignee": cutter.pk, "day_amounts": {"2025-01-09": 3}}]},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = first_error(response)
        assert error["code"] == "assignment_over_target"
        assert error["params"]["target"] == 2
        assert not KPIWeekAssignment.objects.exists()

    def test_assign_rejects_invalid_date_key(self, api_client, kpi, steps):
        response = api_client.post(
            week_url(kpi),
            {"assignments": [{"step": steps[1].pk, "day_amounts": {"monday": 1}}]},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["success"] is False
        assert not KPIWeekAssignment.objects.exists()

    def test_assign_rejects_assignee_of_other_department(self, api_client, kpi, steps, sewer):
        response = api_client.post(
            week_url(kpi),
            {"assignments": [{"step": steps[1].pk, "assignee": sewer.pk, "day_amounts": {"2025-01-06": 1}}]},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert first_error(response)["code"] == "invalid_assignment"

    def test_unknown_week(self, api_client, kpi, steps):
        response = api_client.post(
            week_url(kpi, 7),
            {"assignments": [{"step": steps[1].pk, "day_amounts": {"2025-01-06": 1}}]},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert first_error(response)["code"] == "invalid_range"


@pytest.mark.django_db
@pytest.mark.rbp
class TestAssignmentWorkflowAPI:
    def test_assignee_sees_only_own_assignments(self, assignment, sewer, cutter):
        response = client_for(cutter).get(BASE_URL)
        assert response.status_code == status.HTTP_200_OK
        assert [item["id"] for item in response.json()["data"]["results"]] == [assignment.pk]

        response = client_for(sewer).get(BASE_URL)
        assert response.json()["data"]["results"] == []

    def test_accept(self, assignment, cutter):
        response = client_for(cutter).post(assignment_url(assignment, "accept/"), format="json")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["accepted"] is True
        assert data["accepted_by"] == cutter.pk

    def test_accept_by_leader_who_is_not_assignee(self, assignment, leader):
        response = client_for(leader).post(assignment_url(assignment, "accept/"), format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assignment.refresh_from_db()
        assert assignment.accepted is False

    def test_accept_invisible_to_other_users(self, assignment, sewer):
        response = client_for(sewer).post(assignment_url(assignment, "accept/"), format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_day_result_requires_acceptance(self, assignment, cutter):
        response = client_for(cutter).post(
            assignment_url(assignment, "day-results/"),
            {"date": "2025-01-06", "link": "https://files.example.com/mon.pdf"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert first_error(response)["code"] == "invalid_assignment"

    def test_day_result_after_acceptance(self, assignment, cutter):
        client = client_for(cutter)
        client.post(assignment_url(assignment, "accept/"), format="json")

        response = client.post(
            assignment_url(assignment, "day-results/"),
            {"date": "2025-01-06", "link": "https://files.example.com/mon.pdf"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        [slot] = response.json()["data"]["day_results"]["2025-01-06"]
        assert slot["link"] == "https://files.example.com/mon.pdf"
        assert slot["saved_by"] == cutter.pk

    def test_day_result_on_unassigned_day(self, assignment, cutter):
        client = client_for(cutter)
        client.post(assignment_url(assignment, "accept/"), format="json")

        response = client.post(
            assignment_url(assignment, "day-results/"),
            {"date": "2025-01-08", "link": "https://files.example.com/wed.pdf"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert first_error(response)["code"] == "invalid_range"

    def test_plain_user_cannot_assign(self, plain_user, kpi, steps):
        response = client_for(plain_user).post(
            week_url(kpi),
            {"assignments": [{"step": steps[1].pk, "day_amounts": {"2025-01-06": 1}}]},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not KPIWeekAssignment.objects.exists()
