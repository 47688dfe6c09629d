from django.utils.translation import gettext as _
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from apps.core.constants import UserRole
from apps.production.api.filtersets import KPIWeekAssignmentFilterSet
from apps.production.api.serializers import AssignmentDayResultSerializer, KPIWeekAssignmentSerializer
from apps.production.models import KPIWeekAssignment
from apps.production.services import KPIAssignmentService
from libs import BaseReadOnlyModelViewSet

TAG = "11.4: KPI Week Assignments"
MANAGER_ROLES = (UserRole.ADMIN, UserRole.LEADER)


@extend_schema_view(
    list=extend_schema(
        summary="List week assignments",
        description="Admins and leaders see every assignment, other users only their own",
        tags=[TAG],
    ),
    retrieve=extend_schema(summary="Get week assignment", tags=[TAG]),
    accept=extend_schema(
        summary="Accept week assignment",
        tags=[TAG],
        request=None,
        responses={200: KPIWeekAssignmentSerializer},
    ),
    day_result=extend_schema(
        summary="Save day result",
        description="Store a result link for an assigned day; the assignment must be accepted first",
        tags=[TAG],
        request=AssignmentDayResultSerializer,
        responses={200: KPIWeekAssignmentSerializer},
    ),
)
class KPIWeekAssignmentViewSet(BaseReadOnlyModelViewSet):
    """ViewSet for KPIWeekAssignment model."""

    queryset = KPIWeekAssignment.objects.select_related("kpi", "step", "assignee")
    serializer_class = KPIWeekAssignmentSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = KPIWeekAssignmentFilterSet
    ordering_fields = ["week_index", "created_at"]
    ordering = ["week_index", "step__step_order"]

    def get_queryset(self):
        queryset = super().get_queryset()
        if getattr(self, "swagger_fake_view", False):
            return queryset.none()
        if self.request.user.has_role(*MANAGER_ROLES):
            return queryset
        return queryset.filter(assignee=self.request.user)

    def _check_is_assignee(self, assignment):
        if assignment.assignee_id != self.request.user.pk:
            raise PermissionDenied(_("Only the assignee can work on this assignment"))

    @action(detail=True, methods=["post"], url_path="accept")
    def accept(self, request, pk=None):
        assignment = self.get_object()
        self._check_is_assignee(assignment)
        assignment = KPIAssignmentService.accept(assignment, request.user)
        return Response(KPIWeekAssignmentSerializer(assignment).data)

    @action(detail=True, methods=["post"], url_path="day-results")
    def day_result(self, request, pk=None):
        assignment = self.get_object()
        self._check_is_assignee(assignment)
        serializer = AssignmentDayResultSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        assignment = KPIAssignmentService.save_day_result(
            assignment,
            data["date"],
            data["link"],
            actor=request.user,
            slot_index=data["slot_index"],
        )
        return Response(KPIWeekAssignmentSerializer(assignment).data)
