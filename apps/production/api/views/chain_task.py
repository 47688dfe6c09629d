from django.utils.translation import gettext as _
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from apps.core.constants import UserRole
from apps.production.api.filtersets import ChainTaskFilterSet
from apps.production.api.serializers import ChainRunSerializer, ChainTaskSerializer
from apps.production.models import ChainTask
from apps.production.services import ChainStepSequencer
from libs import BaseReadOnlyModelViewSet

TAG = "11.3: Chain Tasks"
MANAGER_ROLES = (UserRole.ADMIN, UserRole.LEADER)


@extend_schema_view(
    list=extend_schema(
        summary="List chain tasks",
        description="Admins and leaders see every task, other users only the tasks assigned to them",
        tags=[TAG],
    ),
    retrieve=extend_schema(summary="Get chain task", tags=[TAG]),
    start=extend_schema(
        summary="Start chain task",
        description="Move a pending task to in progress",
        tags=[TAG],
        request=None,
        responses={200: ChainTaskSerializer},
    ),
    complete=extend_schema(
        summary="Complete chain task",
        description="Complete an in-progress task and hand the run over to the next step's department. "
        "Fails with no_assignee when that department has no member; the task then stays open.",
        tags=[TAG],
        request=None,
        responses={200: ChainRunSerializer},
    ),
)
class ChainTaskViewSet(BaseReadOnlyModelViewSet):
    """ViewSet for ChainTask model."""

    queryset = ChainTask.objects.select_related("run", "step", "department", "assignee")
    serializer_class = ChainTaskSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ChainTaskFilterSet
    ordering_fields = ["created_at", "status"]
    ordering = ["-created_at"]

    def get_queryset(self):
        queryset = super().get_queryset()
        if getattr(self, "swagger_fake_view", False):
            return queryset.none()
        if self.request.user.has_role(*MANAGER_ROLES):
            return queryset
        return queryset.filter(assignee=self.request.user)

    def _check_can_work_on(self, task):
        user = self.request.user
        if task.assignee_id != user.pk and not user.has_role(*MANAGER_ROLES):
            raise PermissionDenied(_("Only the assignee, an admin or a leader can update this task"))

    @action(detail=True, methods=["post"], url_path="start")
    def start(self, request, pk=None):
        task = self.get_object()
        self._check_can_work_on(task)
        return Response(ChainTaskSerializer(ChainStepSequencer.begin(task)).data)

    @action(detail=True, methods=["post"], url_path="complete")
    def complete(self, request, pk=None):
        task = self.get_object()
        self._check_can_work_on(task)
        run = ChainStepSequencer.advance(task)
        return Response(ChainRunSerializer(run).data)
