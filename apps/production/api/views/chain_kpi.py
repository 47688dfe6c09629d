from datetime import date

from django.utils.translation import gettext as _
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import mixins
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from apps.core.constants import UserRole
from apps.production.api.filtersets import ChainKPIFilterSet
from apps.production.api.serializers import (
    ChainKPICreateSerializer,
    ChainKPIListSerializer,
    ChainKPISerializer,
    KPIAttendingSerializer,
    KPICompletionSerializer,
    KPICompletionToggleSerializer,
    KPIDayTargetSerializer,
    KPIDetailsSerializer,
    KPISummarySerializer,
    KPITotalValueSerializer,
    KPIWeekAssignmentSerializer,
    KPIWeekAssignSerializer,
    KPIWeekTargetSerializer,
    LedgerChangeSerializer,
)
from apps.production.exceptions import InvalidRangeError
from apps.production.models import ChainKPI
from apps.production.services import ChainKPIService, KPIAssignmentService
from libs import BaseGenericViewSet

TAG = "11.2: Chain KPIs"
DATE_PATTERN = r"(?P<day>\d{4}-\d{2}-\d{2})"


def parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidRangeError(_("%(value)s is not a valid date"), value=value) from exc


def day_payload(result, day_date: date) -> dict:
    week, day = result.plan.find_day(day_date)
    data = day.to_dict(result.ledger)
    data["week_index"] = week.week_index
    data["week_target_value"] = week.target_value
    return data


def completion_payload(result, week_index: int) -> dict:
    week = result.plan.get_week(week_index)
    return {
        "changes": LedgerChangeSerializer(result.value, many=True).data,
        "week": week.to_dict(result.ledger),
        "is_accumulated": result.kpi.is_accumulated,
    }


KPI_ERROR_EXAMPLE = OpenApiExample(
    "Error - Over committed",
    value={
        "success": False,
        "data": None,
        "error": {
            "type": "client_error",
            "errors": [
                {
                    "code": "over_committed",
                    "detail": "Cannot set total to 8; 10 units already completed",
                    "attr": None,
                    "params": {"new_total": 8, "locked_sum": 10},
                }
            ],
        },
    },
    response_only=True,
    status_codes=["400"],
)


@extend_schema_view(
    list=extend_schema(
        summary="List chain KPIs",
        description="Filter by chain or by a date inside the period (active_on)",
        tags=[TAG],
    ),
    retrieve=extend_schema(
        summary="Get chain KPI",
        description="KPI target with its week/day tree; is_completed flags are read from the completion ledger",
        tags=[TAG],
    ),
    create=extend_schema(
        summary="Create chain KPI",
        description="Partition the total over the working days (Mon-Fri) of the period",
        tags=[TAG],
        request=ChainKPICreateSerializer,
        responses={201: ChainKPISerializer},
        examples=[
            OpenApiExample(
                "Request",
                value={
                    "chain": 1,
                    "total_value": 23,
                    "start_date": "2025-01-06",
                    "end_date": "2025-01-17",
                    "unit_label": "products",
                },
                request_only=True,
            )
        ],
    ),
    partial_update=extend_schema(
        summary="Update chain KPI details",
        description="Change unit_label and note; refused once the KPI has a completion record",
        tags=[TAG],
        request=KPIDetailsSerializer,
        responses={200: ChainKPISerializer},
    ),
    destroy=extend_schema(summary="Delete chain KPI", tags=[TAG]),
    total_value=extend_schema(
        summary="Re-declare KPI total",
        description="Completed days keep their value; the remainder is spread evenly over open attending days",
        tags=[TAG],
        request=KPITotalValueSerializer,
        responses={200: ChainKPISerializer},
        examples=[KPI_ERROR_EXAMPLE],
    ),
    week_target=extend_schema(
        summary="Set week target",
        description="Spread a week value over the open attending days of the week",
        tags=[TAG],
        request=KPIWeekTargetSerializer,
    ),
    day_target=extend_schema(summary="Set day target", tags=[TAG], request=KPIDayTargetSerializer),
    day_attending=extend_schema(
        summary="Set day attendance",
        description="A non-attending day drops to zero and is skipped by redistribution",
        tags=[TAG],
        request=KPIAttendingSerializer,
    ),
    toggle_week_completion=extend_schema(
        summary="Toggle week completion",
        description="Completing or reopening a week does the same to every working day of it",
        tags=[TAG],
        request=KPICompletionToggleSerializer,
    ),
    toggle_day_completion=extend_schema(
        summary="Toggle day completion",
        description="The week becomes complete exactly when all of its working days are complete",
        tags=[TAG],
        request=KPICompletionToggleSerializer,
    ),
    completions=extend_schema(
        summary="List completion records",
        tags=[TAG],
        responses={200: KPICompletionSerializer(many=True)},
    ),
    summary=extend_schema(summary="Get KPI summary", tags=[TAG], responses={200: KPISummarySerializer}),
    week_assignments=extend_schema(
        summary="List or assign a KPI week",
        description="GET lists the step assignments of the week. POST creates or replaces assignments per step; "
        "for every department and day the assigned amounts must stay within the day target.",
        tags=[TAG],
        request=KPIWeekAssignSerializer,
        responses={200: KPIWeekAssignmentSerializer(many=True)},
    ),
)
class ChainKPIViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    BaseGenericViewSet,
):
    """ViewSet for ChainKPI model."""

    queryset = ChainKPI.objects.select_related("chain", "created_by")
    serializer_class = ChainKPISerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ChainKPIFilterSet
    ordering_fields = ["start_date", "created_at"]
    ordering = ["-start_date"]

    default_roles = [UserRole.ADMIN, UserRole.LEADER]
    role_permissions = {
        "create": [UserRole.ADMIN],
        "partial_update": [UserRole.ADMIN],
        "destroy": [UserRole.ADMIN],
    }

    def get_serializer_class(self):
        if self.action == "list":
            return ChainKPIListSerializer
        if self.action == "create":
            return ChainKPICreateSerializer
        return ChainKPISerializer

    def _validated(self, serializer_class):
        serializer = serializer_class(data=self.request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def partial_update(self, request, *args, **kwargs):
        data = self._validated(KPIDetailsSerializer)
        kpi = ChainKPIService.update_details(
            self.get_object(),
            unit_label=data.get("unit_label"),
            note=data.get("note"),
        )
        return Response(ChainKPISerializer(kpi).data)

    @action(detail=True, methods=["patch"], url_path="total-value")
    def total_value(self, request, pk=None):
        data = self._validated(KPITotalValueSerializer)
        result = ChainKPIService.update_total(self.get_object(), data["total_value"], actor=request.user)
        return Response(ChainKPISerializer(result.kpi).data)

    @action(detail=True, methods=["patch"], url_path=r"weeks/(?P<week_index>\d+)/target")
    def week_target(self, request, pk=None, week_index=None):
        data = self._validated(KPIWeekTargetSerializer)
        week_index = int(week_index)
        result = ChainKPIService.set_week_target(
            self.get_object(),
            week_index,
            data["target_value"],
            scope=data["scope"],
            actor=request.user,
        )
        return Response(result.value.to_dict(result.ledger))

    @action(detail=True, methods=["patch"], url_path=rf"days/{DATE_PATTERN}/target")
    def day_target(self, request, pk=None, day=None):
        data = self._validated(KPIDayTargetSerializer)
        day_date = parse_day(day)
        result = ChainKPIService.set_day_target(self.get_object(), day_date, data["target_value"], actor=request.user)
        return Response(day_payload(result, day_date))

    @action(detail=True, methods=["patch"], url_path=rf"days/{DATE_PATTERN}/attending")
    def day_attending(self, request, pk=None, day=None):
        data = self._validated(KPIAttendingSerializer)
        day_date = parse_day(day)
        result = ChainKPIService.set_attending(
            self.get_object(),
            day_date,
            data["is_attending"],
            redistribute=data["redistribute"],
            actor=request.user,
        )
        return Response(day_payload(result, day_date))

    @action(detail=True, methods=["post"], url_path=r"weeks/(?P<week_index>\d+)/toggle-completion")
    def toggle_week_completion(self, request, pk=None, week_index=None):
        data = self._validated(KPICompletionToggleSerializer)
        week_index = int(week_index)
        kpi = self.get_object()
        if data.get("completed") is None:
            result = ChainKPIService.toggle_week_completion(kpi, week_index, actor=request.user)
        else:
            result = ChainKPIService.set_week_completion(kpi, week_index, data["completed"], actor=request.user)
        return Response(completion_payload(result, week_index))

    @action(detail=True, methods=["post"], url_path=rf"days/{DATE_PATTERN}/toggle-completion")
    def toggle_day_completion(self, request, pk=None, day=None):
        data = self._validated(KPICompletionToggleSerializer)
        day_date = parse_day(day)
        kpi = self.get_object()
        if data.get("completed") is None:
            result = ChainKPIService.toggle_day_completion(kpi, day_date, actor=request.user)
        else:
            result = ChainKPIService.set_day_completion(kpi, day_date, data["completed"], actor=request.user)
        week, _day = result.plan.find_day(day_date)
        return Response(completion_payload(result, week.week_index))

    @action(detail=True, methods=["get"], url_path="completions")
    def completions(self, request, pk=None):
        queryset = ChainKPIService.completions(self.get_object())
        return Response(KPICompletionSerializer(queryset, many=True).data)

    @action(detail=True, methods=["get"], url_path="summary")
    def summary(self, request, pk=None):
        return Response(KPISummarySerializer(ChainKPIService.summary(self.get_object())).data)

    @action(detail=True, methods=["get", "post"], url_path=r"weeks/(?P<week_index>\d+)/assignments")
    def week_assignments(self, request, pk=None, week_index=None):
        kpi = self.get_object()
        week_index = int(week_index)
        if request.method == "POST":
            data = self._validated(KPIWeekAssignSerializer)
            KPIAssignmentService.assign_week(kpi, week_index, data["assignments"], actor=request.user)
        queryset = KPIAssignmentService.for_week(kpi, week_index)
        return Response(KPIWeekAssignmentSerializer(queryset, many=True).data)
