from datetime import date

from django.contrib.auth import get_user_model
from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.production.models import KPIWeekAssignment, ProductionChainStep


def _date_keys(value: dict, field: str) -> dict:
    converted = {}
    for key, item in value.items():
        try:
            converted[date.fromisoformat(key)] = item
        except ValueError as exc:
            raise serializers.ValidationError({field: _("%(key)s is not a valid date") % {"key": key}}) from exc
    return converted


class KPIWeekAssignmentSerializer(serializers.ModelSerializer):
    step_order = serializers.IntegerField(source="step.step_order", read_only=True)
    department = serializers.IntegerField(source="step.department_id", read_only=True)
    assigned_value = serializers.IntegerField(read_only=True)

    class Meta:
        model = KPIWeekAssignment
        fields = [
            "id",
            "kpi",
            "week_index",
            "step",
            "step_order",
            "department",
            "assignee",
            "day_amounts",
            "day_titles",
            "day_results",
            "assigned_value",
            "accepted",
            "accepted_by",
            "accepted_at",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields


class StepAssignmentInputSerializer(serializers.Serializer):
    step = serializers.PrimaryKeyRelatedField(queryset=ProductionChainStep.objects.all())
    assignee = serializers.PrimaryKeyRelatedField(
        queryset=get_user_model().objects.all(),
        required=False,
        allow_null=True,
        default=None,
    )
    day_amounts = serializers.DictField(child=serializers.IntegerField(), help_text="ISO date to quantity")
    day_titles = serializers.DictField(
        child=serializers.ListField(child=serializers.CharField(max_length=255)),
        required=False,
        default=dict,
        help_text="ISO date to work item titles",
    )

    def validate(self, attrs):
        attrs["day_amounts"] = _date_keys(attrs["day_amounts"], "day_amounts")
        attrs["day_titles"] = _date_keys(attrs["day_titles"], "day_titles")
        return attrs


class KPIWeekAssignSerializer(serializers.Serializer):
    assignments = StepAssignmentInputSerializer(many=True, allow_empty=False)


class AssignmentDayResultSerializer(serializers.Serializer):
    date = serializers.DateField()
    link = serializers.URLField(max_length=500)
    slot_index = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
