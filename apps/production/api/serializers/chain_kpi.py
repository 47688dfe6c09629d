from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.production.constants import CompletionKind, WeekTargetScope
from apps.production.models import ChainKPI, KPICompletion, ProductionChain
from apps.production.services import ChainKPIService


class ChainKPIListSerializer(serializers.ModelSerializer):
    """Serializer for ChainKPI list, without the week/day tree."""

    chain_name = serializers.CharField(source="chain.name", read_only=True)

    class Meta:
        model = ChainKPI
        fields = [
            "id",
            "chain",
            "chain_name",
            "total_value",
            "start_date",
            "end_date",
            "unit_label",
            "is_accumulated",
            "accumulated_at",
            "created_at",
        ]
        read_only_fields = fields


class ChainKPISerializer(serializers.ModelSerializer):
    """Serializer for ChainKPI with the week/day tree and projected completion flags."""

    weeks = serializers.SerializerMethodField()
    allocated_value = serializers.SerializerMethodField()

    class Meta:
        model = ChainKPI
        fields = [
            "id",
            "chain",
            "total_value",
            "allocated_value",
            "start_date",
            "end_date",
            "unit_label",
            "note",
            "version",
            "is_accumulated",
            "accumulated_at",
            "weeks",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_weeks(self, obj) -> list:
        return ChainKPIService.project(obj)["weeks"]

    def get_allocated_value(self, obj) -> int:
        return sum(week.get("target_value", 0) for week in obj.weeks)


class ChainKPICreateSerializer(serializers.Serializer):
    """Serializer for creating a KPI target; the quota is partitioned on save."""

    chain = serializers.PrimaryKeyRelatedField(queryset=ProductionChain.objects.all())
    total_value = serializers.IntegerField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    unit_label = serializers.CharField(max_length=50, required=False, allow_blank=True)
    note = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        overlapping = ChainKPIService.find_overlapping(attrs["chain"], attrs["start_date"], attrs["end_date"])
        if attrs["start_date"] <= attrs["end_date"] and overlapping.exists():
            raise serializers.ValidationError(
                {"start_date": _("The chain already has a KPI target overlapping this period")}
            )
        return attrs

    def create(self, validated_data):
        request = self.context.get("request")
        return ChainKPIService.create(
            chain=validated_data["chain"],
            total_value=validated_data["total_value"],
            start_date=validated_data["start_date"],
            end_date=validated_data["end_date"],
            unit_label=validated_data.get("unit_label") or None,
            note=validated_data.get("note", ""),
            created_by=getattr(request, "user", None),
        )

    def to_representation(self, instance):
        return ChainKPISerializer(instance, context=self.context).data


class KPIDetailsSerializer(serializers.Serializer):
    """Descriptive fields that stay editable until the first completion."""

    unit_label = serializers.CharField(max_length=50, required=False)
    note = serializers.CharField(required=False, allow_blank=True)


class KPITotalValueSerializer(serializers.Serializer):
    total_value = serializers.IntegerField(help_text="New declared total; the open remainder is redistributed")


class KPIWeekTargetSerializer(serializers.Serializer):
    target_value = serializers.IntegerField()
    scope = serializers.ChoiceField(
        choices=WeekTargetScope.choices,
        default=WeekTargetScope.WEEK_TOTAL,
        help_text="week_total: new week total; open_days: value spread over the open days only",
    )


class KPIDayTargetSerializer(serializers.Serializer):
    target_value = serializers.IntegerField()


class KPIAttendingSerializer(serializers.Serializer):
    is_attending = serializers.BooleanField()
    redistribute = serializers.BooleanField(
        default=False,
        help_text="Redistribute the declared total over the open days right after the change",
    )


class KPICompletionToggleSerializer(serializers.Serializer):
    """Optional explicit state; without it the unit is toggled."""

    completed = serializers.BooleanField(required=False, allow_null=True, default=None)


class KPICompletionSerializer(serializers.ModelSerializer):
    ref = serializers.SerializerMethodField()

    class Meta:
        model = KPICompletion
        fields = ["id", "kind", "week_index", "date", "ref", "recorded_by", "recorded_at"]
        read_only_fields = fields

    def get_ref(self, obj) -> str:
        return str(obj.week_index) if obj.kind == CompletionKind.WEEK else obj.date.isoformat()


class LedgerChangeSerializer(serializers.Serializer):
    kind = serializers.CharField()
    ref = serializers.SerializerMethodField()
    complete = serializers.BooleanField()

    def get_ref(self, obj) -> str:
        return obj.ref.isoformat() if obj.kind == CompletionKind.DAY else str(obj.ref)


class KPISummarySerializer(serializers.Serializer):
    kpi = serializers.IntegerField()
    unit_label = serializers.CharField()
    total_value = serializers.IntegerField()
    allocated_value = serializers.IntegerField()
    completed_value = serializers.IntegerField()
    open_value = serializers.IntegerField()
    working_day_count = serializers.IntegerField()
    completed_day_count = serializers.IntegerField()
    week_count = serializers.IntegerField()
    completed_week_count = serializers.IntegerField()
    is_balanced = serializers.BooleanField()
    is_accumulated = serializers.BooleanField()
    accumulated_at = serializers.DateTimeField(allow_null=True)
