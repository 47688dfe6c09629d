from rest_framework import serializers

from apps.production.constants import ChainTaskStatus
from apps.production.models import ChainRun, ChainTask


class ChainTaskSerializer(serializers.ModelSerializer):
    step_order = serializers.IntegerField(source="step.step_order", read_only=True)
    chain = serializers.IntegerField(source="run.chain_id", read_only=True)
    status_display = serializers.SerializerMethodField()

    class Meta:
        model = ChainTask
        fields = [
            "id",
            "run",
            "chain",
            "step",
            "step_order",
            "department",
            "assignee",
            "title",
            "status",
            "status_display",
            "completed_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_status_display(self, obj) -> str:
        return str(ChainTaskStatus.get_label(obj.status))


class ChainRunSerializer(serializers.ModelSerializer):
    tasks = ChainTaskSerializer(many=True, read_only=True)

    class Meta:
        model = ChainRun
        fields = ["id", "chain", "current_step_order", "status", "started_by", "completed_at", "tasks", "created_at"]
        read_only_fields = fields
