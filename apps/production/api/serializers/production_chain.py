from rest_framework import serializers

from apps.hrm.models import Department
from apps.production.models import ProductionChain, ProductionChainStep
from apps.production.services import ProductionChainService


class ProductionChainStepSerializer(serializers.ModelSerializer):
    """Serializer for a chain step; ``step_order`` defaults to the position in the list."""

    step_order = serializers.IntegerField(min_value=1, required=False)
    department = serializers.PrimaryKeyRelatedField(queryset=Department.objects.all())
    department_name = serializers.CharField(source="department.name", read_only=True)

    class Meta:
        model = ProductionChainStep
        fields = ["id", "step_order", "department", "department_name", "title"]
        read_only_fields = ["id"]


class ProductionChainSerializer(serializers.ModelSerializer):
    """Serializer for ProductionChain with nested steps."""

    steps = ProductionChainStepSerializer(many=True)
    is_locked = serializers.SerializerMethodField(help_text="Whether any KPI unit of the chain is completed")

    class Meta:
        model = ProductionChain
        fields = [
            "id",
            "name",
            "description",
            "status",
            "steps",
            "is_locked",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "status", "is_locked", "created_by", "created_at", "updated_at"]

    def get_is_locked(self, obj) -> bool:
        return obj.has_completions()

    def create(self, validated_data):
        request = self.context.get("request")
        return ProductionChainService.create(
            name=validated_data["name"],
            description=validated_data.get("description", ""),
            steps=validated_data["steps"],
            created_by=getattr(request, "user", None),
        )

    def update(self, instance, validated_data):
        return ProductionChainService.update(
            instance,
            name=validated_data.get("name"),
            description=validated_data.get("description"),
            steps=validated_data.get("steps"),
        )


class ProductionChainActivitiesSerializer(serializers.Serializer):
    """Response serializer for the activities action."""

    chain = serializers.IntegerField()
    has_activities = serializers.BooleanField(help_text="Whether any KPI unit of the chain is completed")
    completion_count = serializers.IntegerField()
    completed_task_count = serializers.IntegerField()
    kpi_count = serializers.IntegerField()
    run_count = serializers.IntegerField()
