from django.contrib import admin

from .models import (
    ChainKPI,
    ChainRun,
    ChainTask,
    KPICompletion,
    KPIWeekAssignment,
    ProductionChain,
    ProductionChainStep,
)


class ProductionChainStepInline(admin.TabularInline):
    model = ProductionChainStep
    extra = 0


@admin.register(ProductionChain)
class ProductionChainAdmin(admin.ModelAdmin):
    list_display = ["name", "status", "created_by", "created_at"]
    list_filter = ["status"]
    search_fields = ["name"]
    inlines = [ProductionChainStepInline]


@admin.register(ChainKPI)
class ChainKPIAdmin(admin.ModelAdmin):
    list_display = ["chain", "start_date", "end_date", "total_value", "is_accumulated"]
    list_filter = ["is_accumulated"]
    readonly_fields = ["weeks", "version"]


@admin.register(KPICompletion)
class KPICompletionAdmin(admin.ModelAdmin):
    list_display = ["kpi", "kind", "week_index", "date", "recorded_by", "recorded_at"]
    list_filter = ["kind"]


@admin.register(KPIWeekAssignment)
class KPIWeekAssignmentAdmin(admin.ModelAdmin):
    list_display = ["kpi", "week_index", "step", "assignee", "accepted"]
    list_filter = ["accepted"]
    readonly_fields = ["day_results"]


admin.site.register(ChainRun)
admin.site.register(ChainTask)
