"""FilterSet for KPIWeekAssignment model."""

import django_filters

from apps.production.models import KPIWeekAssignment


class KPIWeekAssignmentFilterSet(django_filters.FilterSet):
    kpi = django_filters.NumberFilter(field_name="kpi__id")
    chain = django_filters.NumberFilter(field_name="kpi__chain__id")
    week_index = django_filters.NumberFilter(field_name="week_index")
    accepted = django_filters.BooleanFilter(field_name="accepted")

    class Meta:
        model = KPIWeekAssignment
        fields = ["kpi", "chain", "week_index", "accepted"]
