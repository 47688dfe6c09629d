"""FilterSet for ChainTask model."""

import django_filters

from apps.production.constants import ChainTaskStatus
from apps.production.models import ChainTask


class ChainTaskFilterSet(django_filters.FilterSet):
    chain = django_filters.NumberFilter(field_name="run__chain__id")
    run = django_filters.NumberFilter(field_name="run__id")
    department = django_filters.NumberFilter(field_name="department__id")
    status = django_filters.ChoiceFilter(field_name="status", choices=ChainTaskStatus.choices)

    class Meta:
        model = ChainTask
        fields = ["chain", "run", "department", "status"]
