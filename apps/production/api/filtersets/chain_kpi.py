"""FilterSet for ChainKPI model."""

import django_filters

from apps.production.models import ChainKPI


class ChainKPIFilterSet(django_filters.FilterSet):
    """FilterSet for ChainKPI model."""

    chain = django_filters.NumberFilter(field_name="chain__id")
    active_on = django_filters.DateFilter(method="filter_active_on")
    is_accumulated = django_filters.BooleanFilter(field_name="is_accumulated")

    class Meta:
        model = ChainKPI
        fields = ["chain", "active_on", "is_accumulated"]

    def filter_active_on(self, queryset, name, value):
        """Targets whose period contains the given date."""
        if not value:
            return queryset
        return queryset.filter(start_date__lte=value, end_date__gte=value)
