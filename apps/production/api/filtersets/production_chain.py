"""FilterSet for ProductionChain model."""

import django_filters

from apps.production.constants import ChainStatus
from apps.production.models import ProductionChain


class ProductionChainFilterSet(django_filters.FilterSet):
    """FilterSet for ProductionChain model."""

    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    status = django_filters.ChoiceFilter(field_name="status", choices=ChainStatus.choices)
    department = django_filters.NumberFilter(field_name="steps__department__id", distinct=True)

    class Meta:
        model = ProductionChain
        fields = ["name", "status", "department"]
