from .drf.base_viewset import BaseGenericViewSet, BaseModelViewSet, BaseReadOnlyModelViewSet
from .drf.pagination import PageNumberWithSizePagination
from .models import BaseModel
from .retry import retry

__all__ = [
    "BaseModel",
    "BaseGenericViewSet",
    "BaseModelViewSet",
    "BaseReadOnlyModelViewSet",
    "PageNumberWithSizePagination",
    "retry",
]
