from rest_framework.routers import DefaultRouter

from apps.production.api.views import (
    ChainKPIViewSet,
    ChainTaskViewSet,
    KPIWeekAssignmentViewSet,
    ProductionChainViewSet,
)

app_name = "production"

router = DefaultRouter()
router.register(r"chains", ProductionChainViewSet, basename="chains")
router.register(r"kpis", ChainKPIViewSet, basename="kpis")
router.register(r"tasks", ChainTaskViewSet, basename="tasks")
router.register(r"assignments", KPIWeekAssignmentViewSet, basename="assignments")

urlpatterns = router.urls
