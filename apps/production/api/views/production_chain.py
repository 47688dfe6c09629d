from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.response import Response

from apps.core.constants import UserRole
from apps.production.api.filtersets import ProductionChainFilterSet
from apps.production.api.serializers import (
    ChainRunSerializer,
    ProductionChainActivitiesSerializer,
    ProductionChainSerializer,
)
from apps.production.models import ProductionChain
from apps.production.services import ChainStepSequencer, ProductionChainService
from libs import BaseModelViewSet

TAG = "11.1: Production Chains"


@extend_schema_view(
    list=extend_schema(
        summary="List production chains",
        description="Retrieve production chains with their ordered steps",
        tags=[TAG],
    ),
    retrieve=extend_schema(summary="Get production chain details", tags=[TAG]),
    create=extend_schema(
        summary="Create production chain",
        description="Create a chain with ordered steps. Steps must span at least two departments "
        "and step orders must be contiguous starting at 1.",
        tags=[TAG],
        examples=[
            OpenApiExample(
                "Request",
                value={
                    "name": "Furniture assembly",
                    "description": "",
                    "steps": [
                        {"department": 1, "title": "Cutting"},
                        {"department": 2, "title": "Assembly"},
                    ],
                },
                request_only=True,
            ),
            OpenApiExample(
                "Error - Single department",
                value={
                    "success": False,
                    "data": None,
                    "error": {
                        "type": "client_error",
                        "errors": [
                            {
                                "code": "invalid_chain_steps",
                                "detail": "A production chain needs at least 2 distinct departments, got 1",
                                "attr": None,
                                "params": {"minimum": 2, "count": 1},
                            }
                        ],
                    },
                },
                response_only=True,
                status_codes=["400"],
            ),
        ],
    ),
    update=extend_schema(
        summary="Update production chain",
        description="Once any KPI unit of the chain is completed only step titles change and steps may be appended.",
        tags=[TAG],
    ),
    partial_update=extend_schema(summary="Partially update production chain", tags=[TAG]),
    destroy=extend_schema(
        summary="Delete production chain",
        description="Only chains without completed KPI units can be deleted",
        tags=[TAG],
    ),
    disable=extend_schema(
        summary="Disable production chain",
        description="Only chains with completed KPI units can be disabled",
        tags=[TAG],
        request=None,
        responses={200: ProductionChainSerializer},
    ),
    enable=extend_schema(
        summary="Enable production chain",
        tags=[TAG],
        request=None,
        responses={200: ProductionChainSerializer},
    ),
    activities=extend_schema(
        summary="Check production chain activities",
        description="Whether the chain has completed KPI units, which locks its steps",
        tags=[TAG],
        responses={200: ProductionChainActivitiesSerializer},
    ),
    start=extend_schema(
        summary="Start a chain run",
        description="Create a run and assign the first step's task to a member of its department",
        tags=[TAG],
        request=None,
        responses={201: ChainRunSerializer},
    ),
)
class ProductionChainViewSet(BaseModelViewSet):
    """ViewSet for ProductionChain model."""

    queryset = ProductionChain.objects.prefetch_related("steps__department").select_related("created_by")
    serializer_class = ProductionChainSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = ProductionChainFilterSet
    search_fields = ["name", "description"]
    ordering_fields = ["name", "created_at"]
    ordering = ["-created_at"]

    default_roles = [UserRole.ADMIN, UserRole.LEADER]
    role_permissions = {
        "create": [UserRole.ADMIN],
        "update": [UserRole.ADMIN],
        "partial_update": [UserRole.ADMIN],
        "destroy": [UserRole.ADMIN],
        "disable": [UserRole.ADMIN],
        "enable": [UserRole.ADMIN],
        "start": [UserRole.ADMIN],
    }

    def perform_destroy(self, instance):
        ProductionChainService.delete(instance)

    @action(detail=True, methods=["post"], url_path="disable")
    def disable(self, request, pk=None):
        chain = ProductionChainService.disable(self.get_object())
        return Response(self.get_serializer(chain).data)

    @action(detail=True, methods=["post"], url_path="enable")
    def enable(self, request, pk=None):
        chain = ProductionChainService.enable(self.get_object())
        return Response(self.get_serializer(chain).data)

    @action(detail=True, methods=["get"], url_path="activities")
    def activities(self, request, pk=None):
        data = ProductionChainService.activities(self.get_object())
        return Response(ProductionChainActivitiesSerializer(data).data)

    @action(detail=True, methods=["post"], url_path="start")
    def start(self, request, pk=None):
        run = ChainStepSequencer.start(self.get_object(), started_by=request.user)
        return Response(ChainRunSerializer(run).data, status=status.HTTP_201_CREATED)
