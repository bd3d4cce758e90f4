from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, PolymorphicProxySerializer
from drf_spectacular.types import OpenApiTypes

from apps.accounts.permissions import BelongsToKhata
from .analytics import AnalyticsQueries, RANGES
from .serializers import (
    RangeQuerySerializer,
    ManagerDashboardSerializer,
    MemberDashboardSerializer,
    RoomAnalyticsSerializer,
)


@extend_schema(
    responses={
        200: PolymorphicProxySerializer(
            component_name='DashboardStats',
            serializers=[ManagerDashboardSerializer, MemberDashboardSerializer],
            resource_type_field_name=None,
        ),
    },
    description=(
        "Dashboard cards for the caller. Managers get bills, approvals and fund "
        "figures; members get their dues, meals and refundable amount."
    ),
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """Dashboard statistics - thin HTTP handler."""
    return Response(AnalyticsQueries.dashboard_stats(request.user))


@extend_schema(
    parameters=[
        OpenApiParameter('range', OpenApiTypes.STR, enum=list(RANGES), description='Report range'),
    ],
    responses={200: RoomAnalyticsSerializer},
    description="Totals, spending by category and a six-month trend for the room.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def room_analytics(request, khata_id):
    """Room analytics - thin HTTP handler."""
    query_serializer = RangeQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    data = AnalyticsQueries.room_analytics(
        request.user.room,
        range_name=query_serializer.validated_data['range'],
    )
    return Response(data)
