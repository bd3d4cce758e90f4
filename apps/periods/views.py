from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import CalculationPeriodSerializer, StartPeriodSerializer
from .services import (
    get_active_period,
    list_periods,
    start_period,
    end_period,
    # Exceptions
    PeriodNotFoundError,
    ActivePeriodExistsError,
    PeriodAlreadyEndedError,
    NoRoomError,
    InsufficientPermissionsError,
)


@extend_schema(
    methods=['GET'],
    responses={200: CalculationPeriodSerializer(many=True)},
    description="List the calculation periods of the caller's room, newest first.",
    tags=['periods'],
)
@extend_schema(
    methods=['POST'],
    request=StartPeriodSerializer,
    responses={201: CalculationPeriodSerializer},
    description="Start a calculation period (manager). Unassigned records join it.",
    tags=['periods'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def periods(request):
    """List or start calculation periods."""
    if request.method == 'GET':
        try:
            items = list_periods(user=request.user)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except NoRoomError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(CalculationPeriodSerializer(items, many=True).data)

    serializer = StartPeriodSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        period = start_period(user=request.user, name=serializer.validated_data['name'])
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except (NoRoomError, ActivePeriodExistsError, ValueError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(CalculationPeriodSerializer(period).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={200: CalculationPeriodSerializer},
    description="End an active calculation period (manager of the same room).",
    tags=['periods'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def end_period_view(request, period_id):
    """End a calculation period."""
    try:
        period = end_period(user=request.user, period_id=period_id)
    except PeriodNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except (NoRoomError, PeriodAlreadyEndedError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(CalculationPeriodSerializer(period).data)


@extend_schema(
    responses={200: CalculationPeriodSerializer},
    description="The caller's active calculation period, or null.",
    tags=['periods'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def active_period(request):
    """Get the active calculation period."""
    user = request.user
    period = get_active_period(user.room if user.belongs_to(user.khata_id) else None)
    return Response({
        'active_period': CalculationPeriodSerializer(period).data if period else None
    })
