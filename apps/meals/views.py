from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import BelongsToKhata, IsKhataManager, manages_room
from apps.core.dates import to_date
from .serializers import (
    MealSerializer,
    MealUpsertSerializer,
    MealRangeSerializer,
    FinalizeSerializer,
    MealFinalizationSerializer,
    MealHistorySerializer,
    MealSummarySerializer,
    MenuDaySerializer,
    MenuSaveSerializer,
    MenuDayUpdateSerializer,
    DutyAssignmentSerializer,
    RosterSaveSerializer,
)
from .services import (
    list_meals,
    list_user_meals,
    get_finalization,
    upsert_meal,
    finalize_day,
    get_meal_summary,
    get_meal_history,
    get_menu_days,
    save_menu,
    update_menu_day,
    get_roster,
    save_roster,
    # Exceptions
    DateFinalizedError,
    MemberNotFoundError,
    InvalidDayError,
    InsufficientPermissionsError,
)

RANGE_PARAMETERS = [
    OpenApiParameter('start_date', str, description='ISO date, inclusive'),
    OpenApiParameter('end_date', str, description='ISO date, inclusive'),
]


def _range(request):
    serializer = MealRangeSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# =============================================================================
# Meals
# =============================================================================

@extend_schema(
    methods=['GET'],
    parameters=RANGE_PARAMETERS,
    responses={200: MealSerializer(many=True)},
    description="Meals of the room, newest first.",
    tags=['meals'],
)
@extend_schema(
    methods=['POST'],
    request=MealUpsertSerializer,
    responses={200: MealSerializer},
    description="Record meals for a day. Managers may record any member's meals.",
    tags=['meals'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def meals(request, khata_id):
    """List or record meals."""
    room = request.user.room
    if request.method == 'GET':
        params = _range(request)
        items = list_meals(room=room, start_date=params.get('start_date'), end_date=params.get('end_date'))
        return Response(MealSerializer(items, many=True).data)

    serializer = MealUpsertSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        meal = upsert_meal(
            room=room,
            actor=request.user,
            day=data['date'],
            user_id=data.get('user_id'),
            breakfast=data.get('breakfast'),
            lunch=data.get('lunch'),
            dinner=data.get('dinner'),
        )
    except DateFinalizedError as e:
        return Response({'error': str(e), 'is_finalized': True}, status=status.HTTP_403_FORBIDDEN)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except MemberNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(MealSerializer(meal).data)


@extend_schema(
    request=FinalizeSerializer,
    responses={200: MealFinalizationSerializer, 201: MealFinalizationSerializer},
    description="Finalize a date so members can no longer change their meals (manager).",
    tags=['meals'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsKhataManager])
def finalize(request, khata_id):
    """Finalize a day."""
    serializer = FinalizeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        finalization, created = finalize_day(
            room=request.user.room, actor=request.user, day=serializer.validated_data['date']
        )
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(
        {
            'message': 'Date finalized' if created else 'Already finalized',
            'finalization': MealFinalizationSerializer(finalization).data,
        },
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@extend_schema(description="Whether a date is finalized.", tags=['meals'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def finalization(request, khata_id, day):
    """Finalization check for one date."""
    try:
        parsed = to_date(day)
    except ValueError:
        return Response({'error': 'Invalid date'}, status=status.HTTP_400_BAD_REQUEST)

    record = get_finalization(room=request.user.room, day=parsed)
    return Response({
        'is_finalized': record is not None,
        'finalization': MealFinalizationSerializer(record).data if record else None,
    })


@extend_schema(
    responses={200: MealSummarySerializer},
    description="Room and per-member meal totals.",
    tags=['meals'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def summary(request, khata_id):
    """Meal summary."""
    result = get_meal_summary(room=request.user.room, user=request.user)
    return Response(MealSummarySerializer(result).data)


@extend_schema(
    parameters=RANGE_PARAMETERS + [
        OpenApiParameter('user_id', str, description='Member filter (managers only)'),
    ],
    responses={200: MealHistorySerializer(many=True)},
    description="Latest meal changes. Members only see their own.",
    tags=['meals'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def history(request, khata_id):
    """Meal change history."""
    params = _range(request)
    items = get_meal_history(
        room=request.user.room,
        user=request.user,
        target_user_id=params.get('user_id'),
        start_date=params.get('start_date'),
        end_date=params.get('end_date'),
    )
    return Response(MealHistorySerializer(items, many=True).data)


@extend_schema(responses={200: MealSerializer(many=True)}, tags=['meals'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def user_meals(request, khata_id, user_id):
    """One member's meals."""
    items = list_user_meals(room=request.user.room, user_id=user_id)
    return Response(MealSerializer(items, many=True).data)


# =============================================================================
# Menu
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: MenuDaySerializer(many=True)},
    description="This week's menu, or the permanent menu when none was set.",
    tags=['menu'],
)
@extend_schema(
    methods=['POST'],
    request=MenuSaveSerializer,
    responses={200: MenuDaySerializer(many=True)},
    description="Replace this week's or the permanent menu (manager).",
    tags=['menu'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def menu(request, khata_id):
    """Get or save the menu."""
    room = request.user.room
    if request.method == 'GET':
        return Response(MenuDaySerializer(get_menu_days(room=room), many=True).data)

    if not manages_room(request.user, room):
        return Response({'error': IsKhataManager.message}, status=status.HTTP_403_FORBIDDEN)

    serializer = MenuSaveSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    days = save_menu(room=room, **serializer.validated_data)
    return Response(MenuDaySerializer(days, many=True).data)


@extend_schema(
    request=MenuDayUpdateSerializer,
    responses={200: MenuDaySerializer(many=True)},
    description="Change one day of this week's menu (manager).",
    tags=['menu'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsKhataManager])
def menu_day(request, khata_id, day):
    """Update one menu day."""
    serializer = MenuDayUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        days = update_menu_day(room=request.user.room, day=day, **serializer.validated_data)
    except InvalidDayError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(MenuDaySerializer(days, many=True).data)


# =============================================================================
# Shopping roster
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: DutyAssignmentSerializer(many=True)},
    description="This week's shopping roster.",
    tags=['shopping'],
)
@extend_schema(
    methods=['POST'],
    request=RosterSaveSerializer,
    responses={200: DutyAssignmentSerializer(many=True)},
    description="Replace this week's shopping roster (manager).",
    tags=['shopping'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def roster(request, khata_id):
    """Get or save the shopping roster."""
    room = request.user.room
    if request.method == 'GET':
        return Response(DutyAssignmentSerializer(get_roster(room=room), many=True).data)

    if not manages_room(request.user, room):
        return Response({'error': IsKhataManager.message}, status=status.HTTP_403_FORBIDDEN)

    serializer = RosterSaveSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        assignments = save_roster(room=room, items=serializer.validated_data['items'])
    except MemberNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(DutyAssignmentSerializer(assignments, many=True).data)
