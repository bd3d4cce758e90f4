from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import BelongsToKhata, IsKhataManager, IsMasterManager, manages_room
from apps.accounts.serializers import UserPublicSerializer
from apps.core.exceptions import InvalidTransitionError
from .models import Room
from .serializers import (
    RoomSerializer,
    RoomDetailSerializer,
    RoomCreateSerializer,
    JoinRoomSerializer,
    PendingMemberSerializer,
    PendingCountsSerializer,
    MemberCreateSerializer,
    MemberCreatedSerializer,
    StaffSerializer,
)
from .services import (
    create_room,
    get_room_details,
    delete_room,
    regenerate_room_code,
    get_pending_counts,
    join_room,
    approve_member,
    reject_member,
    leave_room,
    list_members,
    list_pending_members,
    create_member,
    list_staff,
    add_staff,
    update_staff,
    remove_staff,
    # Exceptions
    RoomNotFoundError,
    DuplicateRoomError,
    AlreadyInRoomError,
    NotMemberError,
    MemberNotFoundError,
    ManagerCannotLeaveError,
    InvalidMemberDataError,
    StaffNotFoundError,
    InsufficientPermissionsError,
)

USER_ID_PATTERN = r'(?P<user_id>[0-9a-fA-F-]{36})'


class RoomViewSet(viewsets.GenericViewSet):
    """
    Rooms addressed by their public code.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    create: Create a room (manager)
    retrieve: Room details (members and manager)
    destroy: Delete the room (room manager)
    """

    queryset = Room.objects.select_related('manager')
    serializer_class = RoomSerializer
    permission_classes = [IsAuthenticated]
    lookup_field = 'khata_id'
    lookup_value_regex = '[A-Za-z0-9_-]+'

    @extend_schema(request=RoomCreateSerializer, responses={201: RoomSerializer})
    def create(self, request, *args, **kwargs):
        """Create a room and become its manager."""
        serializer = RoomCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            room = create_room(manager=request.user, **serializer.validated_data)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (AlreadyInRoomError, DuplicateRoomError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(RoomSerializer(room).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: RoomDetailSerializer})
    def retrieve(self, request, khata_id=None):
        """Room details with member count."""
        try:
            details = get_room_details(khata_id=khata_id, user=request.user)
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(RoomDetailSerializer(details).data)

    def destroy(self, request, khata_id=None):
        """Delete the room; every resident goes back to NoRoom."""
        try:
            delete_room(khata_id=khata_id, user=request.user)
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=JoinRoomSerializer, responses={201: PendingMemberSerializer})
    @action(detail=False, methods=['post'])
    def join(self, request):
        """Ask to join a room by its code."""
        serializer = JoinRoomSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = join_room(user=request.user, khata_id=serializer.validated_data['khata_id'])
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AlreadyInRoomError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {'message': 'Join request sent', 'membership': PendingMemberSerializer(membership).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: UserPublicSerializer(many=True)})
    @action(detail=True, methods=['get'], permission_classes=[IsAuthenticated, BelongsToKhata])
    def members(self, request, khata_id=None):
        """Approved members, manager included."""
        return Response(UserPublicSerializer(list_members(room=request.user.room), many=True).data)

    @extend_schema(responses={200: PendingMemberSerializer(many=True)})
    @action(detail=True, methods=['get'], permission_classes=[IsAuthenticated, IsKhataManager])
    def pending(self, request, khata_id=None):
        """Pending join requests (room manager)."""
        items = list_pending_members(room=request.user.room)
        return Response(PendingMemberSerializer(items, many=True).data)

    @extend_schema(responses={200: PendingCountsSerializer})
    @action(
        detail=True,
        methods=['get'],
        url_path='pending-counts',
        permission_classes=[IsAuthenticated, BelongsToKhata],
    )
    def pending_counts(self, request, khata_id=None):
        """Items waiting for the manager."""
        return Response(PendingCountsSerializer(get_pending_counts(room=request.user.room)).data)

    @extend_schema(request=None, responses={200: PendingMemberSerializer})
    @action(detail=True, methods=['post', 'put'], url_path=f'approve/{USER_ID_PATTERN}')
    def approve(self, request, khata_id=None, user_id=None):
        """Approve a join request (room manager)."""
        try:
            membership = approve_member(khata_id=khata_id, user_id=user_id, approved_by=request.user)
        except (RoomNotFoundError, MemberNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'message': 'Member approved', 'membership': PendingMemberSerializer(membership).data})

    @extend_schema(request=None)
    @action(detail=True, methods=['post', 'put'], url_path=f'reject/{USER_ID_PATTERN}')
    def reject(self, request, khata_id=None, user_id=None):
        """Reject a join request (room manager)."""
        try:
            reject_member(khata_id=khata_id, user_id=user_id, rejected_by=request.user)
        except (RoomNotFoundError, MemberNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidTransitionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'message': 'Member rejected'})

    @extend_schema(request=None)
    @action(detail=True, methods=['post'])
    def leave(self, request, khata_id=None):
        """Leave the room or withdraw a pending request."""
        try:
            leave_room(khata_id=khata_id, user=request.user)
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (NotMemberError, ManagerCannotLeaveError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({'message': 'Successfully left the room'})

    @extend_schema(request=None)
    @action(detail=True, methods=['post'], url_path='regenerate-code')
    def regenerate_code(self, request, khata_id=None):
        """Give the room a fresh code (room manager)."""
        try:
            new_code = regenerate_room_code(khata_id=khata_id, user=request.user)
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response({'khata_id': new_code, 'message': 'Room code regenerated successfully'})

    @extend_schema(request=MemberCreateSerializer, responses={201: MemberCreatedSerializer})
    @action(
        detail=True,
        methods=['post'],
        url_path='members/create',
        permission_classes=[IsAuthenticated, IsMasterManager],
    )
    def create_member(self, request, khata_id=None):
        """Create an approved member directly (master manager)."""
        serializer = MemberCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = create_member(khata_id=khata_id, created_by=request.user, **serializer.validated_data)
        except RoomNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidMemberDataError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except DjangoValidationError as e:
            return Response({'error': ' '.join(e.messages)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(MemberCreatedSerializer(result).data, status=status.HTTP_201_CREATED)


# =============================================================================
# Staff
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: StaffSerializer(many=True)},
    description="Household staff of the room.",
    tags=['staff'],
)
@extend_schema(
    methods=['POST'],
    request=StaffSerializer,
    responses={201: StaffSerializer},
    description="Add a staff entry (room manager).",
    tags=['staff'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def staff(request, khata_id):
    """List or add staff."""
    room = request.user.room
    if request.method == 'GET':
        return Response(StaffSerializer(list_staff(room=room), many=True).data)

    if not manages_room(request.user, room):
        return Response({'error': IsKhataManager.message}, status=status.HTTP_403_FORBIDDEN)

    serializer = StaffSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    entry = add_staff(room=room, **serializer.validated_data)
    return Response(StaffSerializer(entry).data, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['PUT', 'PATCH'],
    request=StaffSerializer,
    responses={200: StaffSerializer},
    tags=['staff'],
)
@extend_schema(methods=['DELETE'], responses={204: None}, tags=['staff'])
@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsKhataManager])
def staff_detail(request, khata_id, staff_id):
    """Update or remove a staff entry (room manager)."""
    room = request.user.room
    try:
        if request.method == 'DELETE':
            remove_staff(room=room, staff_id=staff_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = StaffSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        entry = update_staff(room=room, staff_id=staff_id, **serializer.validated_data)
    except StaffNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(StaffSerializer(entry).data)
