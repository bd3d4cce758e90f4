from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsManager, IsVerified, BelongsToKhata
from .serializers import (
    BillSerializer,
    BillCreateSerializer,
    BillUpdateSerializer,
    ShareStatusSerializer,
    BillStatsSerializer,
)
from .services import (
    get_bill,
    create_bill,
    update_bill,
    delete_bill,
    list_room_bills,
    update_share_status,
    remind_unpaid,
    get_bill_stats,
    # Exceptions
    BillNotFoundError,
    ShareNotFoundError,
    InvalidShareError,
    InvalidShareStatusError,
    NoRoomError,
    InsufficientPermissionsError,
)


class BillPagination(PageNumberPagination):
    """Pagination for room bills (``?page=&limit=``)."""
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100


@extend_schema(
    request=BillCreateSerializer,
    responses={201: BillSerializer},
    description="Create a bill with per-member shares (room manager, verified email).",
    tags=['bills'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsVerified])
def bill_create(request):
    """Create a bill."""
    serializer = BillCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        bill = create_bill(user=request.user, **serializer.validated_data)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except (NoRoomError, InvalidShareError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Bill created successfully',
        'bill': BillSerializer(get_bill(bill_id=bill.id)).data,
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['GET'],
    responses={200: BillSerializer},
    description="Get a bill with its shares (room members).",
    tags=['bills'],
)
@extend_schema(
    methods=['PUT', 'PATCH'],
    request=BillUpdateSerializer,
    responses={200: BillSerializer},
    description="Update a bill and optionally replace its shares (room manager).",
    tags=['bills'],
)
@extend_schema(
    methods=['DELETE'],
    responses={200: None},
    description="Delete a bill (room manager).",
    tags=['bills'],
)
@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def bill_detail(request, bill_id):
    """Get, update or delete a bill."""
    if request.method == 'GET':
        try:
            bill = get_bill(bill_id=bill_id)
        except BillNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        if not request.user.belongs_to(bill.room.khata_id):
            return Response({'error': 'Not authorized'}, status=status.HTTP_403_FORBIDDEN)
        return Response(BillSerializer(bill).data)

    if not request.user.is_manager:
        return Response({'error': 'Manager access required'}, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        try:
            delete_bill(bill_id=bill_id, user=request.user)
        except BillNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response({'message': 'Bill deleted successfully'})

    serializer = BillUpdateSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    try:
        bill = update_bill(bill_id=bill_id, user=request.user, **serializer.validated_data)
    except BillNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except InvalidShareError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Bill updated successfully', 'bill': BillSerializer(bill).data})


@extend_schema(
    request=ShareStatusSerializer,
    responses={200: BillSerializer},
    description=(
        "Change the status of one member's share. Members may only mark their own "
        "share as Pending Approval; the manager may set any status."
    ),
    tags=['bills'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def share_status(request, bill_id, user_id):
    """Update a bill share's payment status."""
    serializer = ShareStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        bill = update_share_status(
            bill_id=bill_id,
            user_id=user_id,
            new_status=serializer.validated_data['status'],
            actor=request.user,
        )
    except InvalidShareStatusError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except (BillNotFoundError, ShareNotFoundError) as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Payment status updated successfully',
        'bill': BillSerializer(bill).data,
    })


@extend_schema(
    request=None,
    description="Remind every member whose share is Unpaid or Overdue (room manager).",
    tags=['bills'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManager])
def bill_remind(request, bill_id):
    """Send payment reminders for a bill."""
    try:
        count = remind_unpaid(bill_id=bill_id, actor=request.user)
    except BillNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    if count == 0:
        return Response({'message': 'No unpaid shares to remind', 'reminded': 0})
    return Response({'message': 'Payment reminders sent successfully', 'reminded': count})


@extend_schema(
    parameters=[
        OpenApiParameter('page', int, description='Page number'),
        OpenApiParameter('limit', int, description='Bills per page (default 20)'),
    ],
    responses={200: BillSerializer(many=True)},
    description="Bills of a room, latest due date first (room members).",
    tags=['bills'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def room_bills(request, khata_id):
    """List a room's bills."""
    paginator = BillPagination()
    page = paginator.paginate_queryset(list_room_bills(room=request.user.room), request)
    serializer = BillSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)


@extend_schema(
    responses={200: BillStatsSerializer},
    description="Totals of the caller's shares by status and pending payment approvals.",
    tags=['bills'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def room_bill_stats(request, khata_id):
    """Bill statistics for the caller."""
    stats = get_bill_stats(room=request.user.room, user=request.user)
    return Response(BillStatsSerializer(stats).data)
