from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsManager
from .serializers import (
    NotificationSerializer,
    NotificationCreateSerializer,
    NotificationReadSerializer,
    PushSubscribeSerializer,
    PushUnsubscribeSerializer,
    ReminderSerializer,
)
from .services import (
    list_notifications,
    unread_count,
    create_notification,
    mark_read,
    mark_all_read,
    delete_notification,
    subscribe,
    unsubscribe,
    send_test_push,
    send_reminder,
    # Exceptions
    NotificationNotFoundError,
    InvalidReminderError,
    InsufficientPermissionsError,
)


# =============================================================================
# Inbox
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: NotificationSerializer(many=True)},
    description="The caller's 50 most recent notifications.",
    tags=['notifications'],
)
@extend_schema(
    methods=['POST'],
    request=NotificationCreateSerializer,
    responses={201: NotificationSerializer},
    description="Notify yourself, or (manager) a member of your room.",
    tags=['notifications'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def notifications(request):
    """List or create notifications."""
    if request.method == 'GET':
        return Response(NotificationSerializer(list_notifications(user=request.user), many=True).data)

    serializer = NotificationCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        notification = create_notification(
            sender=request.user,
            recipient_id=data.get('user_id'),
            title=data['title'],
            message=data['message'],
            type=data['type'],
            link=data['link'],
            action_text=data['action_text'],
            related_id=data['related_id'],
        )
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(NotificationSerializer(notification).data, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['PUT', 'PATCH'],
    request=NotificationReadSerializer,
    responses={200: NotificationSerializer},
    description="Set the read flag of one of your notifications.",
    tags=['notifications'],
)
@extend_schema(methods=['DELETE'], responses={204: None}, tags=['notifications'])
@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def notification_detail(request, notification_id):
    """Update or delete a notification."""
    try:
        if request.method == 'DELETE':
            delete_notification(user=request.user, notification_id=notification_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = NotificationReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        notification = mark_read(
            user=request.user, notification_id=notification_id, read=serializer.validated_data['read']
        )
    except NotificationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(NotificationSerializer(notification).data)


@extend_schema(request=None, responses={200: NotificationSerializer}, tags=['notifications'])
@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def notification_read(request, notification_id):
    """Mark one notification read."""
    try:
        notification = mark_read(user=request.user, notification_id=notification_id)
    except NotificationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(NotificationSerializer(notification).data)


@extend_schema(request=None, tags=['notifications'])
@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated])
def mark_all_read_view(request):
    """Mark every notification of the caller read."""
    updated = mark_all_read(user=request.user)
    return Response({'message': 'All notifications marked as read', 'updated': updated})


@extend_schema(tags=['notifications'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def unread_count_view(request):
    """Number of unread notifications."""
    return Response({'count': unread_count(user=request.user)})


# =============================================================================
# Web Push
# =============================================================================

@extend_schema(
    methods=['POST'],
    request=PushSubscribeSerializer,
    description="Register a browser push subscription.",
    tags=['push'],
)
@extend_schema(
    methods=['DELETE'],
    request=PushUnsubscribeSerializer,
    description="Remove a browser push subscription.",
    tags=['push'],
)
@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def push_subscription(request):
    """Subscribe or unsubscribe a browser endpoint."""
    if request.method == 'DELETE':
        serializer = PushUnsubscribeSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'error': 'Endpoint is required'}, status=status.HTTP_400_BAD_REQUEST)
        unsubscribe(user=request.user, endpoint=serializer.validated_data['endpoint'])
        return Response({'success': True})

    serializer = PushSubscribeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'Invalid subscription data'}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    subscribe(
        user=request.user,
        endpoint=data['endpoint'],
        p256dh=data['keys']['p256dh'],
        auth=data['keys']['auth'],
    )
    return Response({'success': True}, status=status.HTTP_201_CREATED)


@extend_schema(request=None, description="Send a test push to every device of the caller.", tags=['push'])
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def push_test(request):
    """Test push."""
    try:
        result = send_test_push(user=request.user)
    except NotificationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response({'message': 'Test notification sent', **result})


# =============================================================================
# Reminders
# =============================================================================

@extend_schema(
    request=ReminderSerializer,
    description="Send a reminder to the members it concerns (room manager).",
    tags=['notifications'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManager])
def reminders(request):
    """Send a reminder."""
    serializer = ReminderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({'error': 'khata_id and type are required'}, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    try:
        result = send_reminder(
            sender=request.user,
            khata_id=data['khata_id'],
            reminder_type=data['type'],
            target_user_ids=data['target_user_ids'],
            bill_id=data.get('bill_id'),
            message=data['message'],
        )
    except InvalidReminderError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response({'success': True, **result})
