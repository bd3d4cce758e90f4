from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import BelongsToKhata, IsKhataManager
from .serializers import (
    DepositSerializer,
    ExpenseSerializer,
    DepositCreateSerializer,
    ExpenseCreateSerializer,
    RejectSerializer,
    AdjustFundSerializer,
    BalancesSerializer,
    FundSummarySerializer,
    MealBalanceSerializer,
)
from .services import (
    list_deposits,
    list_expenses,
    create_deposit,
    create_expense,
    approve_deposit,
    reject_deposit,
    approve_expense,
    reject_expense,
    get_balances,
    get_fund_summary,
    get_meal_balance,
    adjust_fund,
    list_shopping_members,
    # Exceptions
    DepositNotFoundError,
    ExpenseNotFoundError,
    MemberNotFoundError,
    InvalidAdjustmentError,
    InsufficientPermissionsError,
    InvalidTransitionError,
)


def _review(action, record_kwarg, serializer_class, request, record_id, **extra):
    try:
        record = action(**{record_kwarg: record_id}, room=request.user.room, actor=request.user, **extra)
    except (DepositNotFoundError, ExpenseNotFoundError) as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except InvalidTransitionError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(serializer_class(record).data)


# =============================================================================
# Deposits
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: DepositSerializer(many=True)},
    description="All deposits of the room, newest first.",
    tags=['deposits'],
)
@extend_schema(
    methods=['POST'],
    request=DepositCreateSerializer,
    responses={201: DepositSerializer},
    description="Submit a deposit for the manager's approval.",
    tags=['deposits'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def deposits(request, khata_id):
    """List or submit deposits."""
    room = request.user.room
    if request.method == 'GET':
        return Response(DepositSerializer(list_deposits(room=room), many=True).data)

    serializer = DepositCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    deposit = create_deposit(user=request.user, room=room, **serializer.validated_data)
    return Response(DepositSerializer(deposit).data, status=status.HTTP_201_CREATED)


@extend_schema(request=None, responses={200: DepositSerializer}, tags=['deposits'])
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsKhataManager])
def deposit_approve(request, khata_id, deposit_id):
    """Approve a pending deposit."""
    return _review(approve_deposit, 'deposit_id', DepositSerializer, request, deposit_id)


@extend_schema(request=RejectSerializer, responses={200: DepositSerializer}, tags=['deposits'])
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsKhataManager])
def deposit_reject(request, khata_id, deposit_id):
    """Reject a pending deposit with an optional reason."""
    serializer = RejectSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return _review(
        reject_deposit, 'deposit_id', DepositSerializer, request, deposit_id,
        reason=serializer.validated_data['reason'],
    )


# =============================================================================
# Expenses
# =============================================================================

@extend_schema(
    methods=['GET'],
    responses={200: ExpenseSerializer(many=True)},
    description="All expenses of the room, newest first.",
    tags=['expenses'],
)
@extend_schema(
    methods=['POST'],
    request=ExpenseCreateSerializer,
    responses={201: ExpenseSerializer},
    description="Submit an expense for the manager's approval.",
    tags=['expenses'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def expenses(request, khata_id):
    """List or submit expenses."""
    room = request.user.room
    if request.method == 'GET':
        return Response(ExpenseSerializer(list_expenses(room=room), many=True).data)

    serializer = ExpenseCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    expense = create_expense(user=request.user, room=room, **serializer.validated_data)
    return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


@extend_schema(request=None, responses={200: ExpenseSerializer}, tags=['expenses'])
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsKhataManager])
def expense_approve(request, khata_id, expense_id):
    """Approve a pending expense."""
    return _review(approve_expense, 'expense_id', ExpenseSerializer, request, expense_id)


@extend_schema(request=RejectSerializer, responses={200: ExpenseSerializer}, tags=['expenses'])
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsKhataManager])
def expense_reject(request, khata_id, expense_id):
    """Reject a pending expense with an optional reason."""
    serializer = RejectSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return _review(
        reject_expense, 'expense_id', ExpenseSerializer, request, expense_id,
        reason=serializer.validated_data['reason'],
    )


# =============================================================================
# Fund accounting
# =============================================================================

@extend_schema(
    responses={200: BalancesSerializer},
    description="Meal rate and every member's fund balance.",
    tags=['shopping'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def balances(request, khata_id):
    """Per-member balances."""
    return Response(BalancesSerializer(get_balances(room=request.user.room)).data)


@extend_schema(
    responses={200: FundSummarySerializer},
    description="Room fund status and the caller's refundable amount.",
    tags=['shopping'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def fund_summary(request, khata_id):
    """Fund summary."""
    summary = get_fund_summary(room=request.user.room, user=request.user)
    return Response(FundSummarySerializer(summary).data)


@extend_schema(
    request=AdjustFundSerializer,
    description="Add to (ADD) or deduct from (DEDUCT) a member's fund (room manager).",
    tags=['shopping'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsKhataManager])
def adjust(request, khata_id):
    """Manual fund adjustment."""
    serializer = AdjustFundSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        record = adjust_fund(
            room=request.user.room,
            actor=request.user,
            user_id=data.get('user_id'),
            adjustment_type=data.get('type'),
            amount=data.get('amount'),
            reason=data.get('reason', ''),
        )
    except InvalidAdjustmentError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except MemberNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    result = DepositSerializer(record) if data.get('type') == 'ADD' else ExpenseSerializer(record)
    return Response({'success': True, 'result': result.data})


@extend_schema(description="Approved members for the shopping screens.", tags=['shopping'])
@api_view(['GET'])
@permission_classes([IsAuthenticated, BelongsToKhata])
def shopping_members(request, khata_id):
    """Approved members (id and name)."""
    return Response(list_shopping_members(room=request.user.room))


@extend_schema(
    responses={200: MealBalanceSerializer},
    description="A user's approved deposits minus approved expenses (self or manager).",
    tags=['shopping'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def meal_balance(request, user_id):
    """Meal fund balance of one user."""
    try:
        result = get_meal_balance(user_id=user_id, requested_by=request.user)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    return Response(MealBalanceSerializer(result).data)
