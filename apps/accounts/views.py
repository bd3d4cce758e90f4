from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .permissions import IsMasterManager
from .serializers import (
    UserSerializer,
    SignupSerializer,
    LoginSerializer,
    RefreshSerializer,
    EmailSerializer,
    VerifyEmailSerializer,
    ResetPasswordSerializer,
    ProfileUpdateSerializer,
    ChangePasswordSerializer,
    AdminMemberUpdateSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    issue_tokens,
    rotate_tokens,
    request_password_reset,
    confirm_password_reset,
    verify_user_email,
    resend_verification_otp,
    update_profile,
    change_password,
    update_member_as_admin,
    invalidate_user,
    # Exceptions
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
    InvalidOTPError,
    AlreadyVerifiedError,
    RateLimitedError,
    UserNotFoundError,
    PasswordChangeError,
    InsufficientPermissionsError,
)

GENERIC_RESET_MESSAGE = 'If an account exists for this email, a reset code has been sent.'


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def set_auth_cookies(response, tokens):
    """Attach both tokens as httpOnly cookies."""
    jwt = settings.SIMPLE_JWT
    for name, value, lifetime in (
        (settings.AUTH_COOKIE_ACCESS, tokens['access'], jwt['ACCESS_TOKEN_LIFETIME']),
        (settings.AUTH_COOKIE_REFRESH, tokens['refresh'], jwt['REFRESH_TOKEN_LIFETIME']),
    ):
        response.set_cookie(
            name,
            value,
            max_age=int(lifetime.total_seconds()),
            httponly=True,
            secure=settings.AUTH_COOKIE_SECURE,
            samesite=settings.AUTH_COOKIE_SAMESITE,
            path='/',
        )
    return response


def clear_auth_cookies(response):
    response.delete_cookie(settings.AUTH_COOKIE_ACCESS, path='/', samesite=settings.AUTH_COOKIE_SAMESITE)
    response.delete_cookie(settings.AUTH_COOKIE_REFRESH, path='/', samesite=settings.AUTH_COOKIE_SAMESITE)
    return response


def _password_errors(e: DjangoValidationError):
    return Response({'error': ' '.join(e.messages)}, status=status.HTTP_400_BAD_REQUEST)


@extend_schema(
    request=SignupSerializer,
    responses={201: AuthResponseSerializer, 400: ErrorResponseSerializer},
    description="Register a new account. A verification code is emailed.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([])
def signup(request):
    """Register a new user account."""
    serializer = SignupSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = register_user(**serializer.validated_data)
    except UserRegistrationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    tokens = issue_tokens(user)
    response = Response({
        'message': 'Registration successful. Please verify your email.',
        'user': UserSerializer(user).data,
        'tokens': tokens,
    }, status=status.HTTP_201_CREATED)
    return set_auth_cookies(response, tokens)


@extend_schema(
    request=LoginSerializer,
    responses={
        200: AuthResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password. Tokens are returned and set as cookies.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([])
def login(request):
    """Login with email and password."""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(request=request, **serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    tokens = issue_tokens(user)
    response = Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': tokens,
    })
    return set_auth_cookies(response, tokens)


@extend_schema(
    request=RefreshSerializer,
    responses={200: AuthResponseSerializer, 401: ErrorResponseSerializer},
    description="Rotate tokens using the refresh cookie or a refresh token in the body.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([])
def refresh(request):
    """Exchange a refresh token for a new token pair."""
    raw = request.COOKIES.get(settings.AUTH_COOKIE_REFRESH) or request.data.get('refresh')

    try:
        user, tokens = rotate_tokens(raw_refresh=raw)
    except InvalidTokenError as e:
        response = Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
        return clear_auth_cookies(response)

    response = Response({
        'message': 'Token refreshed',
        'user': UserSerializer(user).data,
        'tokens': tokens,
    })
    return set_auth_cookies(response, tokens)


@extend_schema(
    request=None,
    responses={200: MessageResponseSerializer},
    description="Logout: drop the cached session user and clear auth cookies.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout and clear auth cookies."""
    invalidate_user(request.user.id)
    response = Response({'message': 'Logout successful'})
    return clear_auth_cookies(response)


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=VerifyEmailSerializer,
    responses={200: AuthResponseSerializer, 400: ErrorResponseSerializer, 429: ErrorResponseSerializer},
    description="Verify an email address with the emailed six digit code.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([])
def verify_email(request):
    """Verify email with one-time code."""
    serializer = VerifyEmailSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = verify_user_email(**serializer.validated_data)
    except RateLimitedError as e:
        return Response({'error': str(e)}, status=status.HTTP_429_TOO_MANY_REQUESTS)
    except (AlreadyVerifiedError, InvalidOTPError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    tokens = issue_tokens(user)
    response = Response({
        'message': 'Email verified successfully',
        'user': UserSerializer(user).data,
        'tokens': tokens,
    })
    return set_auth_cookies(response, tokens)


@extend_schema(
    request=EmailSerializer,
    responses={200: MessageResponseSerializer, 400: ErrorResponseSerializer, 429: ErrorResponseSerializer},
    description="Send a new verification code.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([])
def resend_otp(request):
    """Resend verification code."""
    serializer = EmailSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        resend_verification_otp(email=serializer.validated_data['email'])
    except RateLimitedError as e:
        return Response({'error': str(e)}, status=status.HTTP_429_TOO_MANY_REQUESTS)
    except AlreadyVerifiedError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'A new verification code has been sent.'})


@extend_schema(
    request=EmailSerializer,
    responses={200: MessageResponseSerializer, 429: ErrorResponseSerializer},
    description="Request a password reset code. Always returns the same message.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([])
def forgot_password(request):
    """Request password reset code."""
    serializer = EmailSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        request_password_reset(email=serializer.validated_data['email'])
    except RateLimitedError as e:
        return Response({'error': str(e)}, status=status.HTTP_429_TOO_MANY_REQUESTS)

    return Response({'message': GENERIC_RESET_MESSAGE})


@extend_schema(
    request=ResetPasswordSerializer,
    responses={200: MessageResponseSerializer, 400: ErrorResponseSerializer},
    description="Set a new password using the emailed reset code.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
@authentication_classes([])
def reset_password(request):
    """Confirm password reset with code."""
    serializer = ResetPasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        confirm_password_reset(**serializer.validated_data)
    except InvalidOTPError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except DjangoValidationError as e:
        return _password_errors(e)

    return Response({'message': 'Password reset successful'})


@extend_schema(
    request=ProfileUpdateSerializer,
    responses={200: UserSerializer, 400: ErrorResponseSerializer},
    description="Get or update the current user's profile and food preferences.",
    tags=['user'],
)
@api_view(['GET', 'PATCH', 'PUT'])
@permission_classes([IsAuthenticated])
def profile(request):
    """Read or update own profile."""
    if request.method == 'GET':
        return Response(UserSerializer(request.user).data)

    serializer = ProfileUpdateSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    user = update_profile(user=request.user, **serializer.validated_data)
    return Response(UserSerializer(user).data)


@extend_schema(
    request=ChangePasswordSerializer,
    responses={200: MessageResponseSerializer, 400: ErrorResponseSerializer},
    description="Change own password.",
    tags=['user'],
)
@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated])
def change_password_view(request):
    """Change password after confirming the current one."""
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        change_password(user=request.user, **serializer.validated_data)
    except PasswordChangeError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except DjangoValidationError as e:
        return _password_errors(e)

    return Response({'message': 'Password changed successfully'})


@extend_schema(
    request=AdminMemberUpdateSerializer,
    responses={200: UserSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Edit any member's account (Master Manager only).",
    tags=['user'],
)
@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsMasterManager])
def admin_update_member(request, user_id):
    """Master manager edits another account."""
    serializer = AdminMemberUpdateSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    try:
        user = update_member_as_admin(
            actor=request.user,
            user_id=user_id,
            data=serializer.validated_data,
        )
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except UserRegistrationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except DjangoValidationError as e:
        return _password_errors(e)

    return Response(UserSerializer(user).data)
