"""
JWT authentication over header or cookie, backed by the user cache.

Browser clients keep the access token in the ``accessToken`` httpOnly cookie;
API clients send ``Authorization: Bearer <token>``. The header wins when both
are present. Only access tokens are accepted.
"""

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.settings import api_settings

from .services.session_cache import load_user


class KhataJWTAuthentication(JWTAuthentication):

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
        else:
            raw_token = request.COOKIES.get(settings.AUTH_COOKIE_ACCESS)

        if not raw_token:
            return None

        if isinstance(raw_token, str):
            raw_token = raw_token.encode()

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    def get_user(self, validated_token):
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken('Token contained no recognizable user identification')

        user = load_user(user_id)
        if user is None:
            raise AuthenticationFailed('User not found', code='user_not_found')
        if not user.is_active:
            raise AuthenticationFailed('User is inactive', code='user_inactive')
        return user
