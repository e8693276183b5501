# tc_core/iam/api/auth.py

from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer

from tc_core.iam.api.schema_serializers import (
    DetailResponseSerializer,
    LoginRequestSerializer,
    LoginResponseSerializer,
)
from tc_core.iam.auth import access_cookie_name, refresh_cookie_name


def _max_age(lifetime: timedelta | None) -> int | None:
    return int(lifetime.total_seconds()) if lifetime else None


def _set_token_cookies(response: Response, *, access: str, refresh: str) -> None:
    jwt = settings.SIMPLE_JWT
    options = {
        "httponly": True,
        "secure": bool(jwt.get("AUTH_COOKIE_SECURE", False)),
        "samesite": jwt.get("AUTH_COOKIE_SAMESITE", "Lax"),
        "path": "/",
    }
    response.set_cookie(access_cookie_name(), access, max_age=_max_age(jwt.get("ACCESS_TOKEN_LIFETIME")), **options)
    response.set_cookie(refresh_cookie_name(), refresh, max_age=_max_age(jwt.get("REFRESH_TOKEN_LIFETIME")), **options)


class TokenCookieView(APIView):
    """
    Base for the token endpoints: no authentication, and bad or missing
    credentials answer 401 rather than DRF's 403 fallback.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get_authenticate_header(self, request):
        return 'Bearer realm="api"'


class LoginView(TokenCookieView):
    @extend_schema(request=LoginRequestSerializer, responses={200: LoginResponseSerializer}, tags=["IAM"])
    def post(self, request):
        # accounts are keyed by e-mail; the login form sends "email"
        username = request.data.get("username") or (request.data.get("email") or "").strip().lower()
        ser = TokenObtainPairSerializer(data={"username": username, "password": request.data.get("password")})
        ser.is_valid(raise_exception=True)

        access = ser.validated_data["access"]
        # the front end also keeps the access token for its Bearer header
        res = Response({"detail": "login ok", "access": access}, status=status.HTTP_200_OK)
        _set_token_cookies(res, access=access, refresh=ser.validated_data["refresh"])
        return res


class RefreshView(TokenCookieView):
    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["IAM"])
    def post(self, request):
        refresh = request.COOKIES.get(refresh_cookie_name()) or request.data.get("refresh")
        ser = TokenRefreshSerializer(data={"refresh": refresh})
        ser.is_valid(raise_exception=True)

        res = Response({"detail": "refreshed"}, status=status.HTTP_200_OK)
        _set_token_cookies(
            res,
            access=ser.validated_data["access"],
            refresh=ser.validated_data.get("refresh", refresh),
        )
        return res


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["IAM"])
    def post(self, request):
        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        res.delete_cookie(access_cookie_name(), path="/")
        res.delete_cookie(refresh_cookie_name(), path="/")
        return res
