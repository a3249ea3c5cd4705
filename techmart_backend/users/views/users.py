# users/views/users.py
"""
ADMIN USER MANAGEMENT

- GET   /api/auth/users/?role=user|admin
- PATCH /api/auth/users/<id>/role/
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import CAP_USERS_MANAGE, HasCapability
from techmart.responses import error_response
from users.serializers import RoleUpdateSerializer, UserSerializer
from users.services.roles import InvalidRoleError, SelfRoleChangeError, change_user_role

User = get_user_model()


@extend_schema(
    parameters=[
        OpenApiParameter(name="role", required=False, type=str, description="user | admin"),
    ],
)
class UserListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_USERS_MANAGE

    serializer_class = UserSerializer
    queryset = User.objects.all().order_by("-created_at")
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["role"]


class UserRoleUpdateView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_USERS_MANAGE

    @extend_schema(request=RoleUpdateSerializer, responses={200: UserSerializer})
    def patch(self, request, pk):
        ser = RoleUpdateSerializer(data=request.data)
        if not ser.is_valid():
            return error_response(
                code="INVALID_ROLE",
                message="Invalid role",
                http_status=status.HTTP_400_BAD_REQUEST,
                details=ser.errors,
            )

        try:
            user = change_user_role(
                actor=request.user,
                target_id=pk,
                role=ser.validated_data["role"],
            )
        except User.DoesNotExist:
            return error_response(
                code="NOT_FOUND",
                message="User not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )
        except SelfRoleChangeError as exc:
            return error_response(
                code="SELF_ROLE_CHANGE",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        except InvalidRoleError as exc:
            return error_response(
                code="INVALID_ROLE",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)
