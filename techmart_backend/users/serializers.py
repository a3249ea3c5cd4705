# users/serializers.py

from django.contrib.auth import get_user_model
from rest_framework import serializers

from users.models import Role

User = get_user_model()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "image",
            "role",
            "created_at",
        ]
        read_only_fields = fields


# ---------------- ROLE UPDATE (INPUT ONLY) ----------------
class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=Role.choices)
