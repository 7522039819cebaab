# users/serializers.py

from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    inviter_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "nickname",
            "phone",
            "avatar",
            "role",
            "invite_code",
            "inviter_id",
            "commission",
            "is_vip",
            "vip_expire_date",
        ]
        read_only_fields = fields


# ---------------- BIND INVITER (INPUT ONLY) ----------------
class BindInviterSerializer(serializers.Serializer):
    invite_code = serializers.CharField(max_length=16)


# ---------------- INVITEES (READ ONLY) ----------------
class InviteeSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "nickname", "avatar", "created_at"]
        read_only_fields = fields
