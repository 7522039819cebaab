"""
PATH: users/models/user.py

CUSTOM USER MODEL

Mini-program customers and admin staff share one table:
- Customers are identified by `openid` and get a generated username.
- Staff log in with username + password (role="admin").

Referral / commission fields:
- inviter: the user whose invite code was used at sign-up (set at most once)
- commission: running commission balance credited by the commission ledger
- invite_code: unique code other users bind to

Pricing fields:
- is_vip + vip_expire_date: VIP pricing only applies while the VIP period is open
"""

from __future__ import annotations

import secrets
import string
import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_invite_code() -> str:
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(8))


def generate_nickname() -> str:
    return f"user_{secrets.token_hex(3)}"


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, username=None, password=None, **extra_fields):
        """
        Supports:
        - create_user(username="alice", password="x")           staff / tests
        - create_user(openid="wx-openid-123")                   mini-program login

        If username is missing but openid present, username is derived from openid.
        """
        username = (username or "").strip()
        openid = (extra_fields.get("openid") or "").strip() or None

        if not username and not openid:
            raise ValueError("Provide at least username or openid")

        if not username:
            username = f"wx_{openid}"[:150]

        extra_fields["openid"] = openid
        extra_fields.setdefault("is_active", True)

        user = self.model(username=username, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", User.ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(username=username, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_ADMIN = "admin"
    ROLE_CUSTOMER = "customer"

    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_CUSTOMER, "Customer"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    username = models.CharField(max_length=150, unique=True)
    openid = models.CharField(max_length=128, unique=True, null=True, blank=True)

    nickname = models.CharField(max_length=64, default=generate_nickname)
    phone = models.CharField(max_length=32, blank=True, default="")
    avatar = models.CharField(max_length=255, blank=True, default="")

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)

    inviter = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invitees",
        help_text="User who invited this user (write-once).",
    )
    commission = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Running commission balance (maintained by the commission ledger).",
    )
    invite_code = models.CharField(max_length=16, unique=True, default=generate_invite_code)

    is_vip = models.BooleanField(default=False)
    vip_expire_date = models.DateTimeField(null=True, blank=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["invite_code"], name="user_invite_code_idx"),
        ]

    def clean(self):
        if self.username is not None:
            self.username = self.username.strip()
        if not self.username:
            raise ValidationError("User must have a username")

        if self.inviter_id and self.inviter_id == self.id:
            raise ValidationError("A user cannot invite themselves")

    def is_active_vip(self, now=None) -> bool:
        if not self.is_vip or not self.vip_expire_date:
            return False
        return self.vip_expire_date > (now or timezone.now())

    @property
    def is_admin(self) -> bool:
        return self.role == self.ROLE_ADMIN

    def __str__(self):
        return f"{self.nickname} ({self.username})"
