# users/services/referral.py

"""
REFERRAL BINDING

Rules:
- inviter is write-once: a user already bound keeps their inviter
- a user cannot bind their own invite code
- the invite code must belong to an existing user
"""

from __future__ import annotations

import logging

from django.db import transaction

from users.models import User
from users.services.exceptions import InviteCodeError

logger = logging.getLogger(__name__)


@transaction.atomic
def bind_inviter(*, user: User, invite_code: str) -> User:
    code = (invite_code or "").strip().upper()
    if not code:
        raise InviteCodeError("invite_code is required")

    user = User.objects.select_for_update().get(pk=user.pk)

    if user.inviter_id:
        raise InviteCodeError("Inviter is already set for this user")

    inviter = User.objects.filter(invite_code=code).first()
    if inviter is None:
        raise InviteCodeError(f"Unknown invite code: {code}")

    if inviter.pk == user.pk:
        raise InviteCodeError("You cannot use your own invite code")

    user.inviter = inviter
    user.save(update_fields=["inviter", "updated_at"])

    logger.info(
        "Inviter bound",
        extra={"user_id": str(user.pk), "inviter_id": str(inviter.pk)},
    )
    return user
