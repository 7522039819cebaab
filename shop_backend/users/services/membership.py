# users/services/membership.py

"""
VIP MEMBERSHIP

extend_vip_membership(user_id)
- Called by the order orchestrator when a VIP membership order is paid,
  inside that payment's transaction.
- An active membership is extended from its current expiry; a lapsed or
  missing one starts from `now`.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from users.models import User

logger = logging.getLogger(__name__)


def add_one_year(moment):
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        # 29 February
        return moment.replace(year=moment.year + 1, day=28)


@transaction.atomic
def extend_vip_membership(*, user_id, now=None) -> User:
    now = now or timezone.now()
    user = User.objects.select_for_update().get(pk=user_id)

    start = user.vip_expire_date if user.is_active_vip(now) else now
    user.is_vip = True
    user.vip_expire_date = add_one_year(start)
    user.save(update_fields=["is_vip", "vip_expire_date", "updated_at"])

    logger.info(
        "VIP membership extended",
        extra={"user_id": str(user.pk), "vip_expire_date": user.vip_expire_date.isoformat()},
    )
    return user
