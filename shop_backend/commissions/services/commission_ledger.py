"""
======================================================
PATH: commissions/services/commission_ledger.py
======================================================
COMMISSION LEDGER

accrue_on_completion(order)
- Called by the order orchestrator inside the completion transaction.
- Purchaser has no inviter -> no-op.
- Otherwise creates exactly one SETTLED Commission per (order, inviter) and
  credits the inviter's running balance by the same amount.

update_status(commission_id, new_status)
- Administrative override.
- Leaving SETTLED debits the balance, entering SETTLED credits it.
- Same status -> no-op. Unknown status -> InvalidCommissionStatus.

Balance writes use F() so concurrent accruals for the same inviter never
overwrite each other.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, F, Sum
from django.utils import timezone

from commissions.models import Commission
from commissions.services.exceptions import CommissionNotFound, InvalidCommissionStatus

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def commission_rate() -> Decimal:
    return Decimal(str(getattr(settings, "COMMISSION_RATE", "0.05")))


def _adjust_balance(*, user_id, delta: Decimal) -> None:
    if not delta:
        return
    User = get_user_model()
    User.objects.filter(pk=user_id).update(commission=F("commission") + delta)


@transaction.atomic
def accrue_on_completion(*, order) -> Commission | None:
    User = get_user_model()
    inviter_id = (
        User.objects.filter(pk=order.user_id).values_list("inviter_id", flat=True).first()
    )
    if not inviter_id:
        return None

    existing = Commission.objects.filter(order=order, beneficiary_id=inviter_id).first()
    if existing is not None:
        logger.info(
            "Commission already accrued",
            extra={"order_no": order.order_no, "commission_id": str(existing.pk)},
        )
        return existing

    rate = commission_rate()
    amount = _money(Decimal(str(order.total_amount)) * rate)

    try:
        # Savepoint so a lost race on the unique constraint leaves the outer
        # transaction usable.
        with transaction.atomic():
            commission = Commission.objects.create(
                beneficiary_id=inviter_id,
                invitee_id=order.user_id,
                order=order,
                amount=amount,
                rate=rate,
                status=Commission.STATUS_SETTLED,
            )
    except IntegrityError:
        return Commission.objects.get(order=order, beneficiary_id=inviter_id)

    _adjust_balance(user_id=inviter_id, delta=amount)

    logger.info(
        "Commission accrued",
        extra={
            "order_no": order.order_no,
            "beneficiary_id": str(inviter_id),
            "amount": str(amount),
        },
    )
    return commission


@transaction.atomic
def update_status(*, commission_id, new_status: str) -> Commission:
    """
    Balance effect of each change:

        settled   -> pending | cancelled    debit amount
        pending | cancelled -> settled      credit amount
        pending  <-> cancelled              none

    settled -> pending debits too, so a user's balance always equals the
    sum of their SETTLED records. Older admin tooling only debited on
    settled -> cancelled and let a record parked in pending keep its money.
    """
    status =new_status.strip() if isinstance(new_status, str) else new_status
    if status not in Commission.VALID_STATUSES:
        raise InvalidCommissionStatus(new_status)

    try:
        commission = Commission.objects.select_for_update().get(pk=commission_id)
    except (Commission.DoesNotExist, ValueError, ValidationError):
        raise CommissionNotFound(commission_id)

    old_status = commission.status
    if old_status == status:
        return commission

    delta = Decimal("0.00")
    if old_status == Commission.STATUS_SETTLED:
        delta = -commission.amount
    elif status == Commission.STATUS_SETTLED:
        delta = commission.amount

    commission.status = status
    commission.save(update_fields=["status", "updated_at"])

    _adjust_balance(user_id=commission.beneficiary_id, delta=delta)

    logger.info(
        "Commission status changed",
        extra={
            "commission_id": str(commission.pk),
            "from_status": old_status,
            "to_status": status,
            "balance_delta": str(delta),
        },
    )
    return commission


def commission_statistics(*, now=None) -> dict:
    """
    Settled totals for the admin dashboard: overall, today, this month,
    plus the number of records in any status.
    """
    now = timezone.localtime(now or timezone.now())
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_month = start_of_day.replace(day=1)

    settled = Commission.objects.filter(status=Commission.STATUS_SETTLED)

    def _sum(qs) -> Decimal:
        return _money(qs.aggregate(total=Sum("amount")).get("total"))

    return {
        "total_commission": _sum(settled),
        "today_commission": _sum(settled.filter(created_at__gte=start_of_day)),
        "month_commission": _sum(settled.filter(created_at__gte=start_of_month)),
        "total_records": Commission.objects.aggregate(n=Count("id")).get("n") or 0,
    }
