# users/services/address_book.py

"""
ADDRESS BOOK (checkout collaborator)

Checkout only needs a frozen snapshot of the shipping destination.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.core.exceptions import ValidationError

from users.models import Address
from users.services.exceptions import AddressNotFound


@dataclass(frozen=True)
class AddressSnapshot:
    consignee: str
    phone: str
    full_address: str


def get_address(*, address_id, user) -> AddressSnapshot:
    if not address_id:
        raise AddressNotFound(address_id)

    try:
        address = Address.objects.filter(id=address_id, user=user).first()
    except (ValueError, ValidationError):
        # malformed UUID
        address = None

    if address is None:
        raise AddressNotFound(address_id)

    return AddressSnapshot(
        consignee=address.name,
        phone=address.phone,
        full_address=address.full_address,
    )
