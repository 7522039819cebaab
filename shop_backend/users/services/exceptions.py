# users/services/exceptions.py

"""
USER SERVICE ERRORS
"""


class UserServiceError(Exception):
    """Base exception for user-domain service failures."""


class AddressNotFound(UserServiceError):
    """Raised when an address does not exist or belongs to another user."""

    def __init__(self, address_id):
        self.address_id = address_id
        super().__init__(f"Address {address_id} not found")


class InviteCodeError(UserServiceError):
    """Raised when an inviter cannot be bound."""
