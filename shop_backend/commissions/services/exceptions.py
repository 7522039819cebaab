# commissions/services/exceptions.py


class CommissionError(Exception):
    """Base exception for commission ledger failures."""


class CommissionNotFound(CommissionError):
    def __init__(self, commission_id):
        self.commission_id = commission_id
        super().__init__(f"Commission {commission_id} does not exist")


class InvalidCommissionStatus(CommissionError):
    def __init__(self, value):
        self.value = value
        super().__init__(
            f"Invalid commission status '{value}'. Expected one of: pending, settled, cancelled."
        )
