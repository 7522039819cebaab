from .commission_ledger import accrue_on_completion, commission_statistics, update_status
from .exceptions import CommissionError, CommissionNotFound, InvalidCommissionStatus

__all__ = [
    "accrue_on_completion",
    "update_status",
    "commission_statistics",
    "CommissionError",
    "CommissionNotFound",
    "InvalidCommissionStatus",
]
