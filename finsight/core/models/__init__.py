"""
Finsight Core Models Package.

Record classes for the three per-user collections. Each class round-trips
through the camelCase dictionary form used by the record store and the
backup file.

Modules:
    transaction: Transaction (income/expense entry)
    investment: Investment (holding with derived value and gain)
    debt: Debt (liability with APR and minimum payment)
"""

from finsight.core.models.record import Record, generate_id
from finsight.core.models.transaction import Transaction, TRANSACTION_TYPES
from finsight.core.models.investment import Investment
from finsight.core.models.debt import Debt

__all__ = [
    "Record",
    "generate_id",
    "Transaction",
    "TRANSACTION_TYPES",
    "Investment",
    "Debt",
]
