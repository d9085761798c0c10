"""
Transaction model for Finsight.

A transaction is a single income or expense entry. The amount is stored
unsigned; its sign is derived from the type when aggregating.
"""

from typing import Any, Dict, Optional

from finsight.core.constants import ETransactionType
from finsight.core.models.record import Record, generate_id, missing_fields, to_amount
from finsight.utils.date_utils import format_date_for_storage, today_iso
from finsight.utils.error_utils import error_handler

TRANSACTION_TYPES = (ETransactionType.INCOME, ETransactionType.EXPENSE)


class Transaction(Record):
    """
    Income or expense entry.

    Attributes:
        id: Unique identifier within the user's transactions
        type: "income" or "expense"
        category: Free-form category name (see CATEGORIES for the defaults)
        amount: Unsigned amount
        date: Calendar day as YYYY-MM-DD
        note: Optional note
    """

    REQUIRED_FIELDS = ("category", "amount")

    @error_handler
    def __init__(
        self,
        id: str,
        type: str,
        category: str,
        amount: float,
        date: str,
        note: str = "",
    ):
        if type not in TRANSACTION_TYPES:
            raise ValueError(f"Transaction type must be one of {TRANSACTION_TYPES}, got {type!r}")
        self.id = id
        self.type = type
        self.category = category
        self.amount = to_amount(amount, "amount")
        self.date = format_date_for_storage(date)
        self.note = note or ""

    @property
    def is_income(self) -> bool:
        return self.type == ETransactionType.INCOME

    @property
    def signed_amount(self) -> float:
        """Amount with expenses negative."""
        return self.amount if self.is_income else -self.amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "category": self.category,
            "amount": self.amount,
            "date": self.date,
            "note": self.note,
        }

    @classmethod
    @error_handler
    def from_dict(cls, data: Dict[str, Any], id: Optional[str] = None) -> "Transaction":
        """
        Build a transaction from its stored or submitted form.

        Args:
            data: camelCase dictionary
            id: Identifier override; a new id is generated when neither this
                nor data["id"] is given

        Raises:
            FinsightError: If a required field is missing or a value is invalid
        """
        missing = missing_fields(data, cls.REQUIRED_FIELDS)
        if missing:
            raise ValueError(f"Missing required transaction fields: {', '.join(missing)}")
        return cls(
            id=id or data.get("id") or generate_id(),
            type=data.get("type", ETransactionType.EXPENSE),
            category=data["category"],
            amount=data["amount"],
            date=data.get("date") or today_iso(),
            note=data.get("note", ""),
        )

    def __repr__(self):
        return f"<Transaction(id={self.id}, type='{self.type}', category='{self.category}', amount={self.amount}, date={self.date})>"
