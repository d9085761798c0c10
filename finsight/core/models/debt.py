"""
Debt model for Finsight.

Debts carry an APR and a minimum monthly payment; payoff timelines are
computed by the amortization engine from these fields.
"""

from typing import Any, Dict, Optional

from finsight.core.models.record import (
    Record,
    generate_id,
    missing_fields,
    to_amount,
    to_optional_amount,
)
from finsight.utils.date_utils import format_date_for_storage
from finsight.utils.rate_utils import normalize_rate_input
from finsight.utils.error_utils import error_handler


class Debt(Record):
    """
    An outstanding liability.

    Attributes:
        id: Unique identifier within the user's debts
        name: Display name (e.g. card or lender)
        type: One of DEBT_TYPES
        balance: Outstanding balance
        interest_rate: Annual percentage rate (e.g. 21.99)
        minimum_payment: Minimum monthly payment, 0 when none
        credit_limit: Credit limit for revolving debts, None otherwise
        due_date: Next due date as YYYY-MM-DD, or None
        note: Optional note
    """

    REQUIRED_FIELDS = ("name", "type", "balance", "interestRate")

    @error_handler
    def __init__(
        self,
        id: str,
        name: str,
        type: str,
        balance: float,
        interest_rate: float,
        minimum_payment: float = 0.0,
        credit_limit: Optional[float] = None,
        due_date: Optional[str] = None,
        note: str = "",
    ):
        self.id = id
        self.name = name
        self.type = type
        self.balance = to_amount(balance, "balance")
        self.interest_rate = normalize_rate_input(interest_rate)
        self.minimum_payment = to_amount(minimum_payment or 0, "minimumPayment")
        self.credit_limit = to_optional_amount(credit_limit, "creditLimit")
        self.due_date = format_date_for_storage(due_date) if due_date else None
        self.note = note or ""

    @property
    def has_credit_limit(self) -> bool:
        return bool(self.credit_limit)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "balance": self.balance,
            "interestRate": self.interest_rate,
            "minimumPayment": self.minimum_payment,
            "creditLimit": self.credit_limit,
            "dueDate": self.due_date,
            "note": self.note,
        }

    @classmethod
    @error_handler
    def from_dict(cls, data: Dict[str, Any], id: Optional[str] = None) -> "Debt":
        """
        Build a debt from its stored or submitted form.

        Raises:
            FinsightError: If a required field is missing or a value is invalid
        """
        missing = missing_fields(data, cls.REQUIRED_FIELDS)
        if missing:
            raise ValueError(f"Missing required debt fields: {', '.join(missing)}")
        return cls(
            id=id or data.get("id") or generate_id(),
            name=data["name"],
            type=data["type"],
            balance=data["balance"],
            interest_rate=data["interestRate"],
            minimum_payment=data.get("minimumPayment"),
            credit_limit=data.get("creditLimit"),
            due_date=data.get("dueDate"),
            note=data.get("note", ""),
        )

    def __repr__(self):
        return f"<Debt(id={self.id}, name='{self.name}', type='{self.type}', balance={self.balance}, rate={self.interest_rate})>"
