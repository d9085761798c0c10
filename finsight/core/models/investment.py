"""
Investment holding model for Finsight.

Value and gain are always derived from shares and prices; they are never
stored with the record.
"""

from typing import Any, Dict, Optional

from finsight.core.models.record import Record, generate_id, missing_fields, to_amount
from finsight.utils.date_utils import format_date_for_storage, today_iso
from finsight.utils.error_utils import error_handler


class Investment(Record):
    """
    A position in a single security or asset.

    Attributes:
        id: Unique identifier within the user's investments
        name: Ticker or display name
        type: One of INVESTMENT_TYPES
        shares: Units held (may be fractional)
        purchase_price: Price per unit at purchase
        current_price: Latest price per unit
        purchase_date: YYYY-MM-DD
        note: Optional note
    """

    REQUIRED_FIELDS = ("name", "type", "shares", "purchasePrice", "currentPrice")

    @error_handler
    def __init__(
        self,
        id: str,
        name: str,
        type: str,
        shares: float,
        purchase_price: float,
        current_price: float,
        purchase_date: Optional[str] = None,
        note: str = "",
    ):
        self.id = id
        self.name = name
        self.type = type
        self.shares = to_amount(shares, "shares")
        self.purchase_price = to_amount(purchase_price, "purchasePrice")
        self.current_price = to_amount(current_price, "currentPrice")
        self.purchase_date = format_date_for_storage(purchase_date) if purchase_date else None
        self.note = note or ""

    @property
    def value(self) -> float:
        return self.shares * self.current_price

    @property
    def cost(self) -> float:
        return self.shares * self.purchase_price

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "shares": self.shares,
            "purchasePrice": self.purchase_price,
            "currentPrice": self.current_price,
            "purchaseDate": self.purchase_date,
            "note": self.note,
        }

    @classmethod
    @error_handler
    def from_dict(cls, data: Dict[str, Any], id: Optional[str] = None) -> "Investment":
        """
        Build a holding from its stored or submitted form.

        Raises:
            FinsightError: If a required field is missing or a value is invalid
        """
        missing = missing_fields(data, cls.REQUIRED_FIELDS)
        if missing:
            raise ValueError(f"Missing required investment fields: {', '.join(missing)}")
        return cls(
            id=id or data.get("id") or generate_id(),
            name=data["name"],
            type=data["type"],
            shares=data["shares"],
            purchase_price=data["purchasePrice"],
            current_price=data["currentPrice"],
            purchase_date=data["purchaseDate"] if "purchaseDate" in data else today_iso(),
            note=data.get("note", ""),
        )

    def __repr__(self):
        return f"<Investment(id={self.id}, name='{self.name}', type='{self.type}', shares={self.shares}, value={self.value})>"
