"""
Shared helpers for Finsight record classes.

Records travel as camelCase dictionaries (the backup-file and store format)
and live in memory as small Python objects with snake_case attributes.
"""

import math
import secrets
import string
from typing import Any, Dict, Iterable, List, Optional

from finsight.core.constants import ID_LENGTH

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """Generate a short base36 record identifier."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(ID_LENGTH))


def missing_fields(data: Dict[str, Any], required: Iterable[str]) -> List[str]:
    """Return the required keys that are absent, None or blank in a payload."""
    missing = []
    for key in required:
        value = data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(key)
    return missing


def to_amount(value: Any, field: str) -> float:
    """
    Coerce a numeric field to a finite, non-negative float.

    Raises:
        ValueError: If the value is not a number, not finite or negative
    """
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number, got {value!r}")
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a number, got {value!r}")
    if not math.isfinite(amount):
        raise ValueError(f"{field} must be finite")
    if amount < 0:
        raise ValueError(f"{field} must be non-negative, got {amount}")
    return amount


def to_optional_amount(value: Any, field: str) -> Optional[float]:
    """Like to_amount, but blank, None and zero mean "absent"."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    amount = to_amount(value, field)
    return amount or None


class Record:
    """Base class giving records value equality through their dict form."""

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash((self.__class__.__name__, self.id))
