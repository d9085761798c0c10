"""
Core modules for Finsight.

This package contains the record models, constants, application state and
reducer, the metrics engine, and the session layer that persists state.
"""

from finsight.core.constants import (
    ETransactionType,
    EView,
    ETab,
    EDocument,
    ESyncStatus,
    CATEGORIES,
    INVESTMENT_TYPES,
    DEBT_TYPES,
    PALETTE,
    NEVER_PAYOFF_MONTHS,
)

__all__ = [
    "ETransactionType",
    "EView",
    "ETab",
    "EDocument",
    "ESyncStatus",
    "CATEGORIES",
    "INVESTMENT_TYPES",
    "DEBT_TYPES",
    "PALETTE",
    "NEVER_PAYOFF_MONTHS",
]

__version__ = "1.0.0"
