"""
Core constants and enumerations for Finsight.

This module defines the record enumerations, view/tab identifiers, document
names and projection parameters used throughout the finance tracker.
"""

from enum import Enum


class ETransactionType:
    """Transaction direction"""
    INCOME = "income"
    EXPENSE = "expense"


class EView(str, Enum):
    """Period granularity of the dashboard"""
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ETab:
    """Persisted UI tabs"""
    DASHBOARD = "dashboard"
    TRANSACTIONS = "transactions"
    INVESTMENTS = "investments"
    DEBTS = "debts"
    PROJECTIONS = "projections"
    ADVISOR = "advisor"


TABS = [
    ETab.DASHBOARD,
    ETab.TRANSACTIONS,
    ETab.INVESTMENTS,
    ETab.DEBTS,
    ETab.PROJECTIONS,
    ETab.ADVISOR,
]


class EDocument:
    """Per-user document names in the record store"""
    TRANSACTIONS = "transactions"
    INVESTMENTS = "investments"
    DEBTS = "debts"
    SETTINGS = "settings"


COLLECTION_DOCUMENTS = [EDocument.TRANSACTIONS, EDocument.INVESTMENTS, EDocument.DEBTS]
ALL_DOCUMENTS = COLLECTION_DOCUMENTS + [EDocument.SETTINGS]


class ESyncStatus:
    """Write-through status reported to the client"""
    LOADING = "loading"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


CATEGORIES = {
    ETransactionType.INCOME: ["Salary", "Freelance", "Investments", "Side Hustle", "Gifts", "Other Income"],
    ETransactionType.EXPENSE: [
        "Housing",
        "Food & Dining",
        "Transport",
        "Utilities",
        "Entertainment",
        "Healthcare",
        "Shopping",
        "Education",
        "Subscriptions",
        "Other",
    ],
}

INVESTMENT_TYPES = ["Stocks", "ETFs", "Bonds", "Crypto", "Real Estate", "Mutual Funds", "Commodities", "Other"]

DEBT_TYPES = [
    "Credit Card",
    "Student Loan",
    "Mortgage",
    "Car Loan",
    "Personal Loan",
    "Medical Debt",
    "Business Loan",
    "Other",
]

# Category colors cycle through this palette by position
PALETTE = [
    "#a78bfa",
    "#f472b6",
    "#38bdf8",
    "#22c55e",
    "#facc15",
    "#fb923c",
    "#e879f9",
    "#34d399",
    "#f87171",
    "#818cf8",
]

# Projection constants
DAYS_IN_TREND = 31
ROLLING_WINDOW_MONTHS = 3
TIMELINE_PAST_MONTHS = 5
TIMELINE_FORWARD_MONTHS = 6

# Payoff constants
NEVER_PAYOFF_MONTHS = 999  # display width of the "never" bar
PAYOFF_BAR_MAX_MONTHS = 360
PAYOFF_HIGH_MONTHS = 120
PAYOFF_MEDIUM_MONTHS = 60

# Write-coalescing quiescence window
DEFAULT_SAVE_DEBOUNCE_SECONDS = 0.5

ID_LENGTH = 9
