"""
Sample data installed for new users and by "reset to sample".

Ids are generated fresh on every call so that sample records never clash
with ids already issued to the user.
"""

from typing import Any, Dict, List

from finsight.core.models import generate_id

_TRANSACTIONS = [
    ("income", "Salary", 5200, "2026-02-01", "Monthly salary"),
    ("income", "Freelance", 850, "2026-02-03", "Web design project"),
    ("expense", "Housing", 1400, "2026-02-01", "Rent"),
    ("expense", "Food & Dining", 45, "2026-02-02", "Groceries"),
    ("expense", "Transport", 60, "2026-02-03", "Gas"),
    ("expense", "Utilities", 130, "2026-02-04", "Electric & Water"),
    ("expense", "Entertainment", 25, "2026-02-05", "Streaming"),
    ("expense", "Food & Dining", 38, "2026-02-06", "Restaurant"),
    ("expense", "Shopping", 120, "2026-02-07", "Clothes"),
    ("income", "Investments", 320, "2026-02-08", "Dividends"),
    ("expense", "Healthcare", 75, "2026-02-09", "Pharmacy"),
    ("expense", "Subscriptions", 55, "2026-02-10", "Software tools"),
    ("income", "Salary", 5200, "2026-01-01", "Monthly salary"),
    ("income", "Freelance", 600, "2026-01-10", "Logo design"),
    ("expense", "Housing", 1400, "2026-01-01", "Rent"),
    ("expense", "Food & Dining", 420, "2026-01-15", "Monthly groceries"),
    ("expense", "Transport", 180, "2026-01-12", "Car maintenance"),
    ("expense", "Entertainment", 90, "2026-01-20", "Concert tickets"),
    ("expense", "Utilities", 145, "2026-01-05", "Bills"),
    ("expense", "Education", 200, "2026-01-18", "Online course"),
]

_INVESTMENTS = [
    ("AAPL", "Stocks", 15, 178.50, 242.30, "2024-06-15", "Apple Inc."),
    ("VOO", "ETFs", 10, 420.00, 512.80, "2024-01-10", "S&P 500 ETF"),
    ("BTC", "Crypto", 0.15, 42000, 97500, "2024-03-20", "Bitcoin"),
    ("MSFT", "Stocks", 8, 380.00, 445.60, "2025-02-01", "Microsoft"),
    ("BND", "Bonds", 25, 72.50, 73.10, "2025-06-01", "Total Bond Market"),
]

_DEBTS = [
    ("Chase Sapphire", "Credit Card", 3200, 21.99, 85, 12000, "2026-02-25", "Travel rewards card"),
    ("Federal Student Loan", "Student Loan", 28500, 4.99, 320, None, "2026-02-15", "Undergraduate loans"),
    ("Toyota Financing", "Car Loan", 14200, 5.49, 385, None, "2026-02-20", "2024 Camry"),
]


def sample_transactions() -> List[Dict[str, Any]]:
    return [
        {"id": generate_id(), "type": tx_type, "category": category, "amount": float(amount), "date": day, "note": note}
        for tx_type, category, amount, day, note in _TRANSACTIONS
    ]


def sample_investments() -> List[Dict[str, Any]]:
    return [
        {
            "id": generate_id(),
            "name": name,
            "type": inv_type,
            "shares": float(shares),
            "purchasePrice": float(purchase),
            "currentPrice": float(current),
            "purchaseDate": day,
            "note": note,
        }
        for name, inv_type, shares, purchase, current, day, note in _INVESTMENTS
    ]


def sample_debts() -> List[Dict[str, Any]]:
    return [
        {
            "id": generate_id(),
            "name": name,
            "type": debt_type,
            "balance": float(balance),
            "interestRate": rate,
            "minimumPayment": float(minimum),
            "creditLimit": float(limit) if limit else None,
            "dueDate": due,
            "note": note,
        }
        for name, debt_type, balance, rate, minimum, limit, due, note in _DEBTS
    ]


def sample_collections() -> Dict[str, List[Dict[str, Any]]]:
    """All three sample collections in backup-file form."""
    return {
        "transactions": sample_transactions(),
        "investments": sample_investments(),
        "debts": sample_debts(),
    }
