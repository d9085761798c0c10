"""
API route modules.

Contains FastAPI routers for different resource types.
"""

from finsight.api.routes import transactions, investments, debts, settings, metrics, data, advisor, demo

__all__ = ["transactions", "investments", "debts", "settings", "metrics", "data", "advisor", "demo"]
