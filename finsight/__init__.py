"""
Finsight - Personal Finance Tracker

Income/expense tracking with:
- Investment portfolio and debt payoff statistics
- Cash-flow projections from rolling averages
- AI advisor backed by Gemini models
"""

__version__ = "1.0.0"
__author__ = "Finsight Contributors"
