"""
Advisory context builder.

Turns a metrics snapshot plus the raw records into the plain-text financial
summary that is sent to the language model ahead of the user's first
question, and maps a chat transcript onto Gemini ``contents``.
"""

from collections import OrderedDict
from typing import Any, Dict, List, Optional

from finsight.core.constants import ETransactionType

SYSTEM_PROMPT = """You are Finsight AI, a friendly and knowledgeable personal finance advisor built into the Finsight finance tracking app. You have access to the user's real financial data (provided below).

Your role:
1. Analyze their spending patterns and give actionable advice
2. Help create financial plans to achieve specific goals (saving for a house, paying off debt, building emergency fund, retirement, etc.)
3. Identify areas where they can cut expenses
4. Suggest investment strategies based on their current portfolio
5. Create debt payoff strategies (avalanche vs snowball method)
6. Calculate timelines for financial goals
7. Give budget recommendations based on their income

Rules:
- Be conversational, warm, and encouraging, not preachy
- Use specific numbers from their data, don't be vague
- When creating a plan, break it into clear monthly steps
- If they don't have enough data, say so and ask for more context
- Format responses with clear sections, use bullet points sparingly
- Keep responses concise but thorough, aim for 150-300 words
- Use the currency symbol given with the data, no need for currency codes
- You are NOT a certified financial advisor, remind them of this for major decisions
- Never recommend specific stock picks, suggest categories/strategies instead"""

PRIMER_REQUEST = SYSTEM_PROMPT + "\n\nPlease confirm you understand these instructions."
PRIMER_REPLY = (
    "Understood. I'm Finsight AI, your personal finance advisor. "
    "I have access to your financial data and I'm ready to help."
)

QUICK_PROMPTS = [
    {
        "label": "📊 Analyze my spending",
        "prompt": "Analyze my spending patterns. Where am I spending the most? What can I cut back on?",
    },
    {
        "label": "🎯 Set a savings goal",
        "prompt": "Help me create a plan to save $10,000 in the next 12 months based on my current income and expenses.",
    },
    {
        "label": "💳 Debt payoff plan",
        "prompt": (
            "Create a debt payoff strategy for me. Compare the avalanche and snowball methods "
            "with my specific debts and tell me which saves more money."
        ),
    },
    {
        "label": "🏠 Save for a house",
        "prompt": (
            "I want to save for a house down payment of $50,000. Based on my finances, "
            "how long will it take and what changes should I make?"
        ),
    },
    {
        "label": "📈 Investment advice",
        "prompt": "Review my investment portfolio. Is it well-diversified? What adjustments would you suggest for long-term growth?",
    },
    {
        "label": "🚨 Emergency fund",
        "prompt": (
            "Do I have enough for an emergency fund? Based on my expenses, how much should I have saved "
            "and how long will it take to build it?"
        ),
    },
    {
        "label": "📋 Monthly budget",
        "prompt": (
            "Create a detailed monthly budget for me based on my income and current spending. "
            "Use the 50/30/20 rule as a starting point."
        ),
    },
    {
        "label": "🏖️ Financial health check",
        "prompt": "Give me an overall financial health assessment. What am I doing well? What needs immediate attention?",
    },
]

# Currency code -> display symbol
CURRENCIES = {
    "USD": "$",
    "EUR": "€",
    "INR": "₹",
    "PLN": "zł",
    "GBP": "£",
    "JPY": "¥",
    "HKD": "HK$",
}

SUPPORTED_LANGUAGES = ("en", "hi")

HINDI_INSTRUCTION = (
    "\n\nIMPORTANT: The user prefers Hindi (हिंदी). Always respond in Hindi. Use Devanagari script. "
    "You may use English for financial terms, tickers, and numbers."
)


def currency_symbol(currency: Optional[str]) -> str:
    """Resolve a currency code (or an explicit symbol) to a display symbol."""
    if not currency:
        return CURRENCIES["USD"]
    return CURRENCIES.get(currency.upper(), currency)


def language_instruction(lang: str) -> str:
    return HINDI_INSTRUCTION if lang == "hi" else ""


def currency_instruction(symbol: str) -> str:
    return f'\n\nCurrency: Use the symbol "{symbol}" for all monetary values.'


def _number(value) -> str:
    """Raw quantity as entered: 15 rather than 15.0."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _totals_by_category(transactions, tx_type: str) -> "OrderedDict[str, float]":
    totals = OrderedDict()
    for tx in transactions:
        if tx.type == tx_type:
            totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount
    return totals


def build_financial_context(snapshot: Dict[str, Any], state, currency: str = "$") -> str:
    """
    Format the user's finances as a markdown summary for the model.

    Args:
        snapshot: Output of build_snapshot for the state
        state: AppState with the raw records
        currency: Symbol prefixed to money amounts

    Returns:
        Multi-section text: income and expenses of the current period,
        income sources and expense breakdown over all transactions,
        portfolio, debts, net worth and the annual projection
    """

    def money(value) -> str:
        return f"{currency}{value:.2f}"

    stats = snapshot["stats"]
    portfolio = snapshot["portfolio"]
    debts = snapshot["debts"]
    projection = snapshot["yearlyProjection"]

    income_sources = _totals_by_category(state.transactions, ETransactionType.INCOME)
    expense_breakdown = _totals_by_category(state.transactions, ETransactionType.EXPENSE)

    lines = [
        "## User's Financial Snapshot",
        "",
        "### Income & Expenses (Current Period)",
        f"- Total Income: {money(stats['income'])}",
        f"- Total Expenses: {money(stats['expense'])}",
        f"- Net Cash Flow: {money(stats['net'])}",
        "",
        "### Income Sources",
    ]
    lines += [f"- {cat}: {money(amt)}" for cat, amt in income_sources.items()] or ["- No income recorded"]

    lines += ["", "### Expense Breakdown"]
    lines += [f"- {cat}: {money(amt)}" for cat, amt in expense_breakdown.items()] or ["- No expenses recorded"]

    lines += [
        "",
        "### Investment Portfolio",
        f"- Total Value: {money(portfolio['totalValue'])}",
        f"- Total Cost Basis: {money(portfolio['totalCost'])}",
        f"- Total Gain/Loss: {money(portfolio['totalGain'])} ({portfolio['gainPct']:.1f}%)",
    ]
    lines += [
        f"- {inv.name} ({inv.type}): {_number(inv.shares)} shares, "
        f"bought at {currency}{_number(inv.purchase_price)}, now {currency}{_number(inv.current_price)}"
        for inv in state.investments
    ] or ["- No investments"]

    lines += [
        "",
        "### Debts",
        f"- Total Debt: {money(debts['totalDebt'])}",
        f"- Monthly Minimum Payments: {money(debts['totalMinPayment'])}",
        f"- Average Interest Rate: {debts['avgRate']:.2f}%",
        f"- Credit Utilization: {debts['creditUsed']:.0f}%",
    ]
    lines += [
        f"- {debt.name} ({debt.type}): {money(debt.balance)} at {_number(debt.interest_rate)}% APR, "
        f"min {currency}{_number(debt.minimum_payment)}/mo"
        for debt in state.debts
    ] or ["- No debts"]

    lines += [
        "",
        "### Net Worth",
        money(snapshot["netWorth"]),
        "",
        "### Projections (Annual, based on 3-month average)",
        f"- Projected Annual Income: {money(projection['annualIncome'])}",
        f"- Projected Annual Expenses: {money(projection['annualExpense'])}",
        f"- Projected Annual Savings: {money(projection['annualNet'])}",
        f"- Savings Rate: {projection['savingsRate']:.1f}%",
    ]
    return "\n".join(lines)


def build_contents(
    messages: List[Dict[str, str]],
    context: str,
    lang: str = "en",
    currency: str = "$",
) -> List[Dict[str, Any]]:
    """
    Map a chat transcript onto Gemini ``contents``.

    Roles other than "user" become "model". The first user message is
    prefixed with the financial context and the language and currency
    instructions.
    """
    first_user = next((i for i, msg in enumerate(messages) if msg.get("role") == "user"), None)

    contents = []
    for i, msg in enumerate(messages):
        role = "user" if msg.get("role") == "user" else "model"
        text = msg.get("content", "")
        if i == first_user:
            text = (
                f"[Financial Data Context]\n{context}{language_instruction(lang)}{currency_instruction(currency)}"
                f"\n\n[User Question]\n{text}"
            )
        contents.append({"role": role, "parts": [{"text": text}]})
    return contents
