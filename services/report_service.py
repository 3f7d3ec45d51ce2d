"""
Period report: income, spending by category and a short advice text for the
current day, week, month or year.
"""
import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from db import connection
from models.domain import TransactionType
from models.projection_dto import PeriodReport
from repositories.accounts_repository import list_accounts
from repositories.categories_repository import category_names
from repositories.transactions_repository import get_all_transactions
from utils.dates import period_bounds
from utils.exchange_rates import convert
from utils.money import ZERO, quantize

logger = logging.getLogger(__name__)

PERIODS = ("day", "week", "month", "year")
UNCATEGORIZED = "Uncategorized"
HEALTHY_SAVINGS_SHARE = Decimal("0.2")


def summarize_period(transactions, accounts, categories, start, end, base_currency):
    """
    Total income and expenses dated within ``[start, end]``, converted to
    ``base_currency`` and grouped by category name.

    Transfer legs and transactions on unknown accounts are left out.
    Returns ``(total_income, total_expenses, income_by_category,
    expense_by_category)``.
    """
    account_map = {a.id: a for a in accounts}
    income = defaultdict(lambda: ZERO)
    expenses = defaultdict(lambda: ZERO)

    for tx in transactions:
        if tx.is_transfer_leg or not (start <= tx.date <= end):
            continue
        account = account_map.get(tx.account_id)
        if account is None:
            logger.warning("Transaction %s references unknown account %s", tx.id, tx.account_id)
            continue

        amount = convert(tx.amount, account.currency, base_currency)
        name = categories.get(tx.category_id, UNCATEGORIZED)
        if tx.tx_type == TransactionType.INCOME:
            income[name] += amount
        else:
            expenses[name] += amount

    income_by_category = {name: quantize(total) for name, total in income.items()}
    expense_by_category = {name: quantize(total) for name, total in expenses.items()}
    return (
        quantize(sum(income.values(), ZERO)),
        quantize(sum(expenses.values(), ZERO)),
        income_by_category,
        expense_by_category,
    )


def _money(amount, currency):
    return f"{amount:,.2f} {currency}"


def generate_financial_advice(period, total_income, total_expenses, expense_by_category,
                              currency):
    """Return ``(narrative, advice)`` describing a period's totals."""
    if total_income == 0 and total_expenses == 0:
        return (
            f"You had no transactions for this {period}. "
            "Start by adding some to see your financial analysis.",
            "Try adding a few transactions for this period. Even small ones count!",
        )

    net_savings = total_income - total_expenses
    top_name, top_amount = "", ZERO
    if expense_by_category:
        top_name, top_amount = max(expense_by_category.items(), key=lambda item: item[1])

    narrative = (
        f"For this {period}, your total income was {_money(total_income, currency)} "
        f"and your expenses were {_money(total_expenses, currency)}. "
    )
    if net_savings > 0:
        narrative += f"You did a great job, saving {_money(net_savings, currency)}! "
    else:
        narrative += f"You spent {_money(abs(net_savings), currency)} more than you earned. "

    if top_name and top_amount > 0:
        share = (top_amount / total_expenses * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        narrative += (
            f'Your largest spending area was "{top_name}", '
            f"accounting for about {share}% of your total expenses."
        )
    elif total_expenses > 0:
        narrative += "Your spending was spread across various categories."

    if net_savings > total_income * HEALTHY_SAVINGS_SHARE:
        advice = (
            "You are saving a healthy portion of your income. Keep up the great work! "
            "You could consider investing some of your savings to grow your wealth further."
        )
    elif net_savings > 0:
        advice = (
            "You're on the right track by spending less than you earn. "
            "To increase your savings, take a closer look at your top spending category, "
            f'"{top_name}", to see if there are any small cuts you can make.'
        )
    else:
        advice = (
            "You're currently in a deficit, but don't worry. The first step is to review "
            f'your spending, especially in the "{top_name}" category, and identify areas '
            "where you can cut back. Creating a budget could be very helpful."
        )

    if len(expense_by_category) > 3:
        advice += (
            " You have multiple spending categories; consolidating or finding patterns "
            "might reveal more saving opportunities."
        )

    return narrative, advice


def get_period_report(period, base_currency, today=None, conn=None) -> PeriodReport:
    """Build the report for the calendar ``period`` containing ``today``."""
    if period not in PERIODS:
        raise ValueError(f"Unknown report period: {period}. Use one of {', '.join(PERIODS)}.")
    today = today or date.today()
    start, end = period_bounds(period, today)

    with connection(conn) as conn:
        transactions = get_all_transactions(conn)
        accounts = list_accounts(conn)
        categories = category_names(conn)

    total_income, total_expenses, income_by_category, expense_by_category = summarize_period(
        transactions, accounts, categories, start, end, base_currency
    )
    narrative, advice = generate_financial_advice(
        period, total_income, total_expenses, expense_by_category, base_currency
    )

    return PeriodReport(
        period=period,
        start_date=start,
        end_date=end,
        base_currency=base_currency,
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=total_income - total_expenses,
        income_by_category=income_by_category,
        expense_by_category=expense_by_category,
        narrative=narrative,
        advice=advice,
    )
