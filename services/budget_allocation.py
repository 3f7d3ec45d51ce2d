"""
Budget Allocation Engine - earmarks shared account balance across budgets.

Budgets are served in ascending target-date order. Within a currency each
budget claims its full target amount from the pool before the next budget is
considered, so earlier deadlines get first claim on the same savings.
"""
import logging
from collections import defaultdict
from decimal import Decimal

from models.projection_dto import BudgetAllocation
from utils.dates import days_between, whole_months_between
from utils.money import ZERO, quantize

logger = logging.getLogger(__name__)

DAILY_THRESHOLD_DAYS = 60


def suggest_saving(remaining_needed, target_date, today):
    """
    Return ``(amount, period)`` needed to close ``remaining_needed`` by
    ``target_date``.

    Under 60 days away the rate is daily, otherwise monthly. A target less
    than one whole month away, or already reached, gets the full remainder
    as a lump sum.
    """
    if remaining_needed <= 0:
        return ZERO, "month"

    if target_date > today:
        days = days_between(target_date, today)
        if days < DAILY_THRESHOLD_DAYS:
            return quantize(remaining_needed / max(1, days)), "day"
        months = whole_months_between(target_date, today)
        if months > 0:
            return quantize(remaining_needed / months), "month"
        return quantize(remaining_needed), "month"

    # Overdue
    return quantize(remaining_needed), "day"


def _neutral(budget):
    return BudgetAllocation(
        budget=budget,
        currency=None,
        available_for_this_goal=ZERO,
        remaining_needed=ZERO,
        suggested_saving=ZERO,
        saving_period="month",
        progress=0.0,
    )


def allocate_budgets(budgets, accounts, today):
    """
    Compute ``available_for_this_goal``, ``remaining_needed`` and the
    suggested saving rate for every budget, in target-date order.

    Budgets without a target date sort as due ``today``. Budgets whose linked
    accounts cannot be resolved get a neutral allocation and claim nothing.
    """
    account_map = {account.id: account for account in accounts}
    ordered = sorted(budgets, key=lambda b: b.target_date or today)
    earmarked = defaultdict(Decimal)
    allocations = []

    for budget in ordered:
        linked = [account_map[i] for i in budget.account_ids if i in account_map]
        if not linked:
            logger.warning("Budget %s has no resolvable linked accounts", budget.id)
            allocations.append(_neutral(budget))
            continue

        currency = linked[0].currency
        in_currency = [a for a in linked if a.currency == currency]
        if len(in_currency) != len(linked):
            logger.warning(
                "Budget %s links accounts in several currencies; only %s balances count toward it",
                budget.id,
                currency,
            )
        total_balance = sum((a.balance for a in in_currency), ZERO)

        pool = max(ZERO, total_balance - earmarked[currency])
        amount_to_save = budget.target_amount - budget.current_amount
        available = max(ZERO, min(pool, amount_to_save))
        remaining_needed = max(ZERO, amount_to_save - available)

        suggested, period = suggest_saving(remaining_needed, budget.target_date or today, today)

        earmarked[currency] += budget.target_amount

        allocations.append(
            BudgetAllocation(
                budget=budget,
                currency=currency,
                available_for_this_goal=available,
                remaining_needed=remaining_needed,
                suggested_saving=suggested,
                saving_period=period,
                progress=budget.progress,
            )
        )

    return allocations
