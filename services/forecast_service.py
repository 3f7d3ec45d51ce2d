### Forecast service replays recurring templates forward and predicts future account balances.
import logging
from decimal import Decimal

from models.projection_dto import AccountProjection
from services.recurring_engine import template_problem, walk_occurrences
from utils.dates import as_moment, is_due
from utils.exchange_rates import convert, get_exchange_rate

logger = logging.getLogger(__name__)


def forecast_balances(accounts, templates, as_of, now):
    """
    Predict each account's balance on ``as_of``.

    Seeds every account with its stored balance, then replays each active
    template from its start date. Occurrences already due at ``now`` are
    assumed to be in the stored balance and are skipped; occurrences dated
    before ``as_of`` add their signed amount. Read-only: no cursor moves.

    Without ``as_of``, or when it is not strictly after ``now``, the current
    balances are returned unchanged.
    """
    balances = {account.id: account.balance for account in accounts}

    if as_of is None or as_moment(as_of) <= as_moment(now):
        return balances

    for template in templates:
        if not template.is_active:
            continue
        problem = template_problem(template, balances.keys())
        if problem:
            logger.warning("Forecast ignoring recurring template %s: %s", getattr(template, "id", None), problem)
            continue

        for occurrence in walk_occurrences(template, template.start_date, as_of):
            if is_due(occurrence, now):
                continue
            balances[template.account_id] += template.signed_amount

    return balances


def forecast_net_worth(accounts, predicted, base_currency):
    """
    Convert each predicted balance into ``base_currency`` and total them.

    Returns ``(projections, total)``.
    """
    projections = []
    total = Decimal("0")
    for account in accounts:
        predicted_balance = predicted.get(account.id, account.balance)
        in_base = convert(predicted_balance, account.currency, base_currency)
        rate_info = get_exchange_rate(account.currency, base_currency) if account.currency != base_currency else None
        projections.append(
            AccountProjection(
                account_id=account.id,
                name=account.name,
                currency=account.currency,
                balance=account.balance,
                predicted_balance=predicted_balance,
                predicted_balance_in_base=in_base,
                exchange_rate=rate_info.rate if rate_info else None,
                is_unofficial_rate=rate_info.is_unofficial if rate_info else False,
            )
        )
        total += in_base
    return projections, total
