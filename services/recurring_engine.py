"""
Recurring Engine - catch-up processing for recurring templates.

Pure functions over already-fetched snapshots. Nothing here touches the
database; ``services.session_service`` persists the result.
"""
import logging
from collections import defaultdict
from decimal import Decimal
from uuid import uuid4

from models.domain import Frequency, Transaction
from models.projection_dto import RecurringRunResult
from utils.dates import add_frequency, is_due

logger = logging.getLogger(__name__)

RECURRING_SUFFIX = " (Recurring)"


def template_problem(template, account_ids=None):
    """Return why a template cannot be replayed, or ``None`` if it is usable."""
    if not getattr(template, "id", None):
        return "missing id"
    if not getattr(template, "account_id", None):
        return "missing account"
    if account_ids is not None and template.account_id not in account_ids:
        return f"unknown account {template.account_id}"
    if not isinstance(getattr(template, "frequency", None), Frequency):
        return "unknown frequency"
    amount = getattr(template, "amount", None)
    if amount is None or amount <= 0:
        return "amount must be positive"
    if getattr(template, "start_date", None) is None or getattr(template, "next_due_date", None) is None:
        return "missing start or next due date"
    if template.next_due_date < template.start_date:
        return "next due date precedes start date"
    return None


def walk_occurrences(template, first, until):
    """
    Yield occurrence dates from ``first`` while they are due before ``until``.

    Stops at the first occurrence that falls after the template's end date;
    that occurrence is not yielded.
    """
    cursor = first
    while is_due(cursor, until):
        if template.end_date is not None and template.end_date < cursor:
            return
        yield cursor
        cursor = add_frequency(cursor, template.frequency)


def process_recurring(templates, accounts, now) -> RecurringRunResult:
    """
    Materialize every occurrence that fell due between each active template's
    cursor and ``now``.

    Returns the new transactions, per-account balance deltas, the advanced
    cursors and the templates that ran past their end date. Templates whose
    cursor is not yet due produce nothing, so repeated runs with the same
    ``now`` are no-ops.
    """
    result = RecurringRunResult()
    account_ids = {account.id for account in accounts}
    deltas = defaultdict(Decimal)

    for template in templates:
        if not getattr(template, "is_active", False):
            continue

        problem = template_problem(template, account_ids)
        if problem:
            logger.warning("Skipping recurring template %s: %s", getattr(template, "id", None), problem)
            result.skipped_template_ids.append(getattr(template, "id", None))
            continue

        occurrences = list(walk_occurrences(template, template.next_due_date, now))
        for occurrence in occurrences:
            result.materialized_transactions.append(
                Transaction(
                    id=uuid4().hex,
                    account_id=template.account_id,
                    category_id=template.category_id,
                    tx_type=template.tx_type,
                    amount=template.amount,
                    date=occurrence,
                    description=f"{template.description}{RECURRING_SUFFIX}",
                    is_recurring=True,
                )
            )
            deltas[template.account_id] += template.signed_amount

        cursor = add_frequency(occurrences[-1], template.frequency) if occurrences else template.next_due_date
        if cursor != template.next_due_date:
            result.updated_cursors[template.id] = cursor

        if template.end_date is not None and template.end_date < cursor and is_due(cursor, now):
            result.deactivated_template_ids.append(template.id)

    result.account_balance_deltas = dict(deltas)
    if result.materialized_transactions:
        logger.info(
            "Catch-up materialized %d occurrence(s) across %d account(s)",
            len(result.materialized_transactions),
            len(result.account_balance_deltas),
        )
    return result
