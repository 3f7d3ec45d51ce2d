from uuid import uuid4

from db import atomic, connection
from helpers.normalize import to_date
from models.domain import Frequency, RecurringTransaction, TransactionType
from repositories.accounts_repository import get_account
from repositories.recurring_repository import (
    delete_recurring as repo_delete_recurring,
    get_recurring_by_id,
    insert_recurring,
    list_recurring as repo_list_recurring,
)
from utils.money import parse_positive_money


def create_recurring(*, account_id, tx_type, amount, frequency, start_date,
                     description="", category_id=None, end_date=None, conn=None):
    """
    Register a recurring template. Its cursor starts at ``start_date`` so the
    next catch-up materializes every occurrence from there on.
    """
    start_date = to_date(start_date)
    end_date = to_date(end_date)
    if start_date is None:
        raise ValueError("Start date is required")
    if end_date is not None and end_date < start_date:
        raise ValueError("End date cannot be before start date")

    template = RecurringTransaction(
        id=uuid4().hex,
        account_id=account_id,
        category_id=category_id,
        tx_type=TransactionType(tx_type),
        amount=parse_positive_money(amount),
        frequency=Frequency(frequency),
        start_date=start_date,
        next_due_date=start_date,
        description=(description or "").strip(),
        end_date=end_date,
        is_active=True,
    )

    with connection(conn) as conn:
        if get_account(conn, account_id) is None:
            raise LookupError(f"Account {account_id} not found")
        with atomic(conn):
            insert_recurring(conn, template)
    return template


def list_recurring(active_only=False, conn=None):
    with connection(conn) as conn:
        return repo_list_recurring(conn, active_only=active_only)


def delete_recurring(template_id, conn=None):
    """Remove a template. Transactions it already produced stay in place."""
    with connection(conn) as conn:
        if get_recurring_by_id(conn, template_id) is None:
            raise LookupError(f"Recurring transaction {template_id} not found")
        with atomic(conn):
            repo_delete_recurring(conn, template_id)
