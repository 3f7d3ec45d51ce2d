"""
Session initialisation: run recurring catch-up at most once per session.
"""
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime

from db import atomic, connection
from repositories.accounts_repository import adjust_balance, list_accounts
from repositories.recurring_repository import deactivate, list_recurring, update_next_due_date
from repositories.transactions_repository import insert_transaction
from services.recurring_engine import process_recurring

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Application-lifetime state owned by the caller, one per session."""
    recurring_processed: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


def persist_recurring_result(conn, result):
    """Write a catch-up result as one atomic batch."""
    with atomic(conn):
        for tx in result.materialized_transactions:
            insert_transaction(conn, tx)
        for account_id, delta in result.account_balance_deltas.items():
            adjust_balance(conn, account_id, delta)
        for template_id, cursor in result.updated_cursors.items():
            update_next_due_date(conn, template_id, cursor)
        for template_id in result.deactivated_template_ids:
            deactivate(conn, template_id)


def start_session(session, now=None, conn=None):
    """
    Catch up recurring templates for this session.

    Returns the ``RecurringRunResult`` that was committed, or ``None`` when
    the session already ran catch-up or the batch write failed. A failed
    write leaves every cursor where it was and the flag unset, so the next
    call retries from the same state. Concurrent callers on one session
    """
    with session.lock:
        if session.recurring_processed:
            return None

        now = now or datetime.now()
        with connection(conn) as conn:
            templates = list_recurring(conn, active_only=True)
            accounts = list_accounts(conn)
            result = process_recurring(templates, accounts, now)

            if result.has_changes:
                try:
                    persist_recurring_result(conn, result)
                except Exception as e:
                    logger.error("Error processing recurring transactions: %s", e)
                    return None
                logger.info(
                    "Successfully processed recurring transactions: %d created, %d deactivated",
                    len(result.materialized_transactions),
                    len(result.deactivated_template_ids),
                )

        session.recurring_processed = True
        return result
