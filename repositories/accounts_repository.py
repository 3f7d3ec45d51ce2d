import logging
from uuid import uuid4

from db import fetch_dicts
from helpers.normalize import account_from_row

logger = logging.getLogger(__name__)

# -----------------------------
# Accounts Repository
# -----------------------------

def insert_account(conn, name, account_type, currency, balance=0, account_id=None):
    """Insert an account and return its id."""
    account_id = account_id or uuid4().hex
    conn.execute(
        "INSERT INTO accounts (id, name, account_type, balance, currency) VALUES (?, ?, ?, ?, ?)",
        (account_id, name, account_type, balance, currency)
    )
    return account_id


def list_accounts(conn):
    """Return all accounts as models; malformed rows are skipped."""
    rows = fetch_dicts(conn.execute(
        "SELECT id, name, account_type, balance, currency FROM accounts ORDER BY name"
    ))
    accounts = []
    for row in rows:
        try:
            accounts.append(account_from_row(row))
        except ValueError as e:
            logger.warning("Skipping malformed account %s: %s", row.get("id"), e)
    return accounts


def get_account(conn, account_id):
    """Return the account model, or ``None`` if it does not exist."""
    rows = fetch_dicts(conn.execute(
        "SELECT id, name, account_type, balance, currency FROM accounts WHERE id = ?",
        (account_id,)
    ))
    if not rows:
        return None
    return account_from_row(rows[0])


def adjust_balance(conn, account_id, delta):
    """
    Add ``delta`` to the stored balance.

    Callers run this inside ``db.atomic`` together with the transaction rows
    that produced the delta.
    """
    conn.execute(
        "UPDATE accounts SET balance = balance + ? WHERE id = ?",
        (delta, account_id)
    )
