import logging

from db import fetch_dicts
from helpers.normalize import transaction_from_row

logger = logging.getLogger(__name__)

# -----------------------------
# Transactions Repository
# -----------------------------

_COLUMNS = "id, account_id, category_id, tx_type, amount, date, description, is_recurring, transfer_id"


def insert_transaction(conn, tx):
    """
    Inserts a transaction model. Balance bookkeeping is the caller's job.
    """
    conn.execute(
        f"INSERT INTO transactions ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (tx.id, tx.account_id, tx.category_id, tx.tx_type.value, tx.amount,
         tx.date, tx.description, tx.is_recurring, tx.transfer_id)
    )


def update_transaction(conn, tx):
    conn.execute(
        """
        UPDATE transactions
        SET account_id = ?, category_id = ?, tx_type = ?, amount = ?,
            date = ?, description = ?, is_recurring = ?
        WHERE id = ?
        """,
        (tx.account_id, tx.category_id, tx.tx_type.value, tx.amount,
         tx.date, tx.description, tx.is_recurring, tx.id)
    )


def get_transaction_by_id(conn, transaction_id):
    rows = fetch_dicts(conn.execute(
        f"SELECT {_COLUMNS} FROM transactions WHERE id = ?", (transaction_id,)
    ))
    if not rows:
        return None
    return transaction_from_row(rows[0])


def get_transfer_legs(conn, transfer_id):
    rows = fetch_dicts(conn.execute(
        f"SELECT {_COLUMNS} FROM transactions WHERE transfer_id = ? ORDER BY tx_type", (transfer_id,)
    ))
    return [transaction_from_row(row) for row in rows]


def get_all_transactions(conn, account_id=None, limit=None):
    """
    Returns transactions newest first.
    - account_id: optional, if None returns all accounts
    - limit: optional, max number of rows
    """
    query = f"SELECT {_COLUMNS} FROM transactions"
    params = []

    if account_id:
        query += " WHERE account_id = ?"
        params.append(account_id)

    query += " ORDER BY date DESC, created_at DESC"

    if limit:
        query += " LIMIT ?"
        params.append(limit)

    transactions = []
    for row in fetch_dicts(conn.execute(query, params)):
        try:
            transactions.append(transaction_from_row(row))
        except ValueError as e:
            logger.warning("Skipping malformed transaction %s: %s", row.get("id"), e)
    return transactions


def delete_transaction(conn, transaction_id):
    conn.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))
