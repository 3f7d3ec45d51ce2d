import logging

from db import fetch_dicts
from helpers.normalize import recurring_from_row

logger = logging.getLogger(__name__)

# -----------------------------
# Recurring Templates Repository
# -----------------------------

_COLUMNS = ("id, account_id, category_id, tx_type, amount, description, frequency, "
            "start_date, end_date, next_due_date, is_active")


def insert_recurring(conn, template):
    conn.execute(
        f"INSERT INTO recurring_transactions ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (template.id, template.account_id, template.category_id, template.tx_type.value,
         template.amount, template.description, template.frequency.value,
         template.start_date, template.end_date, template.next_due_date, template.is_active)
    )


def list_recurring(conn, active_only=False):
    """
    Return recurring templates as models.

    Rows that cannot be normalized (unknown frequency, missing dates...) are
    skipped with a warning so one bad template never blocks the rest.
    """
    query = f"SELECT {_COLUMNS} FROM recurring_transactions"
    if active_only:
        query += " WHERE is_active = TRUE"
    query += " ORDER BY next_due_date, id"

    templates = []
    for row in fetch_dicts(conn.execute(query)):
        try:
            templates.append(recurring_from_row(row))
        except ValueError as e:
            logger.warning("Skipping malformed recurring template %s: %s", row.get("id"), e)
    return templates


def get_recurring_by_id(conn, template_id):
    rows = fetch_dicts(conn.execute(
        f"SELECT {_COLUMNS} FROM recurring_transactions WHERE id = ?", (template_id,)
    ))
    if not rows:
        return None
    return recurring_from_row(rows[0])


def update_next_due_date(conn, template_id, next_due_date):
    conn.execute(
        "UPDATE recurring_transactions SET next_due_date = ? WHERE id = ?",
        (next_due_date, template_id)
    )


def deactivate(conn, template_id):
    conn.execute(
        "UPDATE recurring_transactions SET is_active = FALSE WHERE id = ?",
        (template_id,)
    )


def delete_recurring(conn, template_id):
    conn.execute("DELETE FROM recurring_transactions WHERE id = ?", (template_id,))
