import logging
from collections import defaultdict

from db import fetch_dicts
from helpers.normalize import budget_from_row

logger = logging.getLogger(__name__)

# -----------------------------
# Budgets Repository
# -----------------------------

def insert_budget(conn, budget):
    conn.execute(
        """
        INSERT INTO budgets (id, name, description, target_amount, current_amount, target_date)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (budget.id, budget.name, budget.description, budget.target_amount,
         budget.current_amount, budget.target_date)
    )
    for position, account_id in enumerate(budget.account_ids):
        conn.execute(
            "INSERT INTO budget_accounts (budget_id, account_id, position) VALUES (?, ?, ?)",
            (budget.id, account_id, position)
        )


def _linked_accounts(conn):
    links = defaultdict(list)
    rows = conn.execute(
        "SELECT budget_id, account_id FROM budget_accounts ORDER BY budget_id, position"
    ).fetchall()
    for budget_id, account_id in rows:
        links[budget_id].append(account_id)
    return links


def list_budgets(conn):
    links = _linked_accounts(conn)
    rows = fetch_dicts(conn.execute(
        """
        SELECT id, name, description, target_amount, current_amount, target_date
        FROM budgets
        ORDER BY target_date, name
        """
    ))
    budgets = []
    for row in rows:
        try:
            budgets.append(budget_from_row(row, links.get(row["id"], [])))
        except ValueError as e:
            logger.warning("Skipping malformed budget %s: %s", row.get("id"), e)
    return budgets


def get_budget(conn, budget_id):
    rows = fetch_dicts(conn.execute(
        """
        SELECT id, name, description, target_amount, current_amount, target_date
        FROM budgets WHERE id = ?
        """,
        (budget_id,)
    ))
    if not rows:
        return None
    return budget_from_row(rows[0], _linked_accounts(conn).get(budget_id, []))


def set_current_amount(conn, budget_id, amount):
    conn.execute(
        "UPDATE budgets SET current_amount = ? WHERE id = ?",
        (amount, budget_id)
    )


def delete_budget(conn, budget_id):
    conn.execute("DELETE FROM budget_accounts WHERE budget_id = ?", (budget_id,))
    conn.execute("DELETE FROM budgets WHERE id = ?", (budget_id,))
