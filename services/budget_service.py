from datetime import date as date_cls
from uuid import uuid4

from db import atomic, connection
from helpers.normalize import to_date
from models.domain import Budget
from repositories.accounts_repository import get_account, list_accounts
from repositories.budgets_repository import (
    delete_budget as repo_delete_budget,
    get_budget,
    insert_budget,
    list_budgets,
    set_current_amount,
)
from services.budget_allocation import allocate_budgets
from utils.money import parse_money, parse_positive_money


def create_budget(*, name, target_amount, target_date, account_ids,
                  current_amount=0, description=None, conn=None):
    """Create a savings budget linked to one or more existing accounts."""
    if not account_ids:
        raise ValueError("A budget must be linked to at least one account")
    if not (name or "").strip():
        raise ValueError("Budget name is required")

    budget = Budget(
        id=uuid4().hex,
        name=name.strip(),
        target_amount=parse_positive_money(target_amount),
        current_amount=parse_money(current_amount),
        target_date=to_date(target_date),
        account_ids=list(dict.fromkeys(account_ids)),
        description=description,
    )

    with connection(conn) as conn:
        for account_id in budget.account_ids:
            if get_account(conn, account_id) is None:
                raise LookupError(f"Account {account_id} not found")
        with atomic(conn):
            insert_budget(conn, budget)
    return budget


def mark_budget_achieved(budget_id, conn=None):
    """Set the budget's current amount to its target amount."""
    with connection(conn) as conn:
        budget = get_budget(conn, budget_id)
        if budget is None:
            raise LookupError(f"Budget {budget_id} not found")
        with atomic(conn):
            set_current_amount(conn, budget_id, budget.target_amount)
        budget.current_amount = budget.target_amount
        return budget


def delete_budget(budget_id, conn=None):
    with connection(conn) as conn:
        if get_budget(conn, budget_id) is None:
            raise LookupError(f"Budget {budget_id} not found")
        with atomic(conn):
            repo_delete_budget(conn, budget_id)


def get_budget_allocations(today=None, conn=None):
    """Load budgets and accounts and run the allocation engine over them."""
    today = today or date_cls.today()
    with connection(conn) as conn:
        budgets = list_budgets(conn)
        accounts = list_accounts(conn)
    return allocate_budgets(budgets, accounts, today)
