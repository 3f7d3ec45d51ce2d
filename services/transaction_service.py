import logging
from uuid import uuid4

from db import atomic, connection
from helpers.normalize import to_date
from models.domain import Transaction, TransactionType
from repositories.accounts_repository import adjust_balance, get_account
from repositories.transactions_repository import (
    delete_transaction as repo_delete_transaction,
    get_all_transactions as repo_get_all_transactions,
    get_transaction_by_id as repo_get_transaction_by_id,
    get_transfer_legs,
    insert_transaction as repo_insert_transaction,
    update_transaction as repo_update_transaction,
)
from utils.money import parse_positive_money

logger = logging.getLogger(__name__)

TRANSFER_CATEGORY_ID = "transfer"


def _require_account(conn, account_id):
    account = get_account(conn, account_id)
    if account is None:
        raise LookupError(f"Account {account_id} not found")
    return account


def get_all_transactions(account_id=None, limit=None, conn=None):
    """Return transactions, optionally filtering by account."""
    with connection(conn) as conn:
        return repo_get_all_transactions(conn, account_id=account_id, limit=limit)


def save_transaction(*, account_id, tx_type, amount, date, description,
                     category_id=None, is_recurring=None,
                     transaction_id=None, conn=None):
    """
    Create or edit a regular transaction and move the account balance by the
    same signed amount in one atomic write.

    On edit the previous signed amount is reverted first: on the same account
    only the difference is applied; when the account changes the old account
    gets the reversal and the new one the full new amount. An edit that
    does not say otherwise keeps the stored recurring-origin flag.
    """
    tx = Transaction(
        id=transaction_id or uuid4().hex,
        account_id=account_id,
        category_id=category_id,
        tx_type=TransactionType(tx_type),
        amount=parse_positive_money(amount),
        date=to_date(date),
        description=(description or "").strip(),
        is_recurring=bool(is_recurring),
    )
    if tx.date is None:
        raise ValueError("Transaction date is required")

    with connection(conn) as conn:
        with atomic(conn):
            _require_account(conn, tx.account_id)

            if transaction_id is None:
                repo_insert_transaction(conn, tx)
                adjust_balance(conn, tx.account_id, tx.signed_amount)
                return tx

            original = repo_get_transaction_by_id(conn, transaction_id)
            if original is None:
                raise LookupError(f"Transaction {transaction_id} not found")
            if original.is_transfer_leg:
                raise ValueError("Transfer legs cannot be edited; delete the transfer instead")
            if is_recurring is None:
                tx.is_recurring = original.is_recurring

            if original.account_id == tx.account_id:
                adjust_balance(conn, tx.account_id, tx.signed_amount - original.signed_amount)
            else:
                _require_account(conn, original.account_id)
                adjust_balance(conn, original.account_id, -original.signed_amount)
                adjust_balance(conn, tx.account_id, tx.signed_amount)

            repo_update_transaction(conn, tx)
            return tx


def record_transfer(*, from_account_id, to_account_id, amount, date,
                    description=None, conn=None):
    """
    Move money between two accounts.

    Writes an expense leg on the source and an income leg on the destination,
    linked by a shared ``transfer_id``, and updates both balances atomically.
    Returns ``(expense_leg, income_leg)``.
    """
    if from_account_id == to_account_id:
        raise ValueError("Cannot transfer to the same account")
    amount = parse_positive_money(amount)
    date = to_date(date)
    if date is None:
        raise ValueError("Transfer date is required")
    transfer_id = uuid4().hex

    with connection(conn) as conn:
        with atomic(conn):
            source = _require_account(conn, from_account_id)
            destination = _require_account(conn, to_account_id)

            expense_leg = Transaction(
                id=uuid4().hex,
                account_id=source.id,
                category_id=TRANSFER_CATEGORY_ID,
                tx_type=TransactionType.EXPENSE,
                amount=amount,
                date=date,
                description=description or f"Transfer to {destination.name}",
                transfer_id=transfer_id,
            )
            income_leg = Transaction(
                id=uuid4().hex,
                account_id=destination.id,
                category_id=TRANSFER_CATEGORY_ID,
                tx_type=TransactionType.INCOME,
                amount=amount,
                date=date,
                description=description or f"Transfer from {source.name}",
                transfer_id=transfer_id,
            )
            for leg in (expense_leg, income_leg):
                repo_insert_transaction(conn, leg)
                adjust_balance(conn, leg.account_id, leg.signed_amount)

    return expense_leg, income_leg


def delete_transaction(transaction_id, conn=None):
    """
    Delete a transaction and revert its effect on the account balance.

    Deleting either leg of a transfer removes both legs and reverts both
    balances. Returns the deleted transactions.
    """
    with connection(conn) as conn:
        with atomic(conn):
            tx = repo_get_transaction_by_id(conn, transaction_id)
            if tx is None:
                raise LookupError(f"Transaction {transaction_id} not found")

            doomed = get_transfer_legs(conn, tx.transfer_id) if tx.is_transfer_leg else [tx]
            for item in doomed:
                _require_account(conn, item.account_id)
                adjust_balance(conn, item.account_id, -item.signed_amount)
                repo_delete_transaction(conn, item.id)

    if len(doomed) > 1:
        logger.info("Deleted transfer %s (%d legs)", tx.transfer_id, len(doomed))
    return doomed
