# helpers/normalize.py
"""
Data-access boundary: turn stored rows into domain models.

Every date-like value is normalized to a native ``datetime.date`` here so
the engines never see backend-specific timestamp wrappers.
"""
from datetime import date, datetime
from decimal import Decimal

from models.domain import (
    Account,
    AccountType,
    Budget,
    Frequency,
    RecurringTransaction,
    Transaction,
    TransactionType,
)
from utils.money import parse_money


def to_date(value):
    """
    Convert ISO strings, datetimes, dates and timestamp wrappers exposing
    ``to_date()`` / ``toDate()`` into a ``date``. ``None`` stays ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    for attr in ("to_date", "toDate"):
        converter = getattr(value, attr, None)
        if callable(converter):
            return to_date(converter())
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError as exc:
            raise ValueError(f"invalid date: {value!r}") from exc
    raise ValueError(f"unsupported date value: {value!r}")


def _required(row: dict, key: str):
    value = row.get(key)
    if value is None or value == "":
        raise ValueError(f"missing required field: {key}")
    return value


def _required_date(row: dict, key: str) -> date:
    return to_date(_required(row, key))


def account_from_row(row: dict) -> Account:
    return Account(
        id=_required(row, "id"),
        name=_required(row, "name"),
        account_type=AccountType(_required(row, "account_type")),
        balance=parse_money(row.get("balance") or Decimal("0")),
        currency=_required(row, "currency"),
    )


def transaction_from_row(row: dict) -> Transaction:
    return Transaction(
        id=_required(row, "id"),
        account_id=_required(row, "account_id"),
        category_id=row.get("category_id"),
        tx_type=TransactionType(_required(row, "tx_type")),
        amount=parse_money(_required(row, "amount")),
        date=_required_date(row, "date"),
        description=row.get("description") or "",
        is_recurring=bool(row.get("is_recurring")),
        transfer_id=row.get("transfer_id"),
    )


def recurring_from_row(row: dict) -> RecurringTransaction:
    start_date = _required_date(row, "start_date")
    return RecurringTransaction(
        id=_required(row, "id"),
        account_id=_required(row, "account_id"),
        category_id=row.get("category_id"),
        tx_type=TransactionType(_required(row, "tx_type")),
        amount=parse_money(_required(row, "amount")),
        frequency=Frequency(_required(row, "frequency")),
        start_date=start_date,
        next_due_date=to_date(row.get("next_due_date")) or start_date,
        description=row.get("description") or "",
        end_date=to_date(row.get("end_date")),
        is_active=bool(row.get("is_active", True)),
    )


def budget_from_row(row: dict, account_ids) -> Budget:
    """
    Invalid or missing target dates become ``None``; the allocation engine
    treats them as due today.
    """
    try:
        target_date = to_date(row.get("target_date"))
    except ValueError:
        target_date = None
    return Budget(
        id=_required(row, "id"),
        name=_required(row, "name"),
        target_amount=parse_money(_required(row, "target_amount")),
        current_amount=parse_money(row.get("current_amount") or Decimal("0")),
        target_date=target_date,
        account_ids=list(account_ids),
        description=row.get("description"),
    )
