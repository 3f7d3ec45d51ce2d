from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from models.domain import AccountType, Frequency, TransactionType


class AccountCreate(BaseModel):
    name: str
    account_type: AccountType
    currency: str
    balance: Decimal = Decimal("0")


class TransactionSave(BaseModel):
    account_id: str
    tx_type: TransactionType
    amount: Decimal
    date: date
    description: str = ""
    category_id: Optional[str] = None
    is_recurring: Optional[bool] = None


class TransferCreate(BaseModel):
    from_account_id: str
    to_account_id: str
    amount: Decimal
    date: date
    description: Optional[str] = None


class RecurringCreate(BaseModel):
    account_id: str
    tx_type: TransactionType
    amount: Decimal
    frequency: Frequency
    start_date: date
    end_date: Optional[date] = None
    description: str = ""
    category_id: Optional[str] = None


class BudgetCreate(BaseModel):
    name: str
    target_amount: Decimal
    target_date: date
    account_ids: List[str]
    current_amount: Decimal = Decimal("0")
    description: Optional[str] = None
