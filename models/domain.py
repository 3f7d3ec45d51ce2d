from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class AccountType(str, Enum):
    BANK = "Bank"
    CREDIT_CARD = "Credit Card"
    CASH = "Cash"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    """Recurrence cadence; each value advances by a fixed number of calendar months."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUALLY = "semi-annually"
    YEARLY = "yearly"

    @property
    def months(self) -> int:
        return _FREQUENCY_MONTHS[self]


_FREQUENCY_MONTHS = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.SEMI_ANNUALLY: 6,
    Frequency.YEARLY: 12,
}


def signed_amount(tx_type: TransactionType, amount: Decimal) -> Decimal:
    """Balance effect of an amount: income adds, expense subtracts."""
    return amount if tx_type == TransactionType.INCOME else -amount


@dataclass
class Account:
    id: str
    name: str
    account_type: AccountType
    balance: Decimal
    currency: str


@dataclass
class Transaction:
    id: str
    account_id: str
    category_id: Optional[str]
    tx_type: TransactionType
    amount: Decimal  # always positive; direction comes from tx_type
    date: date
    description: str
    is_recurring: bool = False
    transfer_id: Optional[str] = None  # shared by both legs of a transfer

    @property
    def signed_amount(self) -> Decimal:
        return signed_amount(self.tx_type, self.amount)

    @property
    def is_transfer_leg(self) -> bool:
        return self.transfer_id is not None


@dataclass
class RecurringTransaction:
    id: str
    account_id: str
    category_id: Optional[str]
    tx_type: TransactionType
    amount: Decimal
    frequency: Frequency
    start_date: date
    next_due_date: date
    description: str = ""
    end_date: Optional[date] = None
    is_active: bool = True

    @property
    def signed_amount(self) -> Decimal:
        return signed_amount(self.tx_type, self.amount)


@dataclass
class Budget:
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: Optional[date]
    account_ids: List[str] = field(default_factory=list)
    description: Optional[str] = None

    @property
    def progress(self) -> float:
        if not self.target_amount:
            return 0.0
        return float(self.current_amount / self.target_amount * 100)
