from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from models.domain import Budget, Transaction


@dataclass
class RecurringRunResult:
    """Output of one catch-up pass over the recurring templates."""
    materialized_transactions: List[Transaction] = field(default_factory=list)
    account_balance_deltas: Dict[str, Decimal] = field(default_factory=dict)
    updated_cursors: Dict[str, date] = field(default_factory=dict)
    deactivated_template_ids: List[str] = field(default_factory=list)
    skipped_template_ids: List[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(
            self.materialized_transactions
            or self.updated_cursors
            or self.deactivated_template_ids
        )


@dataclass
class AccountProjection:
    account_id: str
    name: str
    currency: str
    balance: Decimal
    predicted_balance: Decimal
    predicted_balance_in_base: Decimal
    exchange_rate: Optional[Decimal] = None
    is_unofficial_rate: bool = False


@dataclass
class ProjectionResult:
    as_of: Optional[date]
    base_currency: str
    accounts: List[AccountProjection]
    total_predicted_net_worth: Decimal


@dataclass
class BudgetAllocation:
    budget: Budget
    currency: Optional[str]
    available_for_this_goal: Decimal
    remaining_needed: Decimal
    suggested_saving: Decimal
    saving_period: str  # "day" | "month"
    progress: float


@dataclass
class PeriodReport:
    """Income and spending for one calendar period, in the base currency."""
    period: str
    start_date: date
    end_date: date
    base_currency: str
    total_income: Decimal
    total_expenses: Decimal
    net_savings: Decimal
    income_by_category: Dict[str, Decimal]
    expense_by_category: Dict[str, Decimal]
    narrative: str
    advice: str
