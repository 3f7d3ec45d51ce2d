from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class AccountForecastDTO:
    """Single account line in the forecast response."""
    account_id: str
    name: str
    currency: str
    balance: float
    predicted_balance: float
    predicted_balance_in_base: float
    exchange_rate: Optional[float]
    is_unofficial_rate: bool


@dataclass
class ForecastResponseDTO:
    """Complete forecast response."""
    as_of: Optional[str]  # ISO format
    base_currency: str
    total_predicted_net_worth: float
    accounts: List[AccountForecastDTO]

    @classmethod
    def from_projection(cls, projection):
        """Convert ProjectionResult to JSON-serializable DTO."""
        return cls(
            as_of=projection.as_of.isoformat() if projection.as_of else None,
            base_currency=projection.base_currency,
            total_predicted_net_worth=round(float(projection.total_predicted_net_worth), 2),
            accounts=[
                AccountForecastDTO(
                    account_id=a.account_id,
                    name=a.name,
                    currency=a.currency,
                    balance=float(a.balance),
                    predicted_balance=float(a.predicted_balance),
                    predicted_balance_in_base=round(float(a.predicted_balance_in_base), 2),
                    exchange_rate=float(a.exchange_rate) if a.exchange_rate is not None else None,
                    is_unofficial_rate=a.is_unofficial_rate,
                )
                for a in projection.accounts
            ]
        )


@dataclass
class BudgetAllocationDTO:
    """One budget with its earmarking and suggested saving."""
    id: str
    name: str
    target_amount: float
    current_amount: float
    target_date: Optional[str]
    account_ids: List[str]
    currency: Optional[str]
    progress: float
    available_for_this_goal: float
    remaining_needed: float
    suggested_saving: float
    saving_period: str

    @classmethod
    def from_allocation(cls, allocation):
        budget = allocation.budget
        return cls(
            id=budget.id,
            name=budget.name,
            target_amount=float(budget.target_amount),
            current_amount=float(budget.current_amount),
            target_date=budget.target_date.isoformat() if budget.target_date else None,
            account_ids=list(budget.account_ids),
            currency=allocation.currency,
            progress=round(allocation.progress, 2),
            available_for_this_goal=float(allocation.available_for_this_goal),
            remaining_needed=float(allocation.remaining_needed),
            suggested_saving=float(allocation.suggested_saving),
            saving_period=allocation.saving_period,
        )


@dataclass
class PeriodReportDTO:
    """Period totals, category breakdown and advice."""
    period: str
    start_date: str
    end_date: str
    base_currency: str
    total_income: float
    total_expenses: float
    net_savings: float
    income_by_category: Dict[str, float]
    expense_by_category: Dict[str, float]
    narrative: str
    advice: str

    @classmethod
    def from_report(cls, report):
        return cls(
            period=report.period,
            start_date=report.start_date.isoformat(),
            end_date=report.end_date.isoformat(),
            base_currency=report.base_currency,
            total_income=float(report.total_income),
            total_expenses=float(report.total_expenses),
            net_savings=float(report.net_savings),
            income_by_category={k: float(v) for k, v in report.income_by_category.items()},
            expense_by_category={k: float(v) for k, v in report.expense_by_category.items()},
            narrative=report.narrative,
            advice=report.advice,
        )
