from datetime import datetime

from db import connection
from models.projection_dto import ProjectionResult
from repositories.accounts_repository import list_accounts
from repositories.recurring_repository import list_recurring
from services.forecast_service import forecast_balances, forecast_net_worth


def calculate_projection(as_of, base_currency, now=None, conn=None) -> ProjectionResult:
    """Predicted balances on ``as_of`` plus the net worth in ``base_currency``.

    Read-only: fetches accounts and active templates, never writes.
    """
    now = now or datetime.now()

    with connection(conn) as conn:
        accounts = list_accounts(conn)
        templates = list_recurring(conn, active_only=True)

    predicted = forecast_balances(accounts, templates, as_of, now)
    projections, total = forecast_net_worth(accounts, predicted, base_currency)

    return ProjectionResult(
        as_of=as_of,
        base_currency=base_currency,
        accounts=projections,
        total_predicted_net_worth=total,
    )
