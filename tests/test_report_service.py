from datetime import date
from decimal import Decimal

import pytest

from builders import make_account, make_transaction
from repositories.accounts_repository import insert_account
from services.report_service import (
    generate_financial_advice,
    get_period_report,
    summarize_period,
)
from services.transaction_service import record_transfer, save_transaction
from utils.dates import period_bounds

TODAY = date(2024, 5, 15)  # a Wednesday
CATEGORIES = {"salary": "Salary", "food": "Food", "fun": "Fun"}


def _may_activity():
    accounts = [make_account("acc-1"), make_account("acc-usd", currency="USD")]
    transactions = [
        make_transaction("pay", amount="1000", tx_type="income", on=date(2024, 5, 2), category_id="salary"),
        make_transaction("market", amount="200", on=date(2024, 5, 3), category_id="food"),
        make_transaction("dinner", amount="100", on=date(2024, 5, 10), category_id="food"),
        make_transaction("cinema", account_id="acc-usd", amount="50", on=date(2024, 5, 12), category_id="fun"),
        make_transaction("april", amount="999", on=date(2024, 4, 30), category_id="food"),
        make_transaction("leg", amount="300", on=date(2024, 5, 5), transfer_id="t-1"),
    ]
    return transactions, accounts


@pytest.mark.parametrize("period, expected", [
    ("day", (date(2024, 5, 15), date(2024, 5, 15))),
    ("week", (date(2024, 5, 13), date(2024, 5, 19))),
    ("month", (date(2024, 5, 1), date(2024, 5, 31))),
    ("year", (date(2024, 1, 1), date(2024, 12, 31))),
])
def test_period_bounds(period, expected):
    assert period_bounds(period, TODAY) == expected


def test_week_starting_on_monday_includes_that_monday():
    assert period_bounds("week", date(2024, 5, 13))[0] == date(2024, 5, 13)


def test_month_totals_convert_to_base_and_skip_transfers():
    transactions, accounts = _may_activity()
    start, end = period_bounds("month", TODAY)

    income, expenses, income_by_category, expense_by_category = summarize_period(
        transactions, accounts, CATEGORIES, start, end, "TND"
    )

    assert income == Decimal("1000.00")
    assert expenses == Decimal("456.00")
    assert income_by_category == {"Salary": Decimal("1000.00")}
    assert expense_by_category == {"Food": Decimal("300.00"), "Fun": Decimal("156.00")}


def test_unknown_category_is_reported_as_uncategorized():
    transactions = [make_transaction(category_id="gone")]
    start, end = period_bounds("month", TODAY)

    _, _, _, expense_by_category = summarize_period(
        transactions, [make_account()], CATEGORIES, start, end, "TND"
    )

    assert expense_by_category == {"Uncategorized": Decimal("10.00")}


def test_no_transactions_advice():
    narrative, advice = generate_financial_advice("week", Decimal("0"), Decimal("0"), {}, "TND")

    assert narrative == (
        "You had no transactions for this week. "
        "Start by adding some to see your financial analysis."
    )
    assert advice == "Try adding a few transactions for this period. Even small ones count!"


def test_healthy_savings_narrative_names_top_category():
    narrative, advice = generate_financial_advice(
        "month", Decimal("1000"), Decimal("456"),
        {"Food": Decimal("300"), "Fun": Decimal("156")}, "TND",
    )

    assert narrative == (
        "For this month, your total income was 1,000.00 TND and your expenses were 456.00 TND. "
        "You did a great job, saving 544.00 TND! "
        'Your largest spending area was "Food", accounting for about 66% of your total expenses.'
    )
    assert advice.startswith("You are saving a healthy portion of your income.")


def test_small_surplus_points_at_top_category():
    _, advice = generate_financial_advice(
        "month", Decimal("1000"), Decimal("900"), {"Rent": Decimal("900")}, "TND",
    )

    assert advice.startswith("You're on the right track")
    assert '"Rent"' in advice


def test_deficit_with_many_categories():
    spending = {name: Decimal("100") for name in ("Rent", "Food", "Fuel", "Fun")}
    narrative, advice = generate_financial_advice(
        "year", Decimal("300"), Decimal("400"), spending, "TND",
    )

    assert "You spent 100.00 TND more than you earned." in narrative
    assert advice.startswith("You're currently in a deficit")
    assert '"Rent"' in advice
    assert advice.endswith("might reveal more saving opportunities.")


def test_get_period_report_reads_store(conn):
    conn.execute("INSERT INTO categories (id, name, category_type) VALUES ('food', 'Food', 'expense')")
    checking = insert_account(conn, "Checking", "Bank", "TND", balance=Decimal("1000"))
    wallet = insert_account(conn, "Wallet", "Cash", "EUR")
    save_transaction(account_id=checking, tx_type="income", amount="500",
                     date="2024-05-14", description="Freelance", conn=conn)
    save_transaction(account_id=wallet, tx_type="expense", amount="20",
                     date="2024-05-13", description="Lunch", category_id="food", conn=conn)
    save_transaction(account_id=checking, tx_type="expense", amount="80",
                     date="2024-05-06", description="Last week", conn=conn)
    record_transfer(from_account_id=checking, to_account_id=wallet,
                    amount="100", date="2024-05-14", conn=conn)

    report = get_period_report("week", "TND", today=TODAY, conn=conn)

    assert (report.start_date, report.end_date) == (date(2024, 5, 13), date(2024, 5, 19))
    assert report.total_income == Decimal("500.00")
    assert report.total_expenses == Decimal("67.00")
    assert report.net_savings == Decimal("433.00")
    assert report.expense_by_category == {"Food": Decimal("67.00")}
    assert report.income_by_category == {"Uncategorized": Decimal("500.00")}


def test_get_period_report_without_activity(conn):
    report = get_period_report("year", "TND", today=TODAY, conn=conn)

    assert report.total_income == Decimal("0.00")
    assert report.narrative.startswith("You had no transactions for this year.")


def test_unknown_period_is_rejected(conn):
    with pytest.raises(ValueError):
        get_period_report("fortnight", "TND", today=TODAY, conn=conn)
