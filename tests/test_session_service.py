import threading
import time
from datetime import date, datetime
from decimal import Decimal

import pytest

import config
import services.session_service as session_service
from db import connection, init_db
from repositories.accounts_repository import get_account, insert_account
from repositories.recurring_repository import get_recurring_by_id
from services.recurring_service import create_recurring
from services.session_service import SessionState, start_session

NOW = datetime(2024, 4, 15, 10, 0)


@pytest.fixture
def account_id(conn):
    return insert_account(conn, "Checking", "Bank", "TND", balance=Decimal("1000"))


def _count_transactions(conn):
    return conn.execute("SELECT COUNT(*) FROM transactions").fetchone()[0]


def test_start_session_persists_catch_up(conn, account_id):
    template = create_recurring(account_id=account_id, tx_type="income", amount="100",
                                frequency="monthly", start_date="2024-01-01",
                                description="Salary", conn=conn)
    session = SessionState()

    result = start_session(session, now=NOW, conn=conn)

    assert len(result.materialized_transactions) == 4
    assert session.recurring_processed
    assert _count_transactions(conn) == 4
    assert get_account(conn, account_id).balance == Decimal("1400.00")
    assert get_recurring_by_id(conn, template.id).next_due_date == date(2024, 5, 1)


def test_start_session_runs_once_per_session(conn, account_id):
    create_recurring(account_id=account_id, tx_type="expense", amount="40",
                     frequency="monthly", start_date="2024-03-01", conn=conn)
    session = SessionState()

    start_session(session, now=NOW, conn=conn)
    assert start_session(session, now=datetime(2024, 9, 1), conn=conn) is None
    assert _count_transactions(conn) == 2


def test_new_session_with_same_now_is_idempotent(conn, account_id):
    create_recurring(account_id=account_id, tx_type="expense", amount="40",
                     frequency="quarterly", start_date="2023-07-01", conn=conn)

    start_session(SessionState(), now=NOW, conn=conn)
    again = start_session(SessionState(), now=NOW, conn=conn)

    assert again.materialized_transactions == []
    assert _count_transactions(conn) == 4
    assert get_account(conn, account_id).balance == Decimal("840.00")


def test_expired_template_is_deactivated_in_store(conn, account_id):
    template = create_recurring(account_id=account_id, tx_type="income", amount="100",
                                frequency="monthly", start_date="2024-01-01",
                                end_date="2024-02-15", conn=conn)

    start_session(SessionState(), now=datetime(2024, 4, 1), conn=conn)

    stored = get_recurring_by_id(conn, template.id)
    assert not stored.is_active
    assert stored.next_due_date == date(2024, 3, 1)
    assert get_account(conn, account_id).balance == Decimal("1200.00")


def test_failed_batch_write_leaves_store_untouched(conn, account_id, monkeypatch, caplog):
    template = create_recurring(account_id=account_id, tx_type="income", amount="100",
                                frequency="monthly", start_date="2024-01-01", conn=conn)

    def broken_update(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(session_service, "update_next_due_date", broken_update)
    session = SessionState()

    assert start_session(session, now=NOW, conn=conn) is None
    assert not session.recurring_processed
    assert _count_transactions(conn) == 0
    assert get_account(conn, account_id).balance == Decimal("1000.00")
    assert get_recurring_by_id(conn, template.id).next_due_date == date(2024, 1, 1)
    assert "disk full" in caplog.text

    monkeypatch.undo()
    retried = start_session(session, now=NOW, conn=conn)
    assert len(retried.materialized_transactions) == 4
    assert session.recurring_processed


def test_malformed_stored_template_is_skipped(conn, account_id, caplog):
    conn.execute("""
        INSERT INTO recurring_transactions
        (id, account_id, tx_type, amount, frequency, start_date, next_due_date)
        VALUES ('weird', ?, 'income', 10, 'fortnightly', DATE '2024-01-01', DATE '2024-01-01')
    """, [account_id])
    create_recurring(account_id=account_id, tx_type="income", amount="100",
                     frequency="monthly", start_date="2024-04-01", conn=conn)

    result = start_session(SessionState(), now=NOW, conn=conn)

    assert len(result.materialized_transactions) == 1
    assert "Skipping malformed recurring template weird" in caplog.text


def test_concurrent_starts_on_one_session_run_catch_up_once(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_FILE", str(tmp_path / "session.duckdb"))
    init_db()
    with connection() as conn:
        account_id = insert_account(conn, "Checking", "Bank", "TND", balance=Decimal("1000"))
        create_recurring(account_id=account_id, tx_type="income", amount="100",
                         frequency="monthly", start_date="2024-01-01", conn=conn)

    runs = []
    real_process = session_service.process_recurring

    def slow_process(*args, **kwargs):
        runs.append(threading.get_ident())
        time.sleep(0.05)
        return real_process(*args, **kwargs)

    monkeypatch.setattr(session_service, "process_recurring", slow_process)
    session = SessionState()
    results = []

    def worker():
        results.append(start_session(session, now=NOW))

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(runs) == 1
    assert sum(result is not None for result in results) == 1
    with connection() as conn:
        assert _count_transactions(conn) == 4
        assert get_account(conn, account_id).balance == Decimal("1400.00")
