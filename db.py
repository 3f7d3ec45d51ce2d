import duckdb
import logging
from contextlib import contextmanager

import config

# -----------------------------
# Logging
# -----------------------------
logging.basicConfig(
    filename=config.LOG_FILE,
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s"
)

def log_info(msg):
    logging.info(msg)
    print(msg)

def log_error(msg):
    logging.error(msg)
    print(msg)

# -----------------------------
# Get a DB connection
# -----------------------------
def get_db():
    """
    Returns a new DuckDB connection to the configured database file.
    """
    return duckdb.connect(config.DB_FILE)

@contextmanager
def connection(conn=None):
    """
    Yield ``conn`` if given, otherwise open a connection and close it on the
    caller's behalf.
    """
    if conn is not None:
        yield conn
        return
    conn = get_db()
    try:
        yield conn
    finally:
        conn.close()

# -----------------------------
# Atomic read-modify-write
# -----------------------------
@contextmanager
def atomic(conn):
    """
    Run a block of statements as one DuckDB transaction.

    Commits when the block exits cleanly; rolls back and re-raises on any
    exception so no partial write is ever observed.
    """
    conn.begin()
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    conn.commit()

# -----------------------------
# Initialize database schema
# -----------------------------
def init_db(conn=None):
    own_conn = False
    if conn is None:
        conn = get_db()
        own_conn = True
    try:
        # Accounts table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            id VARCHAR PRIMARY KEY,
            name VARCHAR NOT NULL,
            account_type VARCHAR NOT NULL CHECK(account_type IN ('Bank','Credit Card','Cash')),
            balance DECIMAL(18,2) NOT NULL DEFAULT 0,
            currency VARCHAR NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Accounts table ensured.")

        # Categories table (opaque references for transactions and templates)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS categories (
            id VARCHAR PRIMARY KEY,
            name VARCHAR NOT NULL,
            category_type VARCHAR CHECK(category_type IN ('income','expense','transfer')),
            parent_id VARCHAR
        );
        """)
        log_info("Categories table ensured.")

        # Transactions table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id VARCHAR PRIMARY KEY,
            account_id VARCHAR NOT NULL,
            category_id VARCHAR,
            tx_type VARCHAR NOT NULL CHECK(tx_type IN ('income','expense')),
            amount DECIMAL(18,2) NOT NULL CHECK(amount > 0),
            date DATE NOT NULL,
            description TEXT NOT NULL,
            is_recurring BOOLEAN DEFAULT FALSE,
            transfer_id VARCHAR,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Transactions table ensured.")

        # Recurring templates table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS recurring_transactions (
            id VARCHAR PRIMARY KEY,
            account_id VARCHAR NOT NULL,
            category_id VARCHAR,
            tx_type VARCHAR NOT NULL CHECK(tx_type IN ('income','expense')),
            amount DECIMAL(18,2) NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            frequency VARCHAR NOT NULL,
            start_date DATE NOT NULL,
            end_date DATE,
            next_due_date DATE NOT NULL,
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Recurring transactions table ensured.")

        # Budgets and their linked accounts
        conn.execute("""
        CREATE TABLE IF NOT EXISTS budgets (
            id VARCHAR PRIMARY KEY,
            name VARCHAR NOT NULL,
            description TEXT,
            target_amount DECIMAL(18,2) NOT NULL,
            current_amount DECIMAL(18,2) NOT NULL DEFAULT 0,
            target_date DATE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS budget_accounts (
            budget_id VARCHAR NOT NULL,
            account_id VARCHAR NOT NULL,
            position INTEGER NOT NULL,
            PRIMARY KEY (budget_id, account_id)
        );
        """)
        log_info("Budgets tables ensured.")

        # Default transfer category
        conn.execute("""
        INSERT INTO categories (id, name, category_type)
        SELECT 'transfer', 'Transfer', 'transfer'
        WHERE NOT EXISTS (SELECT 1 FROM categories WHERE id = 'transfer');
        """)
        log_info("Default transfer category ensured.")

    except Exception as e:
        log_error(f"Error initializing DB: {e}")
        raise
    finally:
        if own_conn:
            conn.close()
            log_info("Database setup complete and connection closed.")

# -----------------------------
# Row helpers
# -----------------------------
def fetch_dicts(result):
    """Materialize a DuckDB result as a list of column-name dicts."""
    columns = [col[0] for col in result.description]
    rows = result.fetchall()
    return [dict(zip(columns, row)) for row in rows]
