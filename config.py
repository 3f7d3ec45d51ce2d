import os

# -----------------------------
# Storage
# -----------------------------
DB_FILE = os.getenv("BUDGET_DB_FILE", "budget.duckdb")

# -----------------------------
# Logging
# -----------------------------
LOG_FILE = os.getenv("BUDGET_LOG_FILE", "budget.log")
LOG_LEVEL = os.getenv("BUDGET_LOG_LEVEL", "INFO")

# -----------------------------
# Reporting
# -----------------------------
# Currency every net-worth rollup is expressed in. Handlers pass it
# explicitly to the reporting functions.
BASE_CURRENCY = os.getenv("BUDGET_BASE_CURRENCY", "TND")
