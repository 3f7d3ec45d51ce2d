from fastapi import FastAPI

from db import init_db
from routes import accounts, budgets, forecast, recurring, reports, transactions
from services.session_service import SessionState

app = FastAPI(title="Budget Forecasting")

# One session per running application; catch-up runs at most once in it.
app.state.session = SessionState()


@app.on_event("startup")
def startup():
    init_db()


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(accounts.router)
app.include_router(transactions.router)
app.include_router(recurring.router)
app.include_router(budgets.router)
app.include_router(forecast.router)
app.include_router(reports.router)
