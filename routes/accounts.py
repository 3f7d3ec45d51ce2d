from fastapi import APIRouter, HTTPException

from db import atomic, connection
from models.requests import AccountCreate
from repositories.accounts_repository import insert_account, list_accounts

router = APIRouter()


@router.post("/accounts")
def create_account(account: AccountCreate):
    if not account.name.strip():
        raise HTTPException(status_code=400, detail="Account name is required")
    with connection() as conn:
        with atomic(conn):
            account_id = insert_account(
                conn,
                name=account.name.strip(),
                account_type=account.account_type.value,
                currency=account.currency.strip().upper(),
                balance=account.balance,
            )
    return {"success": True, "id": account_id}


@router.get("/accounts")
def get_accounts():
    with connection() as conn:
        accounts = list_accounts(conn)
    return {
        "count": len(accounts),
        "accounts": [
            {
                "id": a.id,
                "name": a.name,
                "account_type": a.account_type.value,
                "balance": float(a.balance),
                "currency": a.currency,
            }
            for a in accounts
        ]
    }
