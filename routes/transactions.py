from typing import Optional

from fastapi import APIRouter, HTTPException

from models.requests import TransactionSave, TransferCreate
from services.transaction_service import (
    delete_transaction,
    get_all_transactions,
    record_transfer,
    save_transaction,
)

router = APIRouter()


def _tx_to_dict(tx):
    return {
        "id": tx.id,
        "account_id": tx.account_id,
        "category_id": tx.category_id,
        "tx_type": tx.tx_type.value,
        "amount": float(tx.amount),
        "date": tx.date.isoformat(),
        "description": tx.description,
        "is_recurring": tx.is_recurring,
        "transfer_id": tx.transfer_id,
    }


def _save(body: TransactionSave, transaction_id=None):
    try:
        tx = save_transaction(
            account_id=body.account_id,
            tx_type=body.tx_type,
            amount=body.amount,
            date=body.date,
            description=body.description,
            category_id=body.category_id,
            is_recurring=body.is_recurring,
            transaction_id=transaction_id,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "transaction": _tx_to_dict(tx)}


@router.get("/transactions")
def list_transactions(account_id: Optional[str] = None, limit: Optional[int] = None):
    transactions = get_all_transactions(account_id=account_id, limit=limit)
    return {"transactions": [_tx_to_dict(tx) for tx in transactions]}


@router.post("/transactions")
def create_transaction(body: TransactionSave):
    return _save(body)


@router.put("/transactions/{transaction_id}")
def update_transaction(transaction_id: str, body: TransactionSave):
    return _save(body, transaction_id=transaction_id)


@router.delete("/transactions/{transaction_id}")
def remove_transaction(transaction_id: str):
    try:
        deleted = delete_transaction(transaction_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "deleted": [tx.id for tx in deleted]}


@router.post("/transfers")
def create_transfer(body: TransferCreate):
    try:
        expense_leg, income_leg = record_transfer(
            from_account_id=body.from_account_id,
            to_account_id=body.to_account_id,
            amount=body.amount,
            date=body.date,
            description=body.description,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "success": True,
        "transfer_id": expense_leg.transfer_id,
        "legs": [_tx_to_dict(expense_leg), _tx_to_dict(income_leg)],
    }
