from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from models.requests import BudgetCreate
from services.budget_service import (
    create_budget,
    delete_budget,
    get_budget_allocations,
    mark_budget_achieved,
)
from services.forecast_dto import BudgetAllocationDTO

router = APIRouter()


@router.get("/budgets")
def get_budgets():
    """
    Budgets in target-date order with earmarked funds and suggested saving.
    """
    allocations = get_budget_allocations()
    return {
        "budgets": [asdict(BudgetAllocationDTO.from_allocation(a)) for a in allocations]
    }


@router.post("/budgets")
def add_budget(body: BudgetCreate):
    try:
        budget = create_budget(
            name=body.name,
            target_amount=body.target_amount,
            target_date=body.target_date,
            account_ids=body.account_ids,
            current_amount=body.current_amount,
            description=body.description,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "id": budget.id}


@router.post("/budgets/{budget_id}/achieved")
def achieve_budget(budget_id: str):
    try:
        budget = mark_budget_achieved(budget_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "current_amount": float(budget.current_amount)}


@router.delete("/budgets/{budget_id}")
def remove_budget(budget_id: str):
    try:
        delete_budget(budget_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True}
