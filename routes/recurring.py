from fastapi import APIRouter, HTTPException, Request

from models.requests import RecurringCreate
from services.recurring_service import create_recurring, delete_recurring, list_recurring
from services.session_service import start_session

router = APIRouter()


def _template_to_dict(t):
    return {
        "id": t.id,
        "account_id": t.account_id,
        "category_id": t.category_id,
        "tx_type": t.tx_type.value,
        "amount": float(t.amount),
        "frequency": t.frequency.value,
        "start_date": t.start_date.isoformat(),
        "end_date": t.end_date.isoformat() if t.end_date else None,
        "next_due_date": t.next_due_date.isoformat(),
        "description": t.description,
        "is_active": t.is_active,
    }


@router.get("/recurring")
def get_recurring(active_only: bool = False):
    templates = list_recurring(active_only=active_only)
    return {"count": len(templates), "recurring": [_template_to_dict(t) for t in templates]}


@router.post("/recurring")
def add_recurring(body: RecurringCreate):
    try:
        template = create_recurring(
            account_id=body.account_id,
            tx_type=body.tx_type,
            amount=body.amount,
            frequency=body.frequency,
            start_date=body.start_date,
            end_date=body.end_date,
            description=body.description,
            category_id=body.category_id,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "recurring": _template_to_dict(template)}


@router.delete("/recurring/{template_id}")
def remove_recurring(template_id: str):
    try:
        delete_recurring(template_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True}


@router.post("/session/start")
def session_start(request: Request):
    """
    Run recurring catch-up once for the current application session.
    """
    session = request.app.state.session
    result = start_session(session)
    if result is None:
        return {"processed": session.recurring_processed, "created": 0, "deactivated": 0}
    return {
        "processed": True,
        "created": len(result.materialized_transactions),
        "deactivated": len(result.deactivated_template_ids),
        "skipped": len(result.skipped_template_ids),
    }
