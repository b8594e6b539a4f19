from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.errors import to_http_exception
from app.core.exceptions import ResourceNotFound, TwoemError
from app.db.database import get_db
from app.models.student_models import Student
from app.schemas.backend_schemas.fee_schemas import (
    FeeEntryCreate,
    FeeEntryResponse,
    FeeLedgerResponse,
)
from app.services.dependencies import AdminIdentity, get_current_admin
from app.services.fee_service import get_fee_totals, list_fees, log_fee_entry


router = APIRouter(prefix="/admin/students", tags=["Admin Fees"])


@router.post("/{student_id}/fees", response_model=FeeEntryResponse, status_code=status.HTTP_201_CREATED)
def create_fee_entry(
    student_id: int,
    payload: FeeEntryCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    try:
        return log_fee_entry(
            db,
            student_id,
            description=payload.description,
            total_amount=payload.total_amount,
            amount_paid=payload.amount_paid,
            payment_date=payload.payment_date,
            payment_method=payload.payment_method,
            notes=payload.notes,
            admin=admin,
        )
    except TwoemError as e:
        raise to_http_exception(e)


@router.get("/{student_id}/fees", response_model=FeeLedgerResponse)
def get_fee_ledger(
    student_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(get_current_admin),
):
    if not db.get(Student, student_id):
        raise to_http_exception(ResourceNotFound(f"Student {student_id} not found"))

    totals = get_fee_totals(db, student_id)
    return FeeLedgerResponse(
        student_id=student_id,
        fees=[FeeEntryResponse.model_validate(f) for f in list_fees(db, student_id)],
        total_charged=totals.total_charged,
        total_paid=totals.total_paid,
        balance=totals.balance,
    )
