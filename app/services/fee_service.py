import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidFeeEntry, ResourceNotFound
from app.models.fee_models import Fee
from app.models.student_models import Student

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeTotals:
    total_charged: float
    total_paid: float

    @property
    def balance(self) -> float:
        return self.total_charged - self.total_paid


def totals_from_rows(rows: Iterable) -> FeeTotals:
    charged = 0.0
    paid = 0.0
    for row in rows:
        charged += getattr(row, "total_amount", None) or 0
        paid += getattr(row, "amount_paid", None) or 0
    return FeeTotals(total_charged=charged, total_paid=paid)


def balance_from_rows(rows: Iterable) -> float:
    """Outstanding balance: > 0 is debt, <= 0 is paid up or in credit."""
    return totals_from_rows(rows).balance


def get_fee_totals(db: Session, student_id: int) -> FeeTotals:
    rows = (
        db.query(Fee.total_amount, Fee.amount_paid)
        .filter(Fee.student_id == student_id)
        .all()
    )
    return totals_from_rows(rows)


def get_fee_balance(db: Session, student_id: int) -> float:
    # always recomputed from the ledger, never cached
    return get_fee_totals(db, student_id).balance


def list_fees(db: Session, student_id: int) -> List[Fee]:
    return (
        db.query(Fee)
        .filter(Fee.student_id == student_id)
        .order_by(desc(Fee.payment_date), desc(Fee.created_at), desc(Fee.id))
        .all()
    )


def log_fee_entry(
    db: Session,
    student_id: int,
    *,
    description: str,
    total_amount: float = 0,
    amount_paid: float = 0,
    payment_date: Optional[datetime] = None,
    payment_method: Optional[str] = None,
    notes: Optional[str] = None,
    admin=None,
) -> Fee:
    """Append one charge/payment line to a student's ledger."""
    student = db.get(Student, student_id)
    if not student:
        raise ResourceNotFound(f"Student {student_id} not found")

    description = (description or "").strip()
    if not description:
        raise InvalidFeeEntry("Description is required.")

    charge = float(total_amount or 0)
    paid = float(amount_paid or 0)
    if charge < 0 or paid < 0:
        raise InvalidFeeEntry("Charge and payment amounts must be 0 or more.")
    if charge == 0 and paid == 0:
        raise InvalidFeeEntry("Either Charge Amount or Payment Amount must be greater than 0.")

    fee = Fee(
        student_id=student_id,
        description=description,
        total_amount=charge,
        amount_paid=paid,
        payment_date=payment_date,
        payment_method=(payment_method or "").strip() or None,
        notes=(notes or "").strip() or None,
        logged_by_admin_id=getattr(admin, "id", None),
        logged_by_admin_name=getattr(admin, "name", None),
    )

    try:
        db.add(fee)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(fee)
    logger.info(
        "Admin %s logged fee entry for student %s: %s charge=%s paid=%s",
        getattr(admin, "name", None),
        student_id,
        description,
        charge,
        paid,
    )
    return fee
