from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator


class FeeEntryCreate(BaseModel):
    description: str = Field(..., min_length=1)
    total_amount: float = Field(0, ge=0)
    amount_paid: float = Field(0, ge=0)
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str):
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Description is required.")
        return cleaned

    @model_validator(mode="after")
    def validate_not_empty(self):
        if self.total_amount == 0 and self.amount_paid == 0:
            raise ValueError("Either Charge Amount or Payment Amount must be greater than 0.")
        return self


class FeeEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    description: str
    total_amount: float
    amount_paid: float
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    logged_by_admin_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def balance(self) -> float:
        return (self.total_amount or 0) - (self.amount_paid or 0)


class FeeLedgerResponse(BaseModel):
    student_id: int
    fees: List[FeeEntryResponse] = []
    total_charged: float
    total_paid: float
    balance: float
