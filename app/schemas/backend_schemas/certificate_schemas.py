from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class CertificateStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    enrollment_id: int
    course_name: str
    final_grade: Optional[str] = None
    fee_balance: float
    eligible: bool
    issued_at: Optional[datetime] = None


class CertificateListResponse(BaseModel):
    certificates: List[CertificateStatusResponse] = []
