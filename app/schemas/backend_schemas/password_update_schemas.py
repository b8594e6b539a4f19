from pydantic import BaseModel, Field


class PasswordUpdateIn(BaseModel):
    current_password: str = Field(..., min_length=3, max_length=128)
    new_password: str = Field(..., min_length=8, max_length=128)
    confirm_new_password: str = Field(..., min_length=8, max_length=128)
