from fastapi import APIRouter, HTTPException, status

from app.core.config import settings
from app.schemas.backend_schemas.student_schemas import AdminLoginSchema, TokenResponse
from app.services.dependencies import create_access_token
from app.utils.hashing import verify_password
from app.utils.logger import logger


router = APIRouter(prefix="/admin", tags=["Admin Auth"])


@router.post("/login", response_model=TokenResponse)
def login_admin(payload: AdminLoginSchema):
    email = str(payload.email).strip().lower()

    for account in settings.admin_accounts:
        if account.email != email:
            continue
        if verify_password(payload.password, account.password_hash):
            token = create_access_token({
                "role": "admin",
                "admin_id": account.id,
                "admin_name": account.name,
                "email": account.email,
            })
            logger.info("Admin %s logged in", account.id)
            return TokenResponse(access_token=token)

    logger.warning("Failed admin login for %s", email)
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials.")
