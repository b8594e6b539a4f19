from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class AdminAccount(BaseModel):
    id: str
    email: str
    name: str
    password_hash: str


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./twoem_online.db"

    # grading
    PASSING_GRADE: int = 60

    # registration numbers
    REG_NUMBER_PREFIX: str = "TWOEM"
    REG_ALLOCATION_MAX_ATTEMPTS: int = 3
    DEFAULT_STUDENT_PASSWORD: Optional[str] = None

    # auth
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # up to three admins, same layout as the old .env files
    ADMIN1_EMAIL: Optional[str] = None
    ADMIN1_PASSWORD_HASH: Optional[str] = None
    ADMIN1_NAME: Optional[str] = None
    ADMIN2_EMAIL: Optional[str] = None
    ADMIN2_PASSWORD_HASH: Optional[str] = None
    ADMIN2_NAME: Optional[str] = None
    ADMIN3_EMAIL: Optional[str] = None
    ADMIN3_PASSWORD_HASH: Optional[str] = None
    ADMIN3_NAME: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    @property
    def admin_accounts(self) -> List[AdminAccount]:
        accounts = []
        for i in range(1, 4):
            email = getattr(self, f"ADMIN{i}_EMAIL")
            password_hash = getattr(self, f"ADMIN{i}_PASSWORD_HASH")
            if not email or not password_hash:
                continue
            accounts.append(
                AdminAccount(
                    id=f"admin{i}",
                    email=email.strip().lower(),
                    name=getattr(self, f"ADMIN{i}_NAME") or f"Admin {i}",
                    password_hash=password_hash,
                )
            )
        return accounts


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
