from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.v1.api import api_router
from app.db import base  # noqa: F401  (registers every model on Base.metadata)
from app.db.database import Base, SessionLocal, engine
from app.db.seed import seed_defaults
from app.utils.logger import logger


def init_db() -> None:
    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_defaults(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Twoem Online backend started")
    yield


app = FastAPI(title="Twoem Online Productions", lifespan=lifespan)
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"message": "Welcome to Twoem Online Productions!"}
