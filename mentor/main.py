from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from mentor.api.plan import router as plan_router
from mentor.api.preonboarding import router as preonboarding_router
from mentor.config.settings import settings
from mentor.core.logger import setup_logger
from mentor.db.models import Base
from mentor.db.session import get_engine

setup_logger(level=settings.log_level, log_file=settings.log_file, module_levels=settings.log_module_levels)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Ensure database tables exist before serving requests."""
    logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables verified")
    yield


app = FastAPI(title="Mentor API", lifespan=lifespan)

app.include_router(preonboarding_router)
app.include_router(plan_router)


@app.get("/health")
def health():
    return {"status": "ok"}
