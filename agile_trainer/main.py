"""Agile Scenario Trainer - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from agile_trainer.core.config import get_settings
from agile_trainer.core.errors import TrainerError
from agile_trainer.core.log import configure_logging
from agile_trainer.db.base import Base
from agile_trainer.db.session import AsyncSessionLocal, engine
from agile_trainer.routers import api
from agile_trainer.services.seeding import seed_database

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_on_startup:
        async with AsyncSessionLocal() as db:
            await seed_database(db)

    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Branching Agile decision scenarios with scoring and AI coaching",
    lifespan=lifespan,
)

app.include_router(api.router)


@app.exception_handler(TrainerError)
async def trainer_error_handler(request: Request, exc: TrainerError):
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"detail": "; ".join(problems) or "Invalid request"})


@app.get("/health")
async def health():
    return {"status": "ok"}
