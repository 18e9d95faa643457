from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from expense_tracker import __version__
from expense_tracker.api_docs import router as api_docs_router
from expense_tracker.config import settings
from expense_tracker.database import SessionLocal, init_db
from expense_tracker.errors import register_exception_handlers
from expense_tracker.expenses import service as expense_service
from expense_tracker.expenses.router import router as expenses_router
from expense_tracker.housekeeping import build_scheduler
from expense_tracker.logging_config import configure_logging
from expense_tracker.users import service as user_service
from expense_tracker.users.routers import router as user_router

SERVICE_NAME = "ExpenseTracker"


def run_startup_tasks():
    with SessionLocal() as db:
        try:
            if settings.SEED_DEFAULT_USERS:
                user_service.seed_default_users(db)
            expense_service.assign_orphaned_expenses(db)
        except SQLAlchemyError as exc:
            db.rollback()
            # Startup continues; the API is still usable without these
            logger.opt(exception=exc).error("Startup data tasks failed")


# Database startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    logger.info("Application startup")
    init_db()
    run_startup_tasks()

    scheduler = None
    if settings.HOUSEKEEPING_ENABLED:
        scheduler = build_scheduler(settings)
        scheduler.start()
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)
    logger.info("Application shutdown")


# Create app
app = FastAPI(
    title="Expense Tracker API",
    description="An API for recording and reviewing personal expenses.",
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(expenses_router, tags=["Expenses"])
app.include_router(user_router, tags=["Users"])
app.include_router(api_docs_router, tags=["Docs"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.get("/", tags=["System"])
def index():
    return {
        "status": "UP",
        "service": f"{SERVICE_NAME} API",
        "message": "Welcome to Expense Tracker",
        "timestamp": _timestamp(),
    }


@app.get("/health", tags=["System"])
def health_check():
    return {"status": "UP", "service": SERVICE_NAME, "timestamp": _timestamp()}


def run():
    uvicorn.run(app, host=settings.SERVER_HOST, port=settings.SERVER_PORT)


if __name__ == "__main__":
    run()
