import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homebase.config import settings
from homebase.core.exception import UpstreamException
from homebase.core.middleware import (
    ExceptionHandlingMiddleware,
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
    register_exception_handlers,
)
from homebase.core.observability import configure_logging
from homebase.database import database, get_db
from homebase.schemas.result import Result

# Import routes
from homebase.api import (
    chores,
    conflicts,
    entitlements,
    events,
    finance,
    households,
    leaderboard,
    meal_planner,
    onboarding,
    recipes,
    rewards,
    security,
    shopping_lists,
    users,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    database.init()
    if settings.DATABASE_CREATE_TABLES:
        database.create_all()
    logger.info("Application started", extra={"version": settings.VERSION})
    yield
    database.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    description="Homebase API - household-scoped meal planning, shopping, calendar and bills",
    lifespan=lifespan,
)

register_exception_handlers(app)

# Outermost last: exceptions are rendered inside the request context
app.add_middleware(ExceptionHandlingMiddleware, log_internal_errors=True)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestContextMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
)

# Include routers
app.include_router(security.router, prefix=settings.API_PREFIX, tags=["security"])
app.include_router(users.router, prefix=f"{settings.API_PREFIX}/users", tags=["users"])
app.include_router(onboarding.router, prefix=f"{settings.API_PREFIX}/onboarding", tags=["onboarding"])
app.include_router(households.router, prefix=f"{settings.API_PREFIX}/households", tags=["households"])
app.include_router(entitlements.router, prefix=settings.API_PREFIX, tags=["entitlements"])
app.include_router(recipes.router, prefix=f"{settings.API_PREFIX}/recipes", tags=["recipes"])
app.include_router(
    meal_planner.router,
    prefix=f"{settings.API_PREFIX}/meal-planner",
    tags=["meal-planner"]
)
app.include_router(
    shopping_lists.router,
    prefix=f"{settings.API_PREFIX}/shopping-lists",
    tags=["shopping-lists"]
)
app.include_router(events.router, prefix=f"{settings.API_PREFIX}/events", tags=["calendar"])
app.include_router(conflicts.router, prefix=f"{settings.API_PREFIX}/conflicts", tags=["calendar"])
app.include_router(finance.router, prefix=f"{settings.API_PREFIX}/finance", tags=["finance"])
app.include_router(chores.router, prefix=f"{settings.API_PREFIX}/chores", tags=["chores"])
app.include_router(rewards.router, prefix=f"{settings.API_PREFIX}/rewards", tags=["rewards"])
app.include_router(leaderboard.router, prefix=f"{settings.API_PREFIX}/leaderboard", tags=["leaderboard"])


@app.get("/", response_model=Result[dict])
async def root():
    """Root endpoint with API information"""
    return Result.successful(
        data={
            "message": f"Welcome to {settings.PROJECT_NAME} API",
            "version": settings.VERSION,
            "docs": "/docs",
            "status": "online",
        }
    )


@app.get("/health", response_model=Result[dict])
async def health_check(db: Session = Depends(get_db)):
    """Health check endpoint for load balancers and monitoring"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as ex:
        logger.error("Health check failed", exc_info=ex)
        raise UpstreamException("Database unavailable")
    return Result.successful(data={"status": "healthy", "database": "connected"})
