"""
FastAPI app entry point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .auth_utils import get_password_hash
from .config import settings
from .db import Base, SessionLocal, engine
from .exceptions import register_exception_handlers
from .models.user import User, UserRole
from .routes import auth, parking, payments, reservations
from .scripts.seed_data import seed_sample_parkings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def ensure_officer_exists():
    """
    Ensure the bootstrap officer exists, create if missing.
    Only runs when DEFAULT_OFFICER_PASSWORD is configured.
    """
    if not settings.DEFAULT_OFFICER_PASSWORD:
        logger.info("DEFAULT_OFFICER_PASSWORD not set, skipping officer bootstrap")
        return

    db = SessionLocal()
    try:
        officer = db.query(User).filter(
            User.username == settings.DEFAULT_OFFICER_USERNAME
        ).first()

        if officer:
            logger.info(f"Officer already exists: {officer.username}")
            return

        officer = User(
            username=settings.DEFAULT_OFFICER_USERNAME,
            password_hash=get_password_hash(settings.DEFAULT_OFFICER_PASSWORD),
            role=UserRole.OFFICER,
        )
        db.add(officer)
        db.commit()
        logger.info(f"Officer created: {officer.username}")
    except Exception:
        logger.exception("Error ensuring officer")
        db.rollback()
        raise
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting {settings.APP_NAME} in {settings.ENVIRONMENT} mode")
    for warning in settings.validate_settings():
        logger.warning(warning)

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    ensure_officer_exists()

    if settings.SEED_SAMPLE_DATA:
        db = SessionLocal()
        try:
            seed_sample_parkings(db)
        finally:
            db.close()

    logger.info("Application ready")

    yield

    # Shutdown
    logger.info("Shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/")
async def root():
    return {
        "status": "ok",
        "message": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
    }


# Register routers
app.include_router(auth.router)
app.include_router(parking.router)
app.include_router(reservations.router)
app.include_router(payments.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("parking_server.main:app", host=settings.HOST, port=settings.PORT, reload=False)
