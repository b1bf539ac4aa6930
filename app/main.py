import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.v1.router import api_router
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.seed import seed_demo_catalog

# Register every model on Base.metadata so string relationships resolve.
from app.models import appointment, branch, lead, service, user  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting ClinicBook API (%s)", settings.APP_ENV)
    if settings.SEED_DEMO_DATA:
        await seed_demo_catalog()
    yield


app = FastAPI(
    title="ClinicBook API",
    description="Multi-branch clinic appointment booking: slots, bookings, leads and admin dashboard",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "service": "clinicbook-api", "version": "0.1.0"}
