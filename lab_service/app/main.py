# app/main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, lab_engine
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware
from .models import labs
from .models.lab_assets import assets, issues, maintenance_logs
from .router import labs_router
from .router.lab_assets import assets_router, issues_router, maintenance_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables
    Base.metadata.create_all(bind=lab_engine)
    logger.info("Lab service tables ready")
    yield


app = FastAPI(title="Lab Asset Service API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(JsonResponseMiddleware)

setup_exception_handlers(app)

# Include routers
app.include_router(assets_router.router)
app.include_router(issues_router.router)
app.include_router(maintenance_router.router)
app.include_router(labs_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy"}
