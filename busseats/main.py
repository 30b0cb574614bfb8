import importlib
import logging
import uuid
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sentry_sdk.integrations.asgi import SentryAsgiMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from busseats.config import settings
from busseats.db.session import create_tables, engine
from busseats.logging_setup import setup_logging, TRACE_ID_CTX

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
        logger.info("Database tables created")
    yield
    await engine.dispose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# initialize logging and Sentry
setup_logging(settings.LOG_LEVEL)
if settings.SENTRY_DSN:
    sentry_sdk.init(dsn=settings.SENTRY_DSN)
    app.add_middleware(SentryAsgiMiddleware)


@app.middleware("http")
async def add_trace_id(request: Request, call_next):
    trace_id = request.headers.get("x-trace-id") or str(uuid.uuid4())
    TRACE_ID_CTX.set(trace_id)
    response = await call_next(request)
    response.headers["X-Trace-Id"] = trace_id
    return response

# List of module names to include as routers
MODULES = [
    "buses",
    "seatmaps",
]


for mod in MODULES:
    pkg = importlib.import_module(f"busseats.modules.{mod}.router")
    app.include_router(pkg.router, prefix=f"/{mod}")


@app.get("/")
async def root():
    return {"app": settings.APP_NAME, "status": "ok"}


@app.get("/metrics")
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready")
async def ready():
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Readiness check failed")
        return Response(status_code=503, content="database unavailable")
    return {"status": "ready"}
