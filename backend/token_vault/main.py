import logging
import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request

from token_vault.api.v1.router import api_router
from token_vault.core.config import settings
from token_vault.core.database import Base, engine
from token_vault.core.log_config import configure_logging
import token_vault.models  # noqa: F401

logger = logging.getLogger("token_vault.access")

_SKIP_PATHS = frozenset(["/health"])


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("%s started", settings.app_name)
    yield
    engine.dispose()


app = FastAPI(title=settings.app_name, lifespan=lifespan)


@app.middleware("http")
async def add_trace_id(request: Request, call_next):
    request.state.trace_id = request.headers.get("X-Trace-Id") or str(uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Trace-Id"] = request.state.trace_id
    if request.url.path not in _SKIP_PATHS:
        logger.info(
            "%s %s status=%s duration_ms=%.2f trace_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.trace_id,
        )
    return response


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(api_router)
