import logging
import os
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from shoplists.core.logging import setup_logging
from shoplists.modules.auth.router import router as auth_router
from shoplists.modules.catalog.router import router as catalog_router
from shoplists.modules.core.router import router as core_router
from shoplists.modules.shopping.router import router as shopping_router

setup_logging()

app = FastAPI(title="Shopping Lists API")
logger = logging.getLogger("app.request")
startup_logger = logging.getLogger("app.startup")


def _env_truthy(name: str) -> bool:
    value = os.getenv(name, "").strip().lower()
    return value in {"1", "true", "yes", "on"}


allowed_origins = os.getenv("ALLOWED_ORIGINS", "")
origin_list = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
if origin_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def request_logger(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = int((time.perf_counter() - start) * 1000)

    parts = [f"{request.method} {request.url.path}"]
    if request.url.query:
        parts.append(f"query={request.url.query}")

    status = response.status_code
    if status >= 400:
        if status == 404:
            parts.append("ERROR: not found")
        elif status >= 500:
            parts.append("ERROR: server error")
        else:
            parts.append("ERROR: client error")

    parts.append(f"status={status}")
    parts.append(f"{duration_ms}ms")

    log_msg = " | ".join(parts)
    if status >= 500:
        logger.error(log_msg)
    elif status >= 400:
        logger.warning(log_msg)
    else:
        logger.info(log_msg)

    response.headers["X-Request-Id"] = request_id
    return response


if _env_truthy("RUN_MIGRATIONS_ON_STARTUP"):
    from shoplists.core.migrations import RunMigrations

    RunMigrations()

if _env_truthy("RUN_STARTUP_TASKS"):
    from shoplists.core.bootstrap import RunStartupTasks
    from shoplists.db import GetDb

    _db_gen = GetDb()
    try:
        RunStartupTasks(next(_db_gen))
    finally:
        _db_gen.close()

startup_logger.info("startup complete")

app.include_router(core_router)
app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(shopping_router)
