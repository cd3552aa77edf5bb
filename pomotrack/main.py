import logging
from contextlib import asynccontextmanager

import redis.asyncio as redis
import sentry_sdk
from fastapi import FastAPI
from sqlalchemy import text

from pomotrack.config import settings
from pomotrack.database import engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize Sentry
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=0.2 if settings.ENVIRONMENT == "production" else 1.0,
        send_default_pii=False,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: verify DB connection and connect Redis
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))

    app.state.redis = redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    await app.state.redis.ping()

    yield

    # Shutdown
    await app.state.redis.close()
    await engine.dispose()


app = FastAPI(
    title="Pomotrack API",
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from pomotrack.middleware.rate_limit import RateLimitMiddleware  # noqa: E402

app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from pomotrack.middleware.error_handler import register_error_handlers  # noqa: E402

register_error_handlers(app)

# Routers
from pomotrack.routers.auth import router as auth_router  # noqa: E402
from pomotrack.routers.reports import router as reports_router  # noqa: E402
from pomotrack.routers.sessions import router as sessions_router  # noqa: E402
from pomotrack.routers.settings import router as settings_router  # noqa: E402
from pomotrack.routers.tasks import router as tasks_router  # noqa: E402

app.include_router(auth_router)
app.include_router(settings_router)
app.include_router(tasks_router)
app.include_router(sessions_router)
app.include_router(reports_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
