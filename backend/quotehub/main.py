"""
QuoteHub API
FastAPI backend for project quotes: cost and fee totals, resourcing worksheets
and team utilization coverage.
"""
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# .env must be loaded before quotehub.config reads the environment
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quotehub import config
from quotehub.services.logging_config import setup_logging
from quotehub.services.middleware import RequestTimingMiddleware

setup_logging(level=config.LOG_LEVEL, json_output=config.LOG_JSON)
logger = logging.getLogger("quotehub-api")

if not config.DATABASE_URL:
    logger.warning("MISSING env var: DATABASE_URL — running in dev mode with in-memory store")


@asynccontextmanager
async def lifespan(app: FastAPI):
    from quotehub.db import engine, init_db
    await init_db()
    yield
    await engine.dispose()


app = FastAPI(
    title="QuoteHub API",
    version=config.APP_VERSION,
    description="Quote costing, resourcing worksheets and utilization coverage",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Requested-With"],
)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)

# Routers
from quotehub.api.quote_routes import router as quote_router
from quotehub.api.resourcing_routes import router as resourcing_router

app.include_router(quote_router)
app.include_router(resourcing_router)


@app.get("/health")
async def health_check():
    return {
        "status": "active",
        "version": config.APP_VERSION,
        "storage": "sql" if config.DATABASE_URL else "memory",
    }
