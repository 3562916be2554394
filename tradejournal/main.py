"""TradeJournal: FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from tradejournal.api import dashboard, trades
from tradejournal.config import settings
from tradejournal.database import engine, init_models

logger = logging.getLogger(__name__)

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: verify DB connection and create tables. Shutdown: dispose engine."""
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        await init_models()
        logger.info("Database connected successfully")
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        raise
    yield
    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title="TradeJournal",
    description="Personal trading journal with P/L analytics and AI coaching",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: restrict in production, allow localhost in development
_allowed_origins = (
    ["http://localhost:8000", "http://localhost:3000", "http://localhost:5173"]
    if settings.app_env == "development"
    else settings.allowed_hosts.split(",")
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.include_router(dashboard.router)
app.include_router(trades.router)


@app.get("/api")
async def api_root():
    return {
        "name": "TradeJournal",
        "version": "0.1.0",
        "status": "running",
        "ai_coaching": bool(settings.anthropic_api_key),
    }
