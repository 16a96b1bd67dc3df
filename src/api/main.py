"""FastAPI application entry point."""

import os
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Must run before importing modules that read env vars at import time
load_dotenv()

from api.routes import auth, health
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.indexes import ensure_all_indexes

setup_structured_logging()

logger = logging.getLogger(__name__)

# main.py is at <root>/src/api/main.py
_project_root = Path(__file__).parent.parent.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Identity Callback API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: make sure the unique provider uid index exists."""
    client = get_mongodb_client()
    if client:
        if ensure_all_indexes(client[DATABASE_NAME]):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="Signs users in from identity provider callbacks",
    version=VERSION,
    lifespan=lifespan,
)

# Browsers reject credentials with a wildcard origin
cors_origins_env = os.getenv("CORS_ORIGINS", "*")
if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }
