"""meridian: FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from config import API_HOST, API_PORT, PIPELINE_INTERVAL_MINUTES, SCHEDULER_ENABLED
from db.database import init_db
from db.repository import Repository
from db.seed import sync_source_registry
from pipeline.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize DB and sources, run the pipeline on a timer while serving."""
    init_db()
    sync_source_registry(Repository())
    if SCHEDULER_ENABLED:
        start_scheduler(PIPELINE_INTERVAL_MINUTES)
    yield
    stop_scheduler()


app = FastAPI(
    title="meridian",
    description="Cross-source news synthesis: RSS ingestion, event clustering, neutral stories",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    uvicorn.run("main:app", host=API_HOST, port=API_PORT, reload=False)
