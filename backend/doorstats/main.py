import argparse
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from doorstats.config import Settings, get_settings
from doorstats.dependencies import get_store
from doorstats.log_config import setup_logging
from doorstats.routers import stats
from doorstats.schemas import HealthResponse
from doorstats.services.refresh import RefreshScheduler, SnapshotStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    setup_logging(settings)

    # Startup: serve nothing until the first refresh has been published
    logger.info(f"Starting {settings.app_name} (logs: {settings.log_dir}/{settings.log_glob})")
    scheduler = RefreshScheduler(app.state.store, settings)
    await scheduler.start()
    app.state.scheduler = scheduler
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await scheduler.stop()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="BBS Door Stats API",
        description="""
    Launch statistics for Synchronet BBS door games

    ## Features

    - **Stats**: Launch counts by month, by year, and by year then month
    - **Top 10**: Most launched games for a period
    - **Library**: Every game declared in xtrn.ini

    Counts are rebuilt from the syslog files once a day.
    """,
        version="1.0.0",
        lifespan=lifespan,
        redirect_slashes=False
    )
    app.state.settings = settings
    app.state.store = SnapshotStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(stats.router)

    @app.get("/")
    def root():
        return {
            "name": settings.app_name,
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    @app.get("/health", response_model=HealthResponse)
    def health_check(store: SnapshotStore = Depends(get_store)):
        info = store.read().info
        if info is None:
            return HealthResponse(status="starting")
        return HealthResponse(
            status="healthy",
            refreshed_at=info.refreshed_at,
            files_scanned=info.files_scanned,
            events_counted=info.events_counted
        )

    return app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve BBS door game launch statistics.")
    parser.add_argument("--logdir", help="Directory containing the syslog files")
    parser.add_argument("--host", help="Address to listen on")
    parser.add_argument("--port", type=int, help="Port to listen on")
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    overrides = {
        "log_dir": args.logdir,
        "host": args.host,
        "port": args.port,
    }
    settings = get_settings().model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


app = create_app()


if __name__ == "__main__":
    run()
