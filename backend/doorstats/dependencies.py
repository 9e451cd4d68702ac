from fastapi import Request

from doorstats.config import Settings
from doorstats.services.refresh import SnapshotStore


def get_store(request: Request) -> SnapshotStore:
    """Published stats for the running application."""
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
