from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum


# Enums
class PeriodScope(str, Enum):
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


# Game Stats Schemas
class GameStatsResponse(BaseModel):
    game_name: str
    launch_count: int
    door_code: Optional[str] = None
    category: Optional[str] = None

    class Config:
        from_attributes = True


class Top10Response(BaseModel):
    period: str
    games: List[GameStatsResponse] = []


# Library Schemas
class LibraryGameResponse(BaseModel):
    game_name: str
    category: str
    door_code: str

    class Config:
        from_attributes = True


# Service Schemas
class HealthResponse(BaseModel):
    status: str
    refreshed_at: Optional[datetime] = None
    files_scanned: int = 0
    events_counted: int = 0
