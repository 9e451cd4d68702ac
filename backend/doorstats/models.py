"""In-memory aggregate data model.

A ``StatsSnapshot`` is built privately by one refresh and never mutated after
it has been published. Each of its three views is keyed differently but all
of them are fed from the same stream of launch events.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Optional


@dataclass
class GameStat:
    """Launch count for one game within one scope."""

    game_name: str
    door_code: Optional[str] = None
    category: Optional[str] = None
    launch_count: int = 0

    def to_dict(self) -> Dict:
        data = asdict(self)
        # Unresolved metadata is left out of payloads
        return {key: value for key, value in data.items() if value is not None}


MonthStats = Dict[str, List[GameStat]]
YearStats = Dict[str, MonthStats]


@dataclass
class StatsSnapshot:
    month: Dict[str, List[GameStat]] = field(default_factory=dict)
    year: Dict[str, List[GameStat]] = field(default_factory=dict)
    all: YearStats = field(default_factory=dict)

    def month_dict(self) -> Dict[str, List[Dict]]:
        return _scope_dict(self.month)

    def year_dict(self) -> Dict[str, List[Dict]]:
        return _scope_dict(self.year)

    def all_dict(self) -> Dict[str, Dict[str, List[Dict]]]:
        return {year: _scope_dict(months) for year, months in self.all.items()}

    def to_dict(self) -> Dict:
        return {
            "month": self.month_dict(),
            "year": self.year_dict(),
            "all": self.all_dict(),
        }


@dataclass(frozen=True)
class LibraryGame:
    game_name: str
    category: str
    door_code: str


@dataclass(frozen=True)
class RefreshInfo:
    """Bookkeeping about the refresh that produced a snapshot."""

    refreshed_at: datetime
    files_scanned: int = 0
    events_counted: int = 0


def _scope_dict(scope: Dict[str, List[GameStat]]) -> Dict[str, List[Dict]]:
    return {key: [stat.to_dict() for stat in stats] for key, stats in scope.items()}
