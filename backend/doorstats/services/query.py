from datetime import datetime
from typing import Dict, List, Optional

from doorstats.models import GameStat, StatsSnapshot
from doorstats.schemas import PeriodScope
from doorstats.services.log_scanner import MONTH_NAMES

TOP_N = 10


class InvalidPeriodError(ValueError):
    pass


def is_month(period: str) -> bool:
    return period in MONTH_NAMES


def is_year(period: str) -> bool:
    try:
        datetime.strptime(period, "%Y")
    except ValueError:
        return False
    return True


def resolve_scope(period: str) -> PeriodScope:
    """Map a period such as ``March``, ``2024`` or ``all`` to its scope."""
    period = period.lower()
    if period == "month" or is_month(period):
        return PeriodScope.MONTH
    if period == "year" or is_year(period):
        return PeriodScope.YEAR
    if period == "all":
        return PeriodScope.ALL
    raise InvalidPeriodError(f"Invalid period: {period}")


def get_scope_stats(snapshot: StatsSnapshot, scope: PeriodScope) -> Dict:
    """Return the whole view for a scope, e.g. every month for ``march``."""
    if scope is PeriodScope.MONTH:
        return {"month": snapshot.month_dict()}
    if scope is PeriodScope.YEAR:
        return {"year": snapshot.year_dict()}
    return {"all": snapshot.all_dict()}


def _flatten(snapshot: StatsSnapshot, scope: PeriodScope) -> List[GameStat]:
    if scope is PeriodScope.MONTH:
        groups = list(snapshot.month.values())
    elif scope is PeriodScope.YEAR:
        groups = list(snapshot.year.values())
    else:
        groups = [stats for months in snapshot.all.values() for stats in months.values()]
    return [stat for stats in groups for stat in stats]


def get_top_games(
    snapshot: StatsSnapshot,
    period: str,
    excluded_game: Optional[str] = None,
    limit: int = TOP_N
) -> Dict:
    """Rank the entries of a period's scope by launch count.

    Entries are ranked per scope key, so a game played in several months
    can appear once for each of them. Ties keep insertion order.
    """
    period = period.lower()
    scope = resolve_scope(period)

    games = [
        stat for stat in _flatten(snapshot, scope)
        if stat.game_name != excluded_game
    ]
    games.sort(key=lambda stat: stat.launch_count, reverse=True)

    return {
        "period": period,
        "games": [stat.to_dict() for stat in games[:limit]]
    }
