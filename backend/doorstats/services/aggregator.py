from typing import List, Optional

from doorstats.models import GameStat, StatsSnapshot


class StatsAggregator:
    """Accumulates launch events into a private ``StatsSnapshot``.

    Every counted event bumps the game in all three views at once, so the
    month, year and year/month breakdowns always agree with each other.
    """

    def __init__(self, sysop_category: Optional[str] = None):
        self.sysop_category = sysop_category
        self.snapshot = StatsSnapshot()
        self.events_counted = 0

    def record_launch(
        self,
        year: str,
        month: str,
        game_name: str,
        door_code: Optional[str] = None,
        category: Optional[str] = None
    ) -> bool:
        """Count one launch. Returns False when the event was excluded."""
        if self.sysop_category is not None and category == self.sysop_category:
            return False

        snapshot = self.snapshot
        _increment(snapshot.month.setdefault(month, []), game_name, door_code, category)
        _increment(snapshot.year.setdefault(year, []), game_name, door_code, category)
        months = snapshot.all.setdefault(year, {})
        _increment(months.setdefault(month, []), game_name, door_code, category)

        self.events_counted += 1
        return True


def _increment(
    stats: List[GameStat],
    game_name: str,
    door_code: Optional[str],
    category: Optional[str]
) -> None:
    # Scopes hold one entry per distinct game, so a linear scan stays small
    for stat in stats:
        if stat.game_name == game_name:
            stat.launch_count += 1
            return

    stats.append(GameStat(
        game_name=game_name,
        door_code=door_code,
        category=category,
        launch_count=1
    ))
