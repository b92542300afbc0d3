from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Iterable

from .config import BLOWOUT_MARGIN, CLUTCH_MARGIN
from .models import Game

logger = logging.getLogger(__name__)

GAME_SORT_ORDERS = ("newest", "oldest", "upcoming")


@dataclass(slots=True, frozen=True)
class GameTags:
    is_blowout: bool = False
    is_clutch: bool = False
    is_shutout: bool = False


@dataclass(slots=True)
class SeasonSummary:
    total_games: int = 0
    completed_games: int = 0
    total_points: int = 0
    average_score: float = 0.0
    highest_score: int = 0
    shutouts: int = 0
    blowouts: int = 0
    clutch_games: int = 0


def as_games(games: Any) -> list[Game]:
    if not isinstance(games, (list, tuple)):
        return []
    return [g for g in games if isinstance(g, Game)]


def date_key(value: date | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return None


def _score(value: Any) -> int:
    # Missing or non-numeric scores count as 0.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def margin(game: Game) -> int:
    return abs(_score(game.home_score) - _score(game.away_score))


def winner_id(game: Game) -> str | None:
    if not game.is_completed:
        return None
    home, away = _score(game.home_score), _score(game.away_score)
    if home > away:
        derived: str | None = game.home_team_id
    elif away > home:
        derived = game.away_team_id
    else:
        derived = None
    if game.winning_team_id and game.winning_team_id != derived:
        logger.debug(
            "Ignoring stored winner %s for game %s; scores %s-%s give %s.",
            game.winning_team_id,
            game.game_id,
            home,
            away,
            derived,
        )
    return derived


def game_tags(game: Game) -> GameTags:
    if not game.is_completed:
        return GameTags()
    diff = margin(game)
    return GameTags(
        is_blowout=diff >= BLOWOUT_MARGIN,
        is_clutch=diff <= CLUTCH_MARGIN,
        is_shutout=_score(game.home_score) == 0 or _score(game.away_score) == 0,
    )


def involves_team(game: Game, team_id: str) -> bool:
    return game.home_team_id == team_id or game.away_team_id == team_id


def did_team_win(game: Game, team_id: str) -> bool:
    return winner_id(game) == team_id


def team_score(game: Game, team_id: str) -> int:
    if game.home_team_id == team_id:
        return _score(game.home_score)
    if game.away_team_id == team_id:
        return _score(game.away_score)
    return 0


def opponent_score(game: Game, team_id: str) -> int:
    if game.home_team_id == team_id:
        return _score(game.away_score)
    if game.away_team_id == team_id:
        return _score(game.home_score)
    return 0


def opponent_id(game: Game, team_id: str) -> str | None:
    if game.home_team_id == team_id:
        return game.away_team_id
    if game.away_team_id == team_id:
        return game.home_team_id
    return None


def season_games(games: Any, season_id: str) -> list[Game]:
    return [g for g in as_games(games) if g.season_id == season_id and g.is_completed]


def chronological(games: Iterable[Game]) -> list[Game]:
    # Undated games are dropped, never treated as recent.
    dated = [g for g in games if date_key(g.game_date) is not None]
    return sorted(dated, key=lambda g: (date_key(g.game_date), g.game_id))


def filter_games(
    games: Any,
    statuses: Iterable[str] | None = None,
    team_id: str | None = None,
    season_id: str | None = None,
    start: date | datetime | None = None,
    end: date | datetime | None = None,
) -> list[Game]:
    status_set = set(statuses) if statuses is not None else None
    start_key = date_key(start)
    end_key = date_key(end)
    filtered: list[Game] = []
    for game in as_games(games):
        if status_set is not None and game.status not in status_set:
            continue
        if team_id is not None and not involves_team(game, team_id):
            continue
        if season_id is not None and game.season_id != season_id:
            continue
        played = date_key(game.game_date)
        if played is not None:
            if start_key is not None and played < start_key:
                continue
            if end_key is not None and played > end_key:
                continue
        filtered.append(game)
    return filtered


def sort_games(games: Any, order: str = "newest") -> list[Game]:
    if order not in GAME_SORT_ORDERS:
        raise ValueError(f"Invalid game sort order '{order}'")
    pool = as_games(games)
    dated = [g for g in pool if date_key(g.game_date) is not None]
    undated = [g for g in pool if date_key(g.game_date) is None]

    if order == "newest":
        dated.sort(key=lambda g: (date_key(g.game_date), g.game_id), reverse=True)
        return dated + undated
    if order == "oldest":
        dated.sort(key=lambda g: (date_key(g.game_date), g.game_id))
        return dated + undated

    # Upcoming: scheduled games first, each group soonest first.
    dated.sort(key=lambda g: (g.status != "scheduled", date_key(g.game_date), g.game_id))
    undated.sort(key=lambda g: g.status != "scheduled")
    return dated + undated


def summarize_season(games: Any, season_id: str | None = None) -> SeasonSummary:
    pool = as_games(games)
    if season_id is not None:
        pool = [g for g in pool if g.season_id == season_id]
    summary = SeasonSummary(total_games=len(pool))
    for game in pool:
        if not game.is_completed:
            continue
        summary.completed_games += 1
        home, away = _score(game.home_score), _score(game.away_score)
        summary.total_points += home + away
        summary.highest_score = max(summary.highest_score, home, away)
        tags = game_tags(game)
        if tags.is_shutout:
            summary.shutouts += 1
        if tags.is_blowout:
            summary.blowouts += 1
        if tags.is_clutch:
            summary.clutch_games += 1
    if summary.completed_games:
        summary.average_score = round(summary.total_points / (summary.completed_games * 2), 2)
    return summary
