from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Any, Iterable, Mapping

from .config import LEADERS_LIMIT, MIN_GAMES_FOR_ACCURACY, MIN_GAMES_FOR_AVERAGE
from .games import as_games, date_key, team_score, winner_id
from .models import Game, PlayerSeasonStats, SeasonRecord

logger = logging.getLogger(__name__)

CATEGORY_KEYS: dict[str, str] = {
    "wins": "wins",
    "games": "games_played",
    "win_pct": "win_pct",
    "points_for": "points_for",
    "average": "points_per_game",
    "differential": "point_differential",
    "shutouts": "shutout_wins",
    "blowouts": "blowout_wins",
    "clutch": "clutch_wins",
    "streak": "longest_win_streak",
    "current_streak": "current_streak",
    "heat": "heat",
    "cups": "cups_total",
    "accuracy": "accuracy",
}

LEAGUE_LEADER_CATEGORIES = ("wins", "average", "shutouts", "blowouts", "clutch", "streak", "current_streak")


@dataclass(slots=True)
class LeaderboardEntry:
    subject_id: str
    name: str
    value: float
    rank: int
    games_played: int = 0
    wins: int = 0


@dataclass(slots=True)
class HeadToHead:
    team1_id: str
    team2_id: str
    team1_wins: int = 0
    team2_wins: int = 0
    total_games: int = 0
    average_score_difference: float = 0.0
    last_game: Game | None = None


@dataclass(slots=True)
class SeasonLeaders:
    top_scorer: LeaderboardEntry | None = None
    most_accurate: LeaderboardEntry | None = None
    top_team: LeaderboardEntry | None = None
    top_team_record: str = ""


def _records(stats: Any) -> list[SeasonRecord]:
    if isinstance(stats, Mapping):
        pool: Iterable[Any] = stats.values()
    elif isinstance(stats, (list, tuple)):
        pool = stats
    else:
        return []
    return [s for s in pool if isinstance(s, SeasonRecord)]


def _numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def build_leaderboard(
    stats: Any,
    category: str,
    min_games: int = 0,
    limit: int | None = None,
) -> list[LeaderboardEntry]:
    # Ties: point differential, then input order. None values are left out, not ranked as zero.
    key = CATEGORY_KEYS.get(category, category)
    rows: list[tuple[float, int, SeasonRecord]] = []
    for record in _records(stats):
        if record.games_played < min_games:
            continue
        value = getattr(record, key, None)
        if not _numeric(value):
            continue
        rows.append((value, record.point_differential, record))

    if not rows and _records(stats) and category not in CATEGORY_KEYS:
        logger.warning("Unknown leaderboard category '%s'.", category)

    rows.sort(key=lambda row: (-row[0], -row[1]))
    if limit is not None:
        rows = rows[: max(0, limit)]
    return [
        LeaderboardEntry(
            subject_id=record.subject_id,
            name=record.display_name,
            value=value,
            rank=idx,
            games_played=record.games_played,
            wins=record.wins,
        )
        for idx, (value, _diff, record) in enumerate(rows, start=1)
    ]


def head_to_head(team1_id: str, team2_id: str, games: Any, season_id: str | None = None) -> HeadToHead:
    h2h = HeadToHead(team1_id=team1_id, team2_id=team2_id)
    meetings = [
        g
        for g in as_games(games)
        if g.is_completed
        and (season_id is None or g.season_id == season_id)
        and {g.home_team_id, g.away_team_id} == {team1_id, team2_id}
        and team1_id != team2_id
    ]
    total_diff = 0
    for game in meetings:
        winner = winner_id(game)
        if winner == team1_id:
            h2h.team1_wins += 1
        elif winner == team2_id:
            h2h.team2_wins += 1
        total_diff += abs(team_score(game, team1_id) - team_score(game, team2_id))

    h2h.total_games = len(meetings)
    if meetings:
        h2h.average_score_difference = round(total_diff / len(meetings), 2)
    dated = [g for g in meetings if date_key(g.game_date) is not None]
    if dated:
        h2h.last_game = max(dated, key=lambda g: (date_key(g.game_date), g.game_id))
    return h2h


def head_to_head_matrix(
    team_ids: Iterable[str],
    games: Any,
    season_id: str | None = None,
) -> dict[tuple[str, str], HeadToHead]:
    ids = list(dict.fromkeys(team_ids))
    pool = as_games(games)
    return {(a, b): head_to_head(a, b, pool, season_id=season_id) for a, b in combinations(ids, 2)}


def season_leaders(
    team_stats: Any,
    player_stats: Any,
    min_accuracy_games: int = MIN_GAMES_FOR_ACCURACY,
) -> SeasonLeaders:
    leaders = SeasonLeaders()

    scorers = build_leaderboard(player_stats, "cups", limit=1)
    if scorers and scorers[0].value > 0:
        leaders.top_scorer = scorers[0]

    accurate = [
        p
        for p in _records(player_stats)
        if isinstance(p, PlayerSeasonStats) and p.stat_games >= min_accuracy_games
    ]
    most_accurate = build_leaderboard(accurate, "accuracy", limit=1)
    if most_accurate:
        leaders.most_accurate = most_accurate[0]

    top_teams = build_leaderboard(team_stats, "win_pct", min_games=1, limit=1)
    if top_teams:
        leaders.top_team = top_teams[0]
        for team in _records(team_stats):
            if team.subject_id == top_teams[0].subject_id:
                leaders.top_team_record = team.record
                break
    return leaders


def league_leaders(stats: Any, limit: int = LEADERS_LIMIT) -> dict[str, list[LeaderboardEntry]]:
    return {
        category: build_leaderboard(
            stats,
            category,
            min_games=MIN_GAMES_FOR_AVERAGE if category == "average" else 0,
            limit=limit,
        )
        for category in LEAGUE_LEADER_CATEGORIES
    }


def search_stats(stats: Any, query: str) -> list[SeasonRecord]:
    records = _records(stats)
    needle = (query or "").strip().lower()
    if not needle:
        return records
    matched: list[SeasonRecord] = []
    for record in records:
        names = [record.display_name]
        if isinstance(record, PlayerSeasonStats):
            names.extend(record.team_names)
        if any(needle in name.lower() for name in names):
            matched.append(record)
    return matched


def sort_stats(stats: Any, key: str, descending: bool = True) -> list[SeasonRecord]:
    attr = CATEGORY_KEYS.get(key, key)
    records = _records(stats)
    present = [r for r in records if getattr(r, attr, None) is not None]
    missing = [r for r in records if getattr(r, attr, None) is None]

    def _value(record: SeasonRecord) -> Any:
        value = getattr(record, attr)
        if isinstance(value, str):
            return value.lower()
        return value

    try:
        present.sort(key=_value, reverse=descending)
    except TypeError:
        logger.warning("Stat column '%s' holds mixed types; leaving order unchanged.", key)
    return present + missing
