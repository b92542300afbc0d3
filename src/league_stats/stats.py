from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Sequence

from .config import HEAT_WINDOW, RECENT_RESULTS_WINDOW
from .games import (
    date_key,
    game_tags,
    involves_team,
    opponent_id,
    opponent_score,
    season_games,
    team_score,
    winner_id,
)
from .models import (
    Game,
    Player,
    PlayerGameStats,
    PlayerSeasonStats,
    SeasonRecord,
    Streak,
    Team,
    TeamSeasonStats,
)
from .roster import find_player, find_team, player_team_ids, teammate_ids

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GameLogEntry:
    game_id: str
    played_on: datetime | None
    team_id: str
    opponent_team_id: str
    opponent_name: str
    partner_id: str | None
    partner_name: str | None
    result: str
    score: str
    cups_hit: int = 0
    table_hits: int = 0
    throws_missed: int = 0

    @property
    def throws(self) -> int:
        return self.table_hits + self.throws_missed

    @property
    def accuracy(self) -> float | None:
        if self.throws <= 0:
            return None
        return self.table_hits / self.throws * 100


@dataclass(slots=True)
class PartnerChemistry:
    partner_id: str
    partner_name: str
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    total_cups: int = 0

    @property
    def win_pct(self) -> float:
        if self.games_played <= 0:
            return 0.0
        return self.wins / self.games_played

    @property
    def avg_cups_per_game(self) -> float:
        if self.games_played <= 0:
            return 0.0
        return self.total_cups / self.games_played


def _rows(value: Any, kind: type) -> list:
    if not isinstance(value, (list, tuple)):
        return []
    return [row for row in value if isinstance(row, kind)]


def compute_streak(results: Iterable[str]) -> Streak:
    streak = Streak()
    run_w = 0
    run_l = 0
    for result in results:
        if result == "W":
            run_w += 1
            run_l = 0
        else:
            run_l += 1
            run_w = 0
        streak.longest_win = max(streak.longest_win, run_w)
        streak.longest_loss = max(streak.longest_loss, run_l)
        streak.kind = "W" if result == "W" else "L"
    if streak.kind == "W":
        streak.length = run_w
    elif streak.kind == "L":
        streak.length = run_l
    return streak


def compute_heat(points: Sequence[int | float]) -> float:
    # points are oldest first
    window = list(points)[-HEAT_WINDOW:]
    if not window:
        return 0.0
    return sum(window) / len(window)


def _accumulate(record: SeasonRecord, credited: list[tuple[Game, str]]) -> None:
    for game, team_id in credited:
        won = winner_id(game) == team_id
        tags = game_tags(game)
        record.register_game(
            team_score(game, team_id),
            opponent_score(game, team_id),
            won,
            is_shutout=tags.is_shutout,
            is_blowout=tags.is_blowout,
            is_clutch=tags.is_clutch,
        )
        if isinstance(record, TeamSeasonStats):
            opp = opponent_id(game, team_id)
            if opp is not None:
                record.register_opponent(opp, won)

    dated = [(g, tid) for g, tid in credited if date_key(g.game_date) is not None]
    dated.sort(key=lambda pair: (date_key(pair[0].game_date), pair[0].game_id))
    results = ["W" if winner_id(g) == tid else "L" for g, tid in dated]
    record.streak = compute_streak(results)
    record.heat = compute_heat([team_score(g, tid) for g, tid in dated])
    record.recent_results = results[-RECENT_RESULTS_WINDOW:]


def _team_games(team_id: str, season_id: str, games: Any) -> list[Game]:
    team_games: list[Game] = []
    for game in season_games(games, season_id):
        if not involves_team(game, team_id):
            continue
        if game.home_team_id == game.away_team_id:
            logger.warning("Skipping game %s: team %s listed on both sides.", game.game_id, team_id)
            continue
        team_games.append(game)
    return team_games


def compute_team_stats(
    team_id: str,
    season_id: str,
    games: Any,
    team: Team | None = None,
) -> TeamSeasonStats:
    stats = TeamSeasonStats(
        season_id=season_id,
        team_id=team_id,
        team_name=team.name if team is not None else "",
    )
    _accumulate(stats, [(g, team_id) for g in _team_games(team_id, season_id, games)])
    return stats


def compute_all_team_stats(season_id: str, games: Any, teams: Any) -> dict[str, TeamSeasonStats]:
    all_stats: dict[str, TeamSeasonStats] = {}
    for team in _rows(teams, Team):
        all_stats[team.team_id] = compute_team_stats(team.team_id, season_id, games, team=team)
    logger.debug("Aggregated %d team records for season %s.", len(all_stats), season_id)
    return all_stats


def _credited_games(team_ids: list[str], season_id: str, games: Any) -> list[tuple[Game, str]]:
    # Each game once, credited to the first listed team that played in it.
    credited: list[tuple[Game, str]] = []
    for game in season_games(games, season_id):
        if game.home_team_id == game.away_team_id:
            continue
        for team_id in team_ids:
            if involves_team(game, team_id):
                credited.append((game, team_id))
                break
    return credited


def _player_rows(player_id: str, season_id: str, player_game_stats: Any) -> list[PlayerGameStats]:
    rows: list[PlayerGameStats] = []
    seen_games: set[str] = set()
    for row in _rows(player_game_stats, PlayerGameStats):
        if row.player_id != player_id or row.season_id != season_id:
            continue
        if row.game_id in seen_games:
            logger.warning("Duplicate stat row for player %s in game %s ignored.", player_id, row.game_id)
            continue
        seen_games.add(row.game_id)
        rows.append(row)
    return rows


def compute_player_stats(
    player_id: str,
    season_id: str,
    games: Any,
    player_teams: Any,
    player_game_stats: Any = (),
    player: Player | None = None,
    teams: Any = (),
) -> PlayerSeasonStats:
    team_ids = player_team_ids(player_id, season_id, player_teams)
    team_names: list[str] = []
    for team_id in team_ids:
        team = find_team(teams, team_id)
        team_names.append(team.name if team is not None else "Unknown")

    stats = PlayerSeasonStats(
        season_id=season_id,
        player_id=player_id,
        player_name=player.display_name if player is not None else "",
        team_ids=team_ids,
        team_names=team_names,
    )
    # Whole-team results are credited to every rostered player.
    _accumulate(stats, _credited_games(team_ids, season_id, games))
    for row in _player_rows(player_id, season_id, player_game_stats):
        stats.register_game_stats(row)
    return stats


def compute_all_player_stats(
    season_id: str,
    games: Any,
    player_teams: Any,
    players: Any,
    player_game_stats: Any = (),
    teams: Any = (),
) -> dict[str, PlayerSeasonStats]:
    all_stats: dict[str, PlayerSeasonStats] = {}
    for player in _rows(players, Player):
        all_stats[player.player_id] = compute_player_stats(
            player.player_id,
            season_id,
            games,
            player_teams,
            player_game_stats=player_game_stats,
            player=player,
            teams=teams,
        )
    logger.debug("Aggregated %d player records for season %s.", len(all_stats), season_id)
    return all_stats


def player_game_log(
    player_id: str,
    season_id: str,
    games: Any,
    player_teams: Any,
    player_game_stats: Any = (),
    players: Any = (),
    teams: Any = (),
) -> list[GameLogEntry]:
    team_ids = player_team_ids(player_id, season_id, player_teams)
    own_rows = {row.game_id: row for row in _player_rows(player_id, season_id, player_game_stats)}
    all_rows = _rows(player_game_stats, PlayerGameStats)

    credited = _credited_games(team_ids, season_id, games)
    credited_ids = {g.game_id for g, _ in credited}
    # Stat rows can place a player in a game their roster entry does not cover.
    for game in season_games(games, season_id):
        row = own_rows.get(game.game_id)
        if row is not None and game.game_id not in credited_ids and involves_team(game, row.team_id):
            credited.append((game, row.team_id))

    log: list[GameLogEntry] = []
    for game, team_id in credited:
        row = own_rows.get(game.game_id)
        partner_id: str | None = None
        partner_row = next(
            (
                r
                for r in all_rows
                if r.game_id == game.game_id and r.team_id == team_id and r.player_id != player_id
            ),
            None,
        )
        if partner_row is not None:
            partner_id = partner_row.player_id
        else:
            mates = teammate_ids(player_id, team_id, player_teams, season_id)
            partner_id = mates[0] if mates else None
        partner = find_player(players, partner_id) if partner_id else None
        opp = opponent_id(game, team_id) or ""
        opp_team = find_team(teams, opp)
        log.append(
            GameLogEntry(
                game_id=game.game_id,
                played_on=game.game_date,
                team_id=team_id,
                opponent_team_id=opp,
                opponent_name=opp_team.name if opp_team is not None else "Unknown",
                partner_id=partner_id,
                partner_name=partner.display_name if partner is not None else None,
                result="W" if winner_id(game) == team_id else "L",
                score=f"{team_score(game, team_id)}-{opponent_score(game, team_id)}",
                cups_hit=row.cups_hit if row is not None else 0,
                table_hits=row.table_hits if row is not None else 0,
                throws_missed=row.throws_missed if row is not None else 0,
            )
        )

    dated = [e for e in log if date_key(e.played_on) is not None]
    undated = [e for e in log if date_key(e.played_on) is None]
    dated.sort(key=lambda e: (date_key(e.played_on), e.game_id), reverse=True)
    return dated + undated


def partner_chemistry(
    player_id: str,
    season_id: str,
    games: Any,
    player_game_stats: Any,
    players: Any = (),
) -> list[PartnerChemistry]:
    by_id = {g.game_id: g for g in season_games(games, season_id)}
    all_rows = _rows(player_game_stats, PlayerGameStats)
    chemistry: dict[str, PartnerChemistry] = {}

    for row in _player_rows(player_id, season_id, player_game_stats):
        game = by_id.get(row.game_id)
        if game is None:
            continue
        partner_row = next(
            (
                r
                for r in all_rows
                if r.game_id == game.game_id and r.team_id == row.team_id and r.player_id != player_id
            ),
            None,
        )
        if partner_row is None:
            continue
        partner = find_player(players, partner_row.player_id)
        entry = chemistry.setdefault(
            partner_row.player_id,
            PartnerChemistry(
                partner_id=partner_row.player_id,
                partner_name=partner.display_name if partner is not None else "Unknown",
            ),
        )
        entry.games_played += 1
        if winner_id(game) == row.team_id:
            entry.wins += 1
        else:
            entry.losses += 1
        entry.total_cups += max(0, row.cups_hit) + max(0, partner_row.cups_hit)

    return sorted(chemistry.values(), key=lambda c: -c.games_played)
