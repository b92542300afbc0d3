from __future__ import annotations

from typing import Any

from .models import Player, PlayerTeam, Season, Team


def _rows(value: Any, kind: type) -> list:
    if not isinstance(value, (list, tuple)):
        return []
    return [row for row in value if isinstance(row, kind)]


def find_team(teams: Any, team_id: str) -> Team | None:
    for team in _rows(teams, Team):
        if team.team_id == team_id:
            return team
    return None


def find_player(players: Any, player_id: str) -> Player | None:
    for player in _rows(players, Player):
        if player.player_id == player_id:
            return player
    return None


def find_season(seasons: Any, season_id: str) -> Season | None:
    for season in _rows(seasons, Season):
        if season.season_id == season_id:
            return season
    return None


def active_memberships(player_teams: Any, season_id: str | None = None) -> list[PlayerTeam]:
    return [
        pt
        for pt in _rows(player_teams, PlayerTeam)
        if pt.is_active and (season_id is None or pt.season_id == season_id)
    ]


def player_team_ids(player_id: str, season_id: str, player_teams: Any) -> list[str]:
    team_ids: list[str] = []
    for pt in active_memberships(player_teams, season_id):
        if pt.player_id == player_id and pt.team_id not in team_ids:
            team_ids.append(pt.team_id)
    return team_ids


def player_team(
    player_id: str,
    teams: Any,
    player_teams: Any,
    season_id: str | None = None,
) -> Team | None:
    for pt in active_memberships(player_teams, season_id):
        if pt.player_id == player_id:
            return find_team(teams, pt.team_id)
    return None


def team_player_ids(team_id: str, player_teams: Any, season_id: str | None = None) -> list[str]:
    player_ids: list[str] = []
    for pt in active_memberships(player_teams, season_id):
        if pt.team_id == team_id and pt.player_id not in player_ids:
            player_ids.append(pt.player_id)
    return player_ids


def team_players(team_id: str, players: Any, player_teams: Any, season_id: str | None = None) -> list[Player]:
    wanted = set(team_player_ids(team_id, player_teams, season_id))
    return [p for p in _rows(players, Player) if p.player_id in wanted]


def team_captain_id(team_id: str, player_teams: Any, season_id: str) -> str | None:
    for pt in active_memberships(player_teams, season_id):
        if pt.team_id == team_id and pt.is_captain:
            return pt.player_id
    return None


def is_player_on_team(player_id: str, team_id: str, player_teams: Any, season_id: str | None = None) -> bool:
    return any(
        pt.player_id == player_id and pt.team_id == team_id
        for pt in active_memberships(player_teams, season_id)
    )


def teammate_ids(player_id: str, team_id: str, player_teams: Any, season_id: str) -> list[str]:
    return [pid for pid in team_player_ids(team_id, player_teams, season_id) if pid != player_id]


def player_display_name(player: Player | None) -> str:
    if player is None:
        return "Unknown"
    return player.display_name
