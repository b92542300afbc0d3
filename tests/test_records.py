import logging
from datetime import datetime

from league_stats.records import (
    load_games,
    load_player_game_stats,
    load_player_teams,
    load_players,
    load_playoff_matches,
    load_seasons,
    load_teams,
)


def test_games_load_from_camel_case_rows() -> None:
    games = load_games(
        [
            {
                "id": "g1",
                "seasonId": "s1",
                "homeTeamId": "A",
                "awayTeamId": "B",
                "homeScore": 11,
                "awayScore": 9,
                "status": "completed",
                "gameDate": "2025-03-01",
                "week": 2,
                "winningTeamId": "",
            },
            {
                "game_id": "g2",
                "season_id": "s1",
                "home_team_id": "B",
                "away_team_id": "A",
                "game_date": "2025-03-01T12:00:00+02:00",
            },
        ]
    )
    assert [g.game_id for g in games] == ["g1", "g2"]
    assert games[0].game_date == datetime(2025, 3, 1)
    assert games[0].winning_team_id is None
    assert games[0].is_completed
    assert games[1].status == "scheduled"
    assert games[1].game_date == datetime(2025, 3, 1, 10, 0)


def test_bad_game_rows_are_skipped_with_a_warning(caplog) -> None:
    rows = [
        {"id": "g1", "seasonId": "s1", "homeTeamId": "A", "awayTeamId": "A"},
        {"id": "g2", "seasonId": "s1", "homeTeamId": "A", "awayTeamId": "B", "status": "postponed"},
        {"id": "g3", "seasonId": "s1", "homeTeamId": "A", "awayTeamId": "B", "homeScore": -1},
        "not a row",
        {"id": "g4", "seasonId": "s1", "homeTeamId": "A", "awayTeamId": "B"},
    ]
    with caplog.at_level(logging.WARNING, logger="league_stats.records"):
        games = load_games(rows)
    assert [g.game_id for g in games] == ["g4"]
    assert "Skipping game row 0" in caplog.text
    assert "Skipping game row 3: not a mapping" in caplog.text


def test_non_list_input_loads_nothing(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="league_stats.records"):
        assert load_teams({"id": "A"}) == []
    assert "Expected a list of team rows" in caplog.text
    assert load_seasons(None) == []


def test_people_and_rosters() -> None:
    players = load_players(
        [
            {"id": "p1", "firstName": " Sam ", "lastName": "Reyes", "nickname": "Dusty"},
            {"id": "p2", "firstName": "Ana", "lastName": "Cole", "nickname": "  "},
        ]
    )
    assert players[0].display_name == 'Sam "Dusty" Reyes'
    assert players[1].nickname is None
    assert players[1].display_name == "Ana Cole"

    roster = load_player_teams(
        [{"playerId": "p1", "teamId": "A", "seasonId": "s1", "role": "starter_1", "isCaptain": True}]
    )
    assert roster[0].is_starter and roster[0].is_captain

    teams = load_teams([{"id": "A", "name": "Aces", "color": "#ff0000", "unused": 1}])
    assert teams[0].primary_color == "#ff0000"


def test_player_game_stats_rows() -> None:
    rows = load_player_game_stats(
        [{"gameId": "g1", "playerId": "p1", "teamId": "A", "seasonId": "s1", "cupsHit": 3, "tableHits": 4}]
    )
    assert rows[0].cups_hit == 3
    assert rows[0].total_throws == 4


def test_stored_playoff_rows_map_onto_match_states() -> None:
    matches = load_playoff_matches(
        [
            {"id": "po-r2-m0", "playoffId": "po", "roundNumber": 2, "matchNumber": 0, "team1Id": "A", "status": "pending"},
            {
                "id": "po-r1-m1",
                "playoffId": "po",
                "roundNumber": 1,
                "matchNumber": 1,
                "team1Id": "B",
                "team2Id": "C",
                "status": "in_progress",
                "nextMatchId": "po-r2-m0",
            },
            {"id": "po-r1-m0", "playoffId": "po", "roundNumber": 1, "matchNumber": 0, "team1Id": "A", "team2Id": "", "status": "bye", "winnerId": "A"},
        ]
    )
    assert matches[0].status == "awaiting"
    assert matches[0].team2_id is None
    assert matches[1].status == "pending"
    assert matches[1].is_ready
    assert matches[2].team2_id is None
    assert matches[2].is_decided
