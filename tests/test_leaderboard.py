from datetime import datetime

import pytest

from league_stats.leaderboard import (
    build_leaderboard,
    head_to_head,
    head_to_head_matrix,
    league_leaders,
    search_stats,
    season_leaders,
    sort_stats,
)
from league_stats.models import Game, PlayerSeasonStats, Streak, TeamSeasonStats


def _team(team_id: str, wins: int, losses: int, pf: int, pa: int, name: str = "") -> TeamSeasonStats:
    return TeamSeasonStats(
        season_id="s1",
        team_id=team_id,
        team_name=name or team_id,
        wins=wins,
        losses=losses,
        points_for=pf,
        points_against=pa,
    )


def _game(game_id: str, home: str, away: str, hs: int, as_: int, day: int | None, season_id: str = "s1") -> Game:
    return Game(
        game_id=game_id,
        season_id=season_id,
        home_team_id=home,
        away_team_id=away,
        home_score=hs,
        away_score=as_,
        status="completed",
        game_date=datetime(2025, 3, day) if day else None,
    )


def test_ties_break_on_differential_then_input_order() -> None:
    stats = {
        "T1": _team("T1", 3, 1, 30, 20),
        "T2": _team("T2", 3, 1, 25, 10),
        "T3": _team("T3", 5, 0, 40, 20),
        "T4": _team("T4", 3, 1, 20, 10),
    }
    board = build_leaderboard(stats, "wins")
    assert [e.subject_id for e in board] == ["T3", "T2", "T1", "T4"]
    assert [e.rank for e in board] == [1, 2, 3, 4]
    assert board[0].games_played == 5
    assert board[1].value == 3


def test_win_pct_board_and_limits() -> None:
    stats = [_team("T1", 1, 1, 20, 20), _team("T2", 2, 0, 22, 10), _team("T3", 0, 0, 0, 0)]
    board = build_leaderboard(stats, "win_pct", min_games=1)
    assert [e.subject_id for e in board] == ["T2", "T1"]
    assert build_leaderboard(stats, "win_pct", limit=1)[0].subject_id == "T2"


@pytest.mark.regression
def test_accuracy_board_skips_insufficient_data() -> None:
    sharp = PlayerSeasonStats(season_id="s1", player_id="p1", table_hits_total=6, throws_missed_total=4)
    silent = PlayerSeasonStats(season_id="s1", player_id="p2")
    cold = PlayerSeasonStats(season_id="s1", player_id="p3", table_hits_total=0, throws_missed_total=5)
    board = build_leaderboard([sharp, silent, cold], "accuracy")
    assert [e.subject_id for e in board] == ["p1", "p3"]
    assert board[1].value == 0.0


def test_unknown_category_and_junk_input_give_empty_board() -> None:
    assert build_leaderboard([_team("T1", 1, 0, 11, 2)], "elo") == []
    assert build_leaderboard("junk", "wins") == []


def test_head_to_head_either_order() -> None:
    games = [
        _game("g1", "A", "B", 11, 9, 1),
        _game("g3", "A", "B", 0, 11, 3),
        _game("g4", "B", "A", 10, 11, 4),
        _game("g5", "A", "C", 11, 0, 5),
        _game("g7", "A", "B", 11, 0, 7, season_id="s2"),
    ]
    h2h = head_to_head("A", "B", games)
    assert (h2h.team1_wins, h2h.team2_wins, h2h.total_games) == (3, 1, 4)
    assert h2h.average_score_difference == 6.25
    assert h2h.last_game.game_id == "g7"

    season_only = head_to_head("B", "A", games, season_id="s1")
    assert (season_only.team1_wins, season_only.team2_wins) == (1, 2)
    assert season_only.average_score_difference == 4.67
    assert season_only.last_game.game_id == "g4"


@pytest.mark.regression
def test_head_to_head_last_game_tie_breaks_on_id() -> None:
    games = [_game("h2", "A", "B", 11, 9, 1), _game("h1", "B", "A", 11, 9, 1), _game("h3", "A", "B", 11, 2, None)]
    h2h = head_to_head("A", "B", games)
    assert h2h.total_games == 3
    assert h2h.last_game.game_id == "h2"
    assert head_to_head("A", "Z", games).last_game is None
    assert head_to_head("A", "Z", games).average_score_difference == 0.0


def test_head_to_head_matrix_covers_all_pairs() -> None:
    games = [_game("g1", "A", "B", 11, 9, 1), _game("g2", "C", "A", 11, 9, 2)]
    matrix = head_to_head_matrix(["A", "B", "C", "A"], games)
    assert set(matrix) == {("A", "B"), ("A", "C"), ("B", "C")}
    assert matrix[("A", "C")].team2_wins == 1
    assert matrix[("B", "C")].total_games == 0


def test_season_leaders() -> None:
    teams = {"A": _team("A", 4, 1, 45, 45, "Aces"), "B": _team("B", 1, 2, 30, 22, "Bombers")}
    players = {
        "p1": PlayerSeasonStats(
            season_id="s1", player_id="p1", cups_total=12, stat_games=3, table_hits_total=5, throws_missed_total=5
        ),
        "p2": PlayerSeasonStats(
            season_id="s1", player_id="p2", cups_total=4, stat_games=2, table_hits_total=9, throws_missed_total=1
        ),
    }
    leaders = season_leaders(teams, players)
    assert leaders.top_scorer.subject_id == "p1"
    assert leaders.most_accurate.subject_id == "p1"
    assert leaders.most_accurate.value == pytest.approx(50.0)
    assert leaders.top_team.name == "Aces"
    assert leaders.top_team_record == "4-1"

    empty = season_leaders({}, {})
    assert empty.top_scorer is None and empty.most_accurate is None and empty.top_team is None


def test_search_and_sort_stats() -> None:
    players = [
        PlayerSeasonStats(season_id="s1", player_id="p1", player_name="Sam Reyes", team_names=["Aces"]),
        PlayerSeasonStats(
            season_id="s1", player_id="p2", player_name="Ana Cole", team_names=["Bombers"], streak=Streak("W", 3)
        ),
        PlayerSeasonStats(season_id="s1", player_id="p3", player_name="Lou Park", streak=Streak("L", 4)),
    ]
    assert [p.subject_id for p in search_stats(players, "bomb")] == ["p2"]
    assert [p.subject_id for p in search_stats(players, "  ")] == ["p1", "p2", "p3"]
    assert [p.subject_id for p in sort_stats(players, "current_streak")] == ["p2", "p1", "p3"]
    assert [p.subject_id for p in sort_stats(players, "player_name", descending=False)] == ["p2", "p3", "p1"]
    assert [p.subject_id for p in sort_stats(players, "accuracy")] == ["p1", "p2", "p3"]


@pytest.mark.regression
def test_head_to_head_with_missing_scores() -> None:
    games = [
        Game("g1", "s1", "A", "B", home_score=None, away_score=7, status="completed", game_date=datetime(2025, 3, 1)),
        Game("g2", "s1", "A", "B", home_score=11, away_score=None, status="completed", game_date=datetime(2025, 3, 2)),
    ]
    h2h = head_to_head("A", "B", games)
    assert (h2h.team1_wins, h2h.team2_wins) == (1, 1)
    assert h2h.average_score_difference == 9.0


def test_league_leaders_bundle() -> None:
    stats = [_team("T1", 4, 1, 50, 30), _team("T2", 1, 1, 30, 10), _team("T3", 2, 2, 48, 40)]
    leaders = league_leaders(stats, limit=2)
    assert set(leaders) == {"wins", "average", "shutouts", "blowouts", "clutch", "streak", "current_streak"}
    assert [e.subject_id for e in leaders["wins"]] == ["T1", "T3"]
    # Two games is below the scoring-average minimum.
    assert [e.subject_id for e in leaders["average"]] == ["T3", "T1"]
    assert all(len(board) <= 2 for board in leaders.values())
    assert all(board == [] for board in league_leaders("junk").values())
