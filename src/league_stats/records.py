from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .games import date_key
from .models import Game, Player, PlayerGameStats, PlayerTeam, PlayoffMatch, Season, Team

logger = logging.getLogger(__name__)


class _Row(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)


class SeasonRow(_Row):
    season_id: str = Field(alias="id")
    name: str
    year: int
    start_date: datetime | date | None = Field(default=None, alias="startDate")
    end_date: datetime | date | None = Field(default=None, alias="endDate")
    status: Literal["upcoming", "active", "completed", "archived"] = "upcoming"

    def to_entity(self) -> Season:
        return Season(
            season_id=self.season_id,
            name=self.name,
            year=self.year,
            start_date=date_key(self.start_date),
            end_date=date_key(self.end_date),
            status=self.status,
        )


class TeamRow(_Row):
    team_id: str = Field(alias="id")
    name: str
    abbreviation: str = ""
    primary_color: str = Field(default="#1f3a93", alias="color")
    icon: str = ""
    logo_url: str | None = Field(default=None, alias="logoUrl")

    def to_entity(self) -> Team:
        return Team(
            team_id=self.team_id,
            name=self.name,
            abbreviation=self.abbreviation,
            primary_color=self.primary_color,
            icon=self.icon,
            logo_url=self.logo_url,
        )


class PlayerRow(_Row):
    player_id: str = Field(alias="id")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    nickname: str | None = None
    status: Literal["active", "inactive", "alumni"] = "active"

    @field_validator("nickname")
    @classmethod
    def _blank_nickname(cls, value: str | None) -> str | None:
        return value or None

    def to_entity(self) -> Player:
        return Player(
            player_id=self.player_id,
            first_name=self.first_name,
            last_name=self.last_name,
            nickname=self.nickname,
            status=self.status,
        )


class PlayerTeamRow(_Row):
    player_id: str = Field(alias="playerId")
    team_id: str = Field(alias="teamId")
    season_id: str = Field(alias="seasonId")
    role: Literal["starter_1", "starter_2", "sub"] = "sub"
    status: Literal["active", "inactive", "ir"] = "active"
    is_captain: bool = Field(default=False, alias="isCaptain")

    def to_entity(self) -> PlayerTeam:
        return PlayerTeam(
            player_id=self.player_id,
            team_id=self.team_id,
            season_id=self.season_id,
            role=self.role,
            status=self.status,
            is_captain=self.is_captain,
        )


class GameRow(_Row):
    game_id: str = Field(alias="id")
    season_id: str = Field(alias="seasonId")
    home_team_id: str = Field(alias="homeTeamId")
    away_team_id: str = Field(alias="awayTeamId")
    home_score: int = Field(default=0, alias="homeScore", ge=0)
    away_score: int = Field(default=0, alias="awayScore", ge=0)
    status: Literal["scheduled", "in_progress", "completed", "canceled"] = "scheduled"
    game_date: datetime | date | None = Field(default=None, alias="gameDate")
    week: int | None = Field(default=None, ge=1, le=6)
    winning_team_id: str | None = Field(default=None, alias="winningTeamId")

    @model_validator(mode="after")
    def _distinct_sides(self) -> "GameRow":
        if self.home_team_id == self.away_team_id:
            raise ValueError("home and away team must differ")
        return self

    def to_entity(self) -> Game:
        return Game(
            game_id=self.game_id,
            season_id=self.season_id,
            home_team_id=self.home_team_id,
            away_team_id=self.away_team_id,
            home_score=self.home_score,
            away_score=self.away_score,
            status=self.status,
            game_date=date_key(self.game_date),
            week=self.week,
            winning_team_id=self.winning_team_id or None,
        )


class PlayerGameStatsRow(_Row):
    game_id: str = Field(alias="gameId")
    player_id: str = Field(alias="playerId")
    team_id: str = Field(alias="teamId")
    season_id: str = Field(alias="seasonId")
    points_scored: int = Field(default=0, alias="pointsScored")
    cups_hit: int = Field(default=0, alias="cupsHit")
    sinks: int = 0
    bounces: int = 0
    table_hits: int = Field(default=0, alias="tableHits")
    throws_missed: int = Field(default=0, alias="throwsMissed")
    is_winner: bool = Field(default=False, alias="isWinner")
    mvp: bool = False

    def to_entity(self) -> PlayerGameStats:
        return PlayerGameStats(
            game_id=self.game_id,
            player_id=self.player_id,
            team_id=self.team_id,
            season_id=self.season_id,
            points_scored=self.points_scored,
            cups_hit=self.cups_hit,
            sinks=self.sinks,
            bounces=self.bounces,
            table_hits=self.table_hits,
            throws_missed=self.throws_missed,
            is_winner=self.is_winner,
            mvp=self.mvp,
        )


class PlayoffMatchRow(_Row):
    match_id: str = Field(alias="id")
    playoff_id: str = Field(alias="playoffId")
    round_number: int = Field(alias="roundNumber", ge=1)
    match_number: int = Field(alias="matchNumber", ge=0)
    team1_id: str | None = Field(default=None, alias="team1Id")
    team2_id: str | None = Field(default=None, alias="team2Id")
    status: Literal["awaiting", "pending", "in_progress", "bye", "completed"] = "pending"
    winner_id: str | None = Field(default=None, alias="winnerId")
    next_match_id: str | None = Field(default=None, alias="nextMatchId")
    team1_score: int | None = Field(default=None, alias="team1Score")
    team2_score: int | None = Field(default=None, alias="team2Score")
    series_format: str = Field(default="single", alias="seriesFormat")
    point_target: int = Field(default=21, alias="pointTarget")

    def to_entity(self) -> PlayoffMatch:
        status = self.status
        # Stored rows predate the awaiting state; derive it from the slots.
        if status in {"pending", "in_progress"} and not (self.team1_id and self.team2_id):
            status = "awaiting"
        elif status == "in_progress":
            status = "pending"
        return PlayoffMatch(
            match_id=self.match_id,
            playoff_id=self.playoff_id,
            round_number=self.round_number,
            match_number=self.match_number,
            team1_id=self.team1_id or None,
            team2_id=self.team2_id or None,
            status=status,
            winner_id=self.winner_id or None,
            next_match_id=self.next_match_id or None,
            team1_score=self.team1_score,
            team2_score=self.team2_score,
            series_format=self.series_format,
            point_target=self.point_target,
        )


def _load(rows: Any, row_model: type[_Row], label: str) -> list[Any]:
    if not isinstance(rows, (list, tuple)):
        if rows is not None:
            logger.warning("Expected a list of %s rows, got %s.", label, type(rows).__name__)
        return []
    entities: list[Any] = []
    for idx, raw in enumerate(rows):
        if not isinstance(raw, dict):
            logger.warning("Skipping %s row %d: not a mapping.", label, idx)
            continue
        try:
            entities.append(row_model.model_validate(raw).to_entity())
        except ValidationError as exc:
            logger.warning("Skipping %s row %d: %s", label, idx, exc.errors(include_url=False))
    return entities


def load_seasons(rows: Any) -> list[Season]:
    return _load(rows, SeasonRow, "season")


def load_teams(rows: Any) -> list[Team]:
    return _load(rows, TeamRow, "team")


def load_players(rows: Any) -> list[Player]:
    return _load(rows, PlayerRow, "player")


def load_player_teams(rows: Any) -> list[PlayerTeam]:
    return _load(rows, PlayerTeamRow, "player_team")


def load_games(rows: Any) -> list[Game]:
    return _load(rows, GameRow, "game")


def load_player_game_stats(rows: Any) -> list[PlayerGameStats]:
    return _load(rows, PlayerGameStatsRow, "player_game_stats")


def load_playoff_matches(rows: Any) -> list[PlayoffMatch]:
    return _load(rows, PlayoffMatchRow, "playoff_match")
