from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

SEASON_STATUSES = {"upcoming", "active", "completed", "archived"}
PLAYER_STATUSES = {"active", "inactive", "alumni"}
ROSTER_ROLES = {"starter_1", "starter_2", "sub"}
STARTER_ROLES = {"starter_1", "starter_2"}
ROSTER_STATUSES = {"active", "inactive", "ir"}
GAME_STATUSES = {"scheduled", "in_progress", "completed", "canceled"}
MATCH_STATUSES = {"awaiting", "pending", "bye", "completed"}


@dataclass(slots=True)
class Season:
    season_id: str
    name: str
    year: int
    start_date: datetime | None = None
    end_date: datetime | None = None
    status: str = "upcoming"

    @property
    def is_active(self) -> bool:
        return self.status == "active"


@dataclass(slots=True)
class Team:
    team_id: str
    name: str
    abbreviation: str = ""
    primary_color: str = "#1f3a93"
    icon: str = ""
    logo_url: str | None = None


@dataclass(slots=True)
class Player:
    player_id: str
    first_name: str
    last_name: str
    nickname: str | None = None
    status: str = "active"

    @property
    def display_name(self) -> str:
        if self.nickname:
            return f'{self.first_name} "{self.nickname}" {self.last_name}'
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()


@dataclass(slots=True)
class PlayerTeam:
    player_id: str
    team_id: str
    season_id: str
    role: str = "sub"
    status: str = "active"
    is_captain: bool = False

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def is_starter(self) -> bool:
        return self.role in STARTER_ROLES


@dataclass(slots=True)
class Game:
    game_id: str
    season_id: str
    home_team_id: str
    away_team_id: str
    home_score: int = 0
    away_score: int = 0
    status: str = "scheduled"
    game_date: datetime | None = None
    week: int | None = None
    # Legacy stored winner; never trusted over the scores.
    winning_team_id: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"


@dataclass(slots=True)
class PlayerGameStats:
    game_id: str
    player_id: str
    team_id: str
    season_id: str
    points_scored: int = 0
    cups_hit: int = 0
    sinks: int = 0
    bounces: int = 0
    table_hits: int = 0
    throws_missed: int = 0
    is_winner: bool = False
    mvp: bool = False

    @property
    def total_throws(self) -> int:
        return self.table_hits + self.throws_missed


@dataclass(slots=True)
class PlayoffMatch:
    match_id: str
    playoff_id: str
    round_number: int
    match_number: int
    team1_id: str | None = None
    team2_id: str | None = None
    status: str = "awaiting"
    winner_id: str | None = None
    next_match_id: str | None = None
    team1_score: int | None = None
    team2_score: int | None = None
    series_format: str = "single"
    point_target: int = 21

    @property
    def is_ready(self) -> bool:
        return self.status == "pending" and self.team1_id is not None and self.team2_id is not None

    @property
    def is_decided(self) -> bool:
        return self.status in {"bye", "completed"}


@dataclass(slots=True)
class Streak:
    kind: str | None = None
    length: int = 0
    longest_win: int = 0
    longest_loss: int = 0

    @property
    def label(self) -> str:
        if self.kind is None:
            return "-"
        return f"{self.kind}{self.length}"

    @property
    def signed(self) -> int:
        if self.kind == "L":
            return -self.length
        return self.length


@dataclass(slots=True)
class OpponentRecord:
    wins: int = 0
    losses: int = 0

    @property
    def games_played(self) -> int:
        return self.wins + self.losses


@dataclass(slots=True)
class SeasonRecord:
    season_id: str
    wins: int = 0
    losses: int = 0
    points_for: int = 0
    points_against: int = 0
    shutout_wins: int = 0
    blowout_wins: int = 0
    clutch_wins: int = 0
    streak: Streak = field(default_factory=Streak)
    heat: float = 0.0
    recent_results: list[str] = field(default_factory=list)

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    @property
    def win_pct(self) -> float:
        gp = self.games_played
        if gp <= 0:
            return 0.0
        return self.wins / gp

    @property
    def point_differential(self) -> int:
        return self.points_for - self.points_against

    @property
    def points_per_game(self) -> float:
        gp = self.games_played
        if gp <= 0:
            return 0.0
        return self.points_for / gp

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}"

    @property
    def last10(self) -> str:
        sample = self.recent_results[-10:]
        return f"{sample.count('W')}-{sample.count('L')}"

    @property
    def longest_win_streak(self) -> int:
        return self.streak.longest_win

    @property
    def current_win_streak(self) -> int:
        return self.streak.length if self.streak.kind == "W" else 0

    @property
    def current_streak(self) -> int:
        return self.streak.signed

    def register_game(
        self,
        points_for: int,
        points_against: int,
        won: bool,
        is_shutout: bool = False,
        is_blowout: bool = False,
        is_clutch: bool = False,
    ) -> None:
        self.points_for += points_for
        self.points_against += points_against
        if not won:
            self.losses += 1
            return
        self.wins += 1
        # Tags only count toward achievements on a win.
        if is_shutout:
            self.shutout_wins += 1
        if is_blowout:
            self.blowout_wins += 1
        if is_clutch:
            self.clutch_wins += 1


@dataclass(slots=True)
class TeamSeasonStats(SeasonRecord):
    team_id: str = ""
    team_name: str = ""
    opponent_records: dict[str, OpponentRecord] = field(default_factory=dict)

    @property
    def subject_id(self) -> str:
        return self.team_id

    @property
    def display_name(self) -> str:
        return self.team_name or self.team_id

    def register_opponent(self, opponent_id: str, won: bool) -> None:
        rec = self.opponent_records.setdefault(opponent_id, OpponentRecord())
        if won:
            rec.wins += 1
        else:
            rec.losses += 1


@dataclass(slots=True)
class PlayerSeasonStats(SeasonRecord):
    player_id: str = ""
    player_name: str = ""
    team_ids: list[str] = field(default_factory=list)
    team_names: list[str] = field(default_factory=list)
    stat_games: int = 0
    cups_total: int = 0
    points_scored_total: int = 0
    table_hits_total: int = 0
    throws_missed_total: int = 0
    mvp_awards: int = 0

    @property
    def subject_id(self) -> str:
        return self.player_id

    @property
    def display_name(self) -> str:
        return self.player_name or self.player_id

    @property
    def total_throws(self) -> int:
        return self.table_hits_total + self.throws_missed_total

    @property
    def accuracy(self) -> float | None:
        throws = self.total_throws
        if throws <= 0:
            return None
        return self.table_hits_total / throws * 100

    @property
    def cups_per_game(self) -> float:
        if self.stat_games <= 0:
            return 0.0
        return self.cups_total / self.stat_games

    def register_game_stats(self, row: PlayerGameStats) -> None:
        self.stat_games += 1
        self.cups_total += max(0, row.cups_hit)
        self.points_scored_total += max(0, row.points_scored)
        self.table_hits_total += max(0, row.table_hits)
        self.throws_missed_total += max(0, row.throws_missed)
        if row.mvp:
            self.mvp_awards += 1
