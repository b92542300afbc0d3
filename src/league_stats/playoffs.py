"""Single-elimination playoff brackets.

Brackets are built in one pass from a seeded team list and then only change
through :func:`record_result`, which returns a fresh match list with the
winner moved into the next round.

Pairing rule: seeds fill round-one slots in standard bracket order, built by
repeatedly mirroring the current order (size 4 gives ``1,4,2,3``; size 8
gives ``1,8,4,5,2,7,3,6``). Slot ``m`` pairs positions ``2m`` and ``2m+1``,
so the top seed meets the bottom seed, byes go to the highest seeds, and
seeds 1 and 2 can only meet in the finals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping

from .config import (
    DEFAULT_POINT_TARGET,
    DEFAULT_SERIES_FORMAT,
    MAX_PLAYOFF_TEAMS,
    MIN_PLAYOFF_TEAMS,
    ROUND_NAMES_FROM_END,
    SERIES_FORMATS,
)
from .models import PlayoffMatch, SeasonRecord, TeamSeasonStats

logger = logging.getLogger(__name__)


class PlayoffError(ValueError):
    pass


class InvalidSetup(PlayoffError):
    pass


class InvalidResult(PlayoffError):
    pass


@dataclass(slots=True, frozen=True)
class BracketDimensions:
    team_count: int
    bracket_size: int
    bye_count: int
    total_rounds: int


@dataclass(slots=True)
class BracketRound:
    number: int
    name: str
    matches: list[PlayoffMatch]


def bracket_size(team_count: int) -> int:
    size = 2
    while size < team_count:
        size *= 2
    return size


def bracket_dimensions(team_count: int) -> BracketDimensions:
    size = bracket_size(team_count)
    return BracketDimensions(
        team_count=team_count,
        bracket_size=size,
        bye_count=size - team_count,
        total_rounds=size.bit_length() - 1,
    )


def seed_positions(size: int) -> list[int]:
    """Seed numbers in round-one slot order for a bracket of ``size``."""
    order = [1]
    while len(order) < size:
        mirror = len(order) * 2 + 1
        order = [seed for top in order for seed in (top, mirror - top)]
    return order


def round_name(round_number: int, total_rounds: int) -> str:
    from_end = total_rounds - round_number + 1
    if 1 <= round_number <= total_rounds and from_end <= len(ROUND_NAMES_FROM_END):
        return ROUND_NAMES_FROM_END[from_end - 1]
    if round_number == 1:
        return "First Round"
    return f"Round {round_number}"


def match_id(playoff_id: str, round_number: int, match_number: int) -> str:
    return f"{playoff_id}-r{round_number}-m{match_number}"


def validate_playoff_setup(team_ids: list[str]) -> None:
    if len(team_ids) < MIN_PLAYOFF_TEAMS:
        raise InvalidSetup(f"At least {MIN_PLAYOFF_TEAMS} teams are required, got {len(team_ids)}.")
    if len(team_ids) > MAX_PLAYOFF_TEAMS:
        raise InvalidSetup(f"At most {MAX_PLAYOFF_TEAMS} teams are allowed, got {len(team_ids)}.")
    if len(set(team_ids)) != len(team_ids):
        raise InvalidSetup("Duplicate teams are not allowed.")


def seed_teams(team_ids: Iterable[str], team_stats: Any = None) -> list[str]:
    if isinstance(team_stats, Mapping):
        stats = {k: v for k, v in team_stats.items() if isinstance(v, SeasonRecord)}
    elif isinstance(team_stats, (list, tuple)):
        stats = {r.team_id: r for r in team_stats if isinstance(r, TeamSeasonStats)}
    else:
        stats = {}
    # Teams without a game played follow the ranked ones in input order.
    ranked: list[tuple[str, SeasonRecord]] = []
    unranked: list[str] = []
    for team_id in team_ids:
        rec = stats.get(team_id)
        if isinstance(rec, SeasonRecord) and rec.games_played > 0:
            ranked.append((team_id, rec))
        else:
            unranked.append(team_id)
    ranked.sort(key=lambda row: (-row[1].win_pct, -row[1].points_for, row[1].points_against))
    return [team_id for team_id, _rec in ranked] + unranked


def _place_winner(target: PlayoffMatch, from_match_number: int, team_id: str) -> None:
    if from_match_number % 2 == 0:
        target.team1_id = team_id
    else:
        target.team2_id = team_id
    if target.status == "awaiting" and target.team1_id is not None and target.team2_id is not None:
        target.status = "pending"


def generate_bracket(
    playoff_id: str,
    team_ids: Iterable[str],
    series_format: str = DEFAULT_SERIES_FORMAT,
    point_target: int = DEFAULT_POINT_TARGET,
) -> list[PlayoffMatch]:
    seeded = list(team_ids)
    validate_playoff_setup(seeded)
    if series_format not in SERIES_FORMATS:
        raise InvalidSetup(f"Unknown series format '{series_format}'.")
    if point_target <= 0:
        raise InvalidSetup("Point target must be positive.")

    dims = bracket_dimensions(len(seeded))
    slots: list[str | None] = [
        seeded[seed - 1] if seed <= len(seeded) else None for seed in seed_positions(dims.bracket_size)
    ]

    def _new_match(round_number: int, match_number: int) -> PlayoffMatch:
        return PlayoffMatch(
            match_id=match_id(playoff_id, round_number, match_number),
            playoff_id=playoff_id,
            round_number=round_number,
            match_number=match_number,
            next_match_id=(
                match_id(playoff_id, round_number + 1, match_number // 2)
                if round_number < dims.total_rounds
                else None
            ),
            series_format=series_format,
            point_target=point_target,
        )

    matches: dict[str, PlayoffMatch] = {}
    for m in range(dims.bracket_size // 2):
        team1, team2 = slots[2 * m], slots[2 * m + 1]
        if team1 is None and team2 is None:
            logger.warning("Skipping empty round 1 slot %d in playoff %s.", m, playoff_id)
            continue
        match = _new_match(1, m)
        match.team1_id = team1
        match.team2_id = team2
        if team1 is not None and team2 is not None:
            match.status = "pending"
        else:
            match.status = "bye"
            match.winner_id = team1 if team1 is not None else team2
        matches[match.match_id] = match

    for round_number in range(2, dims.total_rounds + 1):
        for m in range(dims.bracket_size >> round_number):
            match = _new_match(round_number, m)
            matches[match.match_id] = match

    for match in list(matches.values()):
        if match.status == "bye" and match.next_match_id and match.winner_id:
            _place_winner(matches[match.next_match_id], match.match_number, match.winner_id)

    logger.info(
        "Generated playoff %s: %d teams, bracket of %d, %d byes, %d matches.",
        playoff_id,
        dims.team_count,
        dims.bracket_size,
        dims.bye_count,
        len(matches),
    )
    return list(matches.values())


def create_playoff(
    playoff_id: str,
    team_ids: Iterable[str],
    team_stats: Any = None,
    series_format: str = DEFAULT_SERIES_FORMAT,
    point_target: int = DEFAULT_POINT_TARGET,
) -> list[PlayoffMatch]:
    return generate_bracket(
        playoff_id,
        seed_teams(team_ids, team_stats),
        series_format=series_format,
        point_target=point_target,
    )


def _matches(matches: Any) -> list[PlayoffMatch]:
    if not isinstance(matches, (list, tuple)):
        return []
    return [m for m in matches if isinstance(m, PlayoffMatch)]


def find_match(matches: Any, wanted_id: str) -> PlayoffMatch | None:
    for match in _matches(matches):
        if match.match_id == wanted_id:
            return match
    return None


def record_result(
    matches: Any,
    target_id: str,
    team1_score: int,
    team2_score: int,
) -> list[PlayoffMatch]:
    # Works on copies; the caller's list is never touched.
    updated = [replace(m) for m in _matches(matches)]
    target = find_match(updated, target_id)
    if target is None:
        logger.warning("Playoff match %s not found; bracket unchanged.", target_id)
        return updated
    if target.is_decided:
        raise InvalidResult(f"Match {target_id} is already decided.")
    if not target.is_ready:
        raise InvalidResult(f"Match {target_id} is still waiting for its teams.")
    if team1_score == team2_score:
        raise InvalidResult(f"Match {target_id} cannot end tied at {team1_score}.")

    winner = target.team1_id if team1_score > team2_score else target.team2_id
    target.team1_score = team1_score
    target.team2_score = team2_score
    target.winner_id = winner
    target.status = "completed"

    if target.next_match_id:
        nxt = find_match(updated, target.next_match_id)
        if nxt is None:
            logger.warning("Next match %s for %s is missing.", target.next_match_id, target_id)
        elif winner is not None:
            _place_winner(nxt, target.match_number, winner)
    return updated


def group_by_round(matches: Any) -> dict[int, list[PlayoffMatch]]:
    rounds: dict[int, list[PlayoffMatch]] = {}
    for match in _matches(matches):
        rounds.setdefault(match.round_number, []).append(match)
    for round_matches in rounds.values():
        round_matches.sort(key=lambda m: m.match_number)
    return dict(sorted(rounds.items()))


def bracket_rounds(matches: Any) -> list[BracketRound]:
    rounds = group_by_round(matches)
    if not rounds:
        return []
    total = max(rounds)
    return [BracketRound(number=n, name=round_name(n, total), matches=ms) for n, ms in rounds.items()]


def ready_matches(matches: Any) -> list[PlayoffMatch]:
    return [m for m in _matches(matches) if m.is_ready]


def is_playoff_complete(matches: Any) -> bool:
    rounds = group_by_round(matches)
    if not rounds:
        return False
    return all(m.status == "completed" for m in rounds[max(rounds)])


def playoff_winner(matches: Any) -> str | None:
    if not is_playoff_complete(matches):
        return None
    final_round = group_by_round(matches)
    return final_round[max(final_round)][0].winner_id
