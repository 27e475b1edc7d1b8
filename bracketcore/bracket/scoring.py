"""
Bracket Scoring Engine

Scores a participant's picks against the master results. A correct pick
earns the weight of its round; a wrong pick, or a pick for a matchup with
no master result yet, earns nothing.

Two round weightings are available (see SCORING_SCHEME in config):
- fixed_table: 1, 3, 5, 8 points for rounds 1-4 (0 beyond the table)
- geometric:   2 ** (round - 1) points

Every total, round breakdown and stored bracket point value uses the same
scheme, the configured SCORING_SCHEME unless a caller passes another.

Usage:
    from bracketcore.bracket.scoring import score
    points = score(picks, snapshot.master_results, snapshot.matchups)
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from bracketcore.config import ROUND_WEIGHTS, SCORING_SCHEME, UNKNOWN_PARTICIPANT_NAME
from bracketcore.records import (
    Bracket,
    MasterResult,
    Matchup,
    Pick,
    rounds_by_matchup,
    winners_by_matchup,
)
from bracketcore.utils import setup_logging, validate_scoring_scheme

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class RoundScore:
    round: int
    score: int


@dataclass(frozen=True)
class ParticipantScore:
    """One leaderboard entry. rank stays 0 until the leaderboard is built."""
    participant_id: str
    participant_name: str
    total_score: int
    round_scores: dict[int, int] = field(default_factory=dict, hash=False)
    rank: int = 0


def round_weight(round_number: int, scheme: str = SCORING_SCHEME) -> int:
    """
    Points for one correct pick in a round.

    Args:
        round_number: 1-based round
        scheme: "fixed_table" or "geometric"

    Returns:
        Weight, 0 for rounds the scheme does not cover
    """
    validate_scoring_scheme(scheme)
    if round_number < 1:
        return 0
    if scheme == "geometric":
        return 2 ** (round_number - 1)
    return ROUND_WEIGHTS.get(round_number, 0)


def _points_by_round(picks, master_results, all_matchups, scheme):
    validate_scoring_scheme(scheme)
    winners = winners_by_matchup(master_results)
    rounds = rounds_by_matchup(all_matchups)

    points: dict[int, int] = defaultdict(int)
    for pick in picks:
        winner = winners.get(pick.matchup_id)
        if winner is None or pick.picked_song_id != winner:
            continue
        round_number = rounds.get(pick.matchup_id)
        if round_number is None:
            # Result exists but the matchup is not part of this tree
            continue
        weight = round_weight(round_number, scheme)
        if weight:
            points[round_number] += weight
    return dict(points)


def score(
    picks: Iterable[Pick],
    master_results: Iterable[MasterResult],
    all_matchups: Iterable[Matchup],
    scheme: str = SCORING_SCHEME,
) -> int:
    """
    Total points of one participant's picks.

    Args:
        picks: Picks of one bracket
        master_results: Authoritative winners known so far
        all_matchups: Every matchup of the tree (for round lookup)
        scheme: Round weighting to apply

    Returns:
        Non-negative integer total
    """
    return sum(_points_by_round(picks, master_results, all_matchups, scheme).values())


def round_breakdown(
    picks: Iterable[Pick],
    master_results: Iterable[MasterResult],
    all_matchups: Iterable[Matchup],
    scheme: str = SCORING_SCHEME,
) -> list[RoundScore]:
    """Per-round points of one participant, sorted by round; rounds without points are left out."""
    points = _points_by_round(picks, master_results, all_matchups, scheme)
    return [RoundScore(round=r, score=points[r]) for r in sorted(points)]


def _picks_by_bracket(all_picks):
    grouped = defaultdict(list)
    for pick in all_picks:
        grouped[pick.bracket_id].append(pick)
    return grouped


def per_participant_scores(
    brackets: Iterable[Bracket],
    all_picks: Iterable[Pick],
    master_results: Iterable[MasterResult],
    all_matchups: Iterable[Matchup],
    participant_names: Mapping[str, str],
    scheme: str = SCORING_SCHEME,
) -> list[ParticipantScore]:
    """
    Score every bracket of a cohort.

    Finalized and open brackets are scored alike. The result is unranked;
    pass it to build_leaderboard().

    Args:
        brackets: Brackets of the cohort
        all_picks: Picks of any brackets (filtered per bracket here)
        master_results: Authoritative winners known so far
        all_matchups: Every matchup of the tree
        participant_names: participant id -> display name
        scheme: Round weighting to apply

    Returns:
        One ParticipantScore per bracket, in bracket order
    """
    master_results = list(master_results)
    all_matchups = list(all_matchups)
    picks_by_bracket = _picks_by_bracket(all_picks)

    scores = []
    for bracket in brackets:
        round_scores = _points_by_round(
            picks_by_bracket.get(bracket.id, []), master_results, all_matchups, scheme
        )
        scores.append(ParticipantScore(
            participant_id=bracket.participant_id,
            participant_name=participant_names.get(bracket.participant_id, UNKNOWN_PARTICIPANT_NAME),
            total_score=sum(round_scores.values()),
            round_scores=round_scores,
        ))

    logger.debug(f"Scored {len(scores)} brackets against {len(master_results)} master results")
    return scores


def score_brackets(
    brackets: Iterable[Bracket],
    all_picks: Iterable[Pick],
    master_results: Iterable[MasterResult],
    all_matchups: Iterable[Matchup],
    scheme: str = SCORING_SCHEME,
) -> dict[str, int]:
    """
    Recompute Bracket.points for every bracket.

    Called after master results change; storing the returned values is up
    to the caller.

    Returns:
        Dict of bracket id -> points
    """
    master_results = list(master_results)
    all_matchups = list(all_matchups)
    picks_by_bracket = _picks_by_bracket(all_picks)

    return {
        bracket.id: score(picks_by_bracket.get(bracket.id, []), master_results, all_matchups, scheme)
        for bracket in brackets
    }
