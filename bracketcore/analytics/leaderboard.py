"""
Leaderboard Assembly

Orders participant scores into a ranked leaderboard:
- Highest total score first
- Equal scores ordered by display name (plain, case-sensitive string order),
  then by participant id so the order never depends on input order

Rank numbering follows RANKING_POLICY:
- sequential:  position in the ordering, so equal scores still get distinct ranks
- competition: equal scores share a rank and the next rank skips (1, 1, 3)
- dense:       equal scores share a rank without gaps (1, 1, 2)
"""

from dataclasses import replace
from typing import Iterable

import pandas as pd

from bracketcore.bracket.scoring import ParticipantScore
from bracketcore.config import RANKING_POLICY, TOURNAMENT_ROUNDS, UNRANKED
from bracketcore.utils import setup_logging, validate_ranking_policy

# --- Module Logger ---
logger = setup_logging(__name__)


def _leaderboard_order(score: ParticipantScore):
    return -score.total_score, score.participant_name, score.participant_id


def assign_ranks(totals: list[int], policy: str = RANKING_POLICY) -> list[int]:
    """
    Rank an already sorted (descending) list of totals.

    Args:
        totals: Scores, highest first
        policy: "sequential", "competition" or "dense"

    Returns:
        One rank per total
    """
    validate_ranking_policy(policy)
    if policy == "sequential":
        return list(range(1, len(totals) + 1))

    ranks = []
    distinct = 0
    i = 0
    while i < len(totals):
        j = i
        while j < len(totals) and totals[j] == totals[i]:
            j += 1
        distinct += 1
        shared = i + 1 if policy == "competition" else distinct
        ranks.extend([shared] * (j - i))
        i = j
    return ranks


def build_leaderboard(
    scores: Iterable[ParticipantScore],
    policy: str = RANKING_POLICY,
) -> list[ParticipantScore]:
    """
    Sort participant scores and assign ranks.

    The input is left untouched; ranked copies are returned.

    Args:
        scores: Unranked scores (see per_participant_scores())
        policy: Rank numbering policy

    Returns:
        Ranked scores, best first
    """
    ordered = sorted(scores, key=_leaderboard_order)
    ranks = assign_ranks([s.total_score for s in ordered], policy)
    leaderboard = [replace(s, rank=rank) for s, rank in zip(ordered, ranks)]

    if leaderboard:
        logger.debug(
            f"Leaderboard of {len(leaderboard)} participants ({policy} ranks), "
            f"top score {leaderboard[0].total_score}"
        )
    return leaderboard


def participant_rank(participant_id: str, leaderboard: Iterable[ParticipantScore]) -> int:
    """Rank of one participant, or UNRANKED (0) if they are not on the leaderboard."""
    for entry in leaderboard:
        if entry.participant_id == participant_id:
            return entry.rank
    return UNRANKED


def leaderboard_frame(leaderboard: Iterable[ParticipantScore], rounds: int = TOURNAMENT_ROUNDS) -> pd.DataFrame:
    """
    Render a leaderboard as a DataFrame for display or export.

    Columns: rank, participant_id, participant_name, total_score, round_1..round_N
    """
    round_columns = [f"round_{r}" for r in range(1, rounds + 1)]
    rows = []
    for entry in leaderboard:
        row = {
            'rank': entry.rank,
            'participant_id': entry.participant_id,
            'participant_name': entry.participant_name,
            'total_score': entry.total_score,
        }
        for r in range(1, rounds + 1):
            row[f"round_{r}"] = entry.round_scores.get(r, 0)
        rows.append(row)

    return pd.DataFrame(rows, columns=['rank', 'participant_id', 'participant_name', 'total_score', *round_columns])
