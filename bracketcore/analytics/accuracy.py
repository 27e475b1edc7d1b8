"""
Round Accuracy Across a Cohort

How often finalized brackets called each round correctly. Picks from open
brackets, picks for unknown matchups and picks outside ACCURACY_ROUNDS are
not counted.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

import pandas as pd

from bracketcore.analytics.votes import finalized_bracket_ids
from bracketcore.config import ACCURACY_ROUNDS
from bracketcore.records import Bracket, MasterResult, Matchup, Pick, rounds_by_matchup, winners_by_matchup
from bracketcore.utils import setup_logging, whole_percent

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class RoundAccuracy:
    round: int
    correct: int
    total: int
    accuracy: float  # correct / total, 0.0 when total is 0


def round_accuracy(
    brackets: Iterable[Bracket],
    all_picks: Iterable[Pick],
    master_results: Iterable[MasterResult],
    all_matchups: Iterable[Matchup],
    rounds: Sequence[int] = ACCURACY_ROUNDS,
) -> list[RoundAccuracy]:
    """
    Count correct and total finalized picks per round.

    A pick whose matchup has no master result yet still counts toward total.

    Args:
        brackets: Brackets of the cohort (only finalized ones are used)
        all_picks: Picks of any brackets
        master_results: Authoritative winners known so far
        all_matchups: Every matchup of the tree
        rounds: Rounds to report, always all of them even when empty

    Returns:
        One RoundAccuracy per round, in the order of rounds
    """
    eligible = finalized_bracket_ids(brackets)
    winners = winners_by_matchup(master_results)
    matchup_rounds = rounds_by_matchup(all_matchups)

    stats = {r: {'correct': 0, 'total': 0} for r in rounds}
    dropped = 0

    for pick in all_picks:
        if pick.bracket_id not in eligible:
            continue
        round_number = matchup_rounds.get(pick.matchup_id)
        if round_number not in stats:
            dropped += 1
            continue

        stats[round_number]['total'] += 1
        if winners.get(pick.matchup_id) == pick.picked_song_id:
            stats[round_number]['correct'] += 1

    if dropped:
        logger.debug(f"Ignored {dropped} finalized picks outside rounds {list(rounds)}")

    return [
        RoundAccuracy(
            round=r,
            correct=stats[r]['correct'],
            total=stats[r]['total'],
            accuracy=stats[r]['correct'] / stats[r]['total'] if stats[r]['total'] > 0 else 0.0,
        )
        for r in rounds
    ]


def accuracy_frame(accuracies: Iterable[RoundAccuracy]) -> pd.DataFrame:
    """Tabulate round accuracy; accuracy_pct is a whole percentage, halves rounded up."""
    df = pd.DataFrame(
        [(a.round, a.correct, a.total, a.accuracy) for a in accuracies],
        columns=['round', 'correct', 'total', 'accuracy'],
    )
    df['accuracy'] = df['accuracy'].astype(float)
    df['accuracy_pct'] = pd.Series(
        [whole_percent(c, t) for c, t in zip(df['correct'], df['total'])], index=df.index, dtype=int
    )
    return df
