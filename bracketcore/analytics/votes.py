"""
Vote Tallies and Export

Counts how a cohort voted in each matchup and writes the tallies as CSV
for teachers to download.

Only finalized brackets are tallied for the export; the per-matchup
prediction distribution covers whichever brackets the caller passes in.

Usage:
    from bracketcore.analytics.votes import export_votes_csv
    text = export_votes_csv(brackets, picks, matchups, songs)
"""

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import pandas as pd

from bracketcore.config import (
    EXPORT_COLUMNS,
    EXPORT_FILENAME,
    EXPORT_FOLDER,
    MATCHUP_LABEL_FORMAT,
    SONG_LABEL_FORMAT,
)
from bracketcore.records import Bracket, Matchup, Pick, Song
from bracketcore.utils import atomic_write_csv, setup_logging, whole_percent

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class PredictionShare:
    song_id: str
    label: str
    count: int
    percentage: int  # Whole percent of the matchup's picks


def finalized_bracket_ids(brackets: Iterable[Bracket]) -> set[str]:
    return {bracket.id for bracket in brackets if bracket.finalized}


def song_label(song: Song) -> str:
    """Display label used in exports and charts, e.g. « Title » – Artist."""
    return SONG_LABEL_FORMAT.format(title=song.title, artist=song.artist)


def vote_counts(brackets: Iterable[Bracket], all_picks: Iterable[Pick]) -> dict[str, dict[str, int]]:
    """
    Count finalized votes per matchup.

    Args:
        brackets: Brackets of the cohort
        all_picks: Picks of any brackets

    Returns:
        Dict of matchup id -> {song id -> number of picks}
    """
    eligible = finalized_bracket_ids(brackets)

    counts: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for pick in all_picks:
        if pick.bracket_id in eligible:
            counts[pick.matchup_id][pick.picked_song_id] += 1

    return {matchup_id: dict(songs) for matchup_id, songs in counts.items()}


def prediction_distribution(
    matchup_id: str,
    brackets: Iterable[Bracket],
    all_picks: Iterable[Pick],
    songs: Iterable[Song],
) -> list[PredictionShare]:
    """
    Share of picks each song received in one matchup.

    Counts picks from every bracket passed in, finalized or not. Percentages
    are rounded half up to whole numbers, so they may not add up to 100.

    Returns:
        One PredictionShare per picked song, in order of first appearance
    """
    bracket_ids = {bracket.id for bracket in brackets}
    songs_by_id = {song.id: song for song in songs}

    counts: dict[str, int] = {}
    for pick in all_picks:
        if pick.matchup_id == matchup_id and pick.bracket_id in bracket_ids:
            counts[pick.picked_song_id] = counts.get(pick.picked_song_id, 0) + 1

    total = sum(counts.values())
    shares = []
    for song_id, count in counts.items():
        song = songs_by_id.get(song_id)
        shares.append(PredictionShare(
            song_id=song_id,
            label=song_label(song) if song else "Unknown",
            count=count,
            percentage=whole_percent(count, total),
        ))
    return shares


def votes_frame(
    brackets: Iterable[Bracket],
    all_picks: Iterable[Pick],
    matchups: Iterable[Matchup],
    songs: Iterable[Song],
) -> pd.DataFrame:
    """
    Build the vote export table.

    One row per matchup ordered by round then matchup number. Matchups that
    do not yet have both songs known are skipped.

    Returns:
        DataFrame with EXPORT_COLUMNS
    """
    counts = vote_counts(brackets, all_picks)
    songs_by_id = {song.id: song for song in songs}

    rows = []
    for matchup in sorted(matchups, key=lambda m: (m.round, m.matchup_number)):
        song1 = songs_by_id.get(matchup.song1_id)
        song2 = songs_by_id.get(matchup.song2_id)
        if song1 is None or song2 is None:
            continue

        matchup_votes = counts.get(matchup.id, {})
        rows.append([
            MATCHUP_LABEL_FORMAT.format(round=matchup.round, matchup_number=matchup.matchup_number),
            song_label(song1),
            matchup_votes.get(song1.id, 0),
            song_label(song2),
            matchup_votes.get(song2.id, 0),
        ])

    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_votes_csv(
    brackets: Iterable[Bracket],
    all_picks: Iterable[Pick],
    matchups: Iterable[Matchup],
    songs: Iterable[Song],
) -> str:
    """Render the vote export as CSV text (header row included)."""
    df = votes_frame(brackets, all_picks, matchups, songs)
    return df.to_csv(index=False, lineterminator="\n")


def write_votes_csv(
    brackets: Iterable[Bracket],
    all_picks: Iterable[Pick],
    matchups: Iterable[Matchup],
    songs: Iterable[Song],
    path: Path | None = None,
) -> Path:
    """
    Write the vote export to disk atomically.

    Args:
        path: Destination file (default: EXPORT_FOLDER / EXPORT_FILENAME)

    Returns:
        Path written
    """
    target = path or EXPORT_FOLDER / EXPORT_FILENAME
    df = votes_frame(brackets, all_picks, matchups, songs)
    atomic_write_csv(df, target, index=False, lineterminator="\n")
    logger.info(f"Exported votes for {len(df)} matchups to {target}")
    return target
