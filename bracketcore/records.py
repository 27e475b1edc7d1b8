"""
Bracket Records

Immutable record types shared by every component, plus the helpers that
turn tabular data into a snapshot of records:
- Season, Matchup, Song, Pick, Bracket, MasterResult
- Snapshot: one consistent bundle of records handed to the core
- Lookups shared by scoring and analytics

Usage:
    from bracketcore.records import load_snapshot, resolve_active_season
    snapshot = load_snapshot(Path("data/export_2025"))
    season = resolve_active_season(snapshot.seasons)
"""

from collections import Counter
from dataclasses import MISSING, dataclass, field, fields
from pathlib import Path
from typing import Any, Iterable, Optional

import pandas as pd

from bracketcore.config import SNAPSHOT_FILES
from bracketcore.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


class BracketDataError(Exception):
    """Base exception for bad bracket records"""
    pass


class SnapshotValidationError(BracketDataError):
    """Critical problems in a snapshot of records"""
    pass


class SeasonNotFoundError(BracketDataError):
    """Raised when no active season exists among the supplied records"""
    pass


@dataclass(frozen=True)
class Season:
    id: str
    name: str
    is_active: bool = False
    archived: bool = False


@dataclass(frozen=True)
class Matchup:
    """One node of the single-elimination tree."""
    id: str
    season_id: str
    round: int                        # 1..N
    matchup_number: int               # 1-based, unique within a round
    song1_id: Optional[str] = None    # None until feeder results exist (round > 1)
    song2_id: Optional[str] = None


@dataclass(frozen=True)
class Song:
    id: str
    season_id: str
    title: str
    artist: str
    media_link: Optional[str] = None


@dataclass(frozen=True)
class Pick:
    id: str
    bracket_id: str
    matchup_id: str
    picked_song_id: str


@dataclass(frozen=True)
class Bracket:
    """A participant's full set of predictions for one season."""
    id: str
    participant_id: str
    season_id: str
    finalized: bool = False  # One-way latch, enforced outside the core
    points: int = 0


@dataclass(frozen=True)
class MasterResult:
    id: str
    season_id: str
    matchup_id: str
    winner_song_id: str


# Record name -> record type, keyed like SNAPSHOT_FILES
RECORD_TYPES = {
    "seasons": Season,
    "matchups": Matchup,
    "songs": Song,
    "brackets": Bracket,
    "picks": Pick,
    "master_results": MasterResult,
}

_INT_FIELDS = frozenset({"round", "matchup_number", "points"})
_BOOL_FIELDS = frozenset({"is_active", "archived", "finalized"})
_TRUE_STRINGS = frozenset({"true", "t", "1", "yes", "y"})


@dataclass(frozen=True)
class Snapshot:
    """A consistent, read-only view of every record the core works on."""
    seasons: tuple[Season, ...] = ()
    matchups: tuple[Matchup, ...] = ()
    songs: tuple[Song, ...] = ()
    brackets: tuple[Bracket, ...] = ()
    picks: tuple[Pick, ...] = ()
    master_results: tuple[MasterResult, ...] = ()
    _picks_by_bracket: dict = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        by_bracket: dict[str, list[Pick]] = {}
        for pick in self.picks:
            by_bracket.setdefault(pick.bracket_id, []).append(pick)
        object.__setattr__(self, '_picks_by_bracket', {k: tuple(v) for k, v in by_bracket.items()})

    def picks_for_bracket(self, bracket_id: str) -> tuple[Pick, ...]:
        return self._picks_by_bracket.get(bracket_id, ())

    def for_season(self, season_id: str) -> "Snapshot":
        """Return the records belonging to one season (seasons list is kept whole)."""
        brackets = tuple(b for b in self.brackets if b.season_id == season_id)
        bracket_ids = {b.id for b in brackets}
        return Snapshot(
            seasons=self.seasons,
            matchups=tuple(m for m in self.matchups if m.season_id == season_id),
            songs=tuple(s for s in self.songs if s.season_id == season_id),
            brackets=brackets,
            picks=tuple(p for p in self.picks if p.bracket_id in bracket_ids),
            master_results=tuple(r for r in self.master_results if r.season_id == season_id),
        )


# --- Season Resolution ---
def resolve_active_season(seasons: Iterable[Season]) -> Season | None:
    """Return the first season with is_active set, or None if there is none."""
    return next((season for season in seasons if season.is_active), None)


def require_active_season(seasons: Iterable[Season]) -> Season:
    """
    Like resolve_active_season(), for callers that treat a missing season as an error.

    Raises:
        SeasonNotFoundError: If no season is active
    """
    season = resolve_active_season(seasons)
    if season is None:
        raise SeasonNotFoundError("No active season found among the supplied seasons")
    return season


# --- Shared Lookups ---
def winners_by_matchup(master_results: Iterable[MasterResult]) -> dict[str, str]:
    """Map matchup id -> winning song id. A later result for the same matchup wins."""
    return {result.matchup_id: result.winner_song_id for result in master_results}


def rounds_by_matchup(matchups: Iterable[Matchup]) -> dict[str, int]:
    """Map matchup id -> round number."""
    return {matchup.id: matchup.round for matchup in matchups}


# --- Tabular Loading ---
def _coerce(name: str, value: Any) -> Any:
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return None
    if name in _BOOL_FIELDS:
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)
    if name in _INT_FIELDS:
        number = float(value)
        if not number.is_integer():
            raise ValueError(f"not a whole number: {value!r}")
        return int(number)
    return value


def records_from_frame(df: pd.DataFrame, record_type: type) -> tuple:
    """
    Convert DataFrame rows into immutable records.

    Extra columns are ignored; NaN becomes None, and integer/boolean fields
    are coerced (so CSV text like "false" or "2" or "2.0" works).

    Args:
        df: One row per record, columns named after the record fields
        record_type: One of the record dataclasses (Season, Matchup, ...)

    Returns:
        Tuple of record_type instances, in row order

    Raises:
        SnapshotValidationError: If a required column or value is missing,
            or an integer field holds something other than a whole number
    """
    record_fields = fields(record_type)
    required = [f.name for f in record_fields if f.default is MISSING]
    missing = [name for name in required if name not in df.columns]
    if missing:
        raise SnapshotValidationError(
            f"{record_type.__name__} data is missing columns: {', '.join(missing)}"
        )

    present = [f.name for f in record_fields if f.name in df.columns]
    records = []
    for i, row in enumerate(df[present].to_dict('records')):
        values = {}
        for name, value in row.items():
            try:
                values[name] = _coerce(name, value)
            except (TypeError, ValueError):
                raise SnapshotValidationError(
                    f"{record_type.__name__} row {i} has a non-integer {name}: {value!r}"
                ) from None
        empty = [name for name in required if values[name] is None]
        if empty:
            raise SnapshotValidationError(
                f"{record_type.__name__} row {i} has no value for: {', '.join(empty)}"
            )
        # Blank flags and counters fall back to their defaults
        values = {
            name: value for name, value in values.items()
            if value is not None or name not in _INT_FIELDS | _BOOL_FIELDS
        }
        records.append(record_type(**values))
    return tuple(records)


def snapshot_from_frames(frames: dict[str, pd.DataFrame]) -> Snapshot:
    """Build a Snapshot from DataFrames keyed like SNAPSHOT_FILES; missing keys stay empty."""
    unknown = set(frames) - set(RECORD_TYPES)
    if unknown:
        raise SnapshotValidationError(f"Unknown record types: {', '.join(sorted(unknown))}")

    return Snapshot(**{
        name: records_from_frame(df, RECORD_TYPES[name])
        for name, df in frames.items()
    })


def load_snapshot(folder: Path) -> Snapshot:
    """
    Load a snapshot from the CSV files named in SNAPSHOT_FILES.

    Every column is read as text so identifiers keep their exact form.
    A missing file means no records of that type.

    Args:
        folder: Folder holding seasons.csv, matchups.csv, ...

    Returns:
        Snapshot with every record found
    """
    frames = {}
    for name, filename in SNAPSHOT_FILES.items():
        path = folder / filename
        if not path.exists():
            logger.warning(f"Snapshot file not found, treating as empty: {path}")
            continue
        frames[name] = pd.read_csv(path, dtype=str)
        logger.info(f"Loaded {len(frames[name])} {name} records from {path}")

    return snapshot_from_frames(frames)


# --- Validation ---
def validate_snapshot(snapshot: Snapshot) -> list[str]:
    """
    Validate the structural assumptions the core relies on.

    Args:
        snapshot: Records to check

    Returns:
        List of warning messages (empty if all validations pass)

    Raises:
        SnapshotValidationError: If critical validations fail
    """
    warnings = []

    # Matchup numbers must be unique within a (season, round)
    positions = Counter((m.season_id, m.round, m.matchup_number) for m in snapshot.matchups)
    duplicates = sorted(pos for pos, count in positions.items() if count > 1)
    if duplicates:
        raise SnapshotValidationError(f"Duplicate matchup positions (season, round, number): {duplicates}")

    # Master results must stay within their matchup's season
    matchup_seasons = {m.id: m.season_id for m in snapshot.matchups}
    for result in snapshot.master_results:
        season_id = matchup_seasons.get(result.matchup_id)
        if season_id is not None and season_id != result.season_id:
            raise SnapshotValidationError(
                f"Master result {result.id} is in season {result.season_id} "
                f"but its matchup belongs to season {season_id}"
            )

    active = [s.id for s in snapshot.seasons if s.is_active]
    if len(active) > 1:
        warnings.append(f"{len(active)} active seasons found, using the first: {active[0]}")

    # Rounds should be a dense range starting at 1
    rounds_per_season: dict[str, set[int]] = {}
    for m in snapshot.matchups:
        rounds_per_season.setdefault(m.season_id, set()).add(m.round)
    for season_id, rounds in sorted(rounds_per_season.items()):
        expected = set(range(1, max(rounds) + 1))
        if rounds != expected:
            warnings.append(f"Season {season_id} rounds are not dense: {sorted(rounds)}")

    pick_slots = Counter((p.bracket_id, p.matchup_id) for p in snapshot.picks)
    repeated = sum(1 for count in pick_slots.values() if count > 1)
    if repeated:
        warnings.append(f"Found {repeated} (bracket, matchup) slots with more than one pick")

    for message in warnings:
        logger.warning(message)

    return warnings
