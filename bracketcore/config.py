"""
Central configuration for the bracket prediction core.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_FOLDER = PROJECT_ROOT / "data"
EXPORT_FOLDER = DATA_FOLDER / "exports"

# --- Tournament Shape ---
TOURNAMENT_ROUNDS = 4  # 16 songs -> 8 + 4 + 2 + 1 matchups
ACCURACY_ROUNDS = (1, 2, 3, 4)  # Rounds reported by the cohort accuracy view

# --- Scoring Configuration ---
# Two weightings exist for a correct pick:
# - "fixed_table": ROUND_WEIGHTS below (1, 3, 5, 8)
# - "geometric":   2 ** (round - 1)  (1, 2, 4, 8)
# SCORING_SCHEME is the canonical one, used for totals, per-round
# breakdowns, leaderboards and stored bracket points alike.
SCORING_SCHEME = "fixed_table"
ALLOWED_SCORING_SCHEMES = frozenset({"fixed_table", "geometric"})
ROUND_WEIGHTS = {1: 1, 2: 3, 3: 5, 4: 8}

# --- Ranking Configuration ---
# "sequential":  1, 2, 3, 4 (tied scores still get distinct ranks)
# "competition": 1, 1, 3, 4
# "dense":       1, 1, 2, 3
RANKING_POLICY = "sequential"
ALLOWED_RANKING_POLICIES = frozenset({"sequential", "competition", "dense"})
UNRANKED = 0  # Rank reported for participants missing from a leaderboard
UNKNOWN_PARTICIPANT_NAME = "Unknown"

# --- Export Configuration ---
EXPORT_COLUMNS = ["Matchup", "Song A", "Song A Votes", "Song B", "Song B Votes"]
SONG_LABEL_FORMAT = "« {title} » – {artist}"
MATCHUP_LABEL_FORMAT = "Round {round}, Matchup {matchup_number}"
EXPORT_FILENAME = "bracket_votes.csv"

# --- Snapshot Files ---
# Record type name -> CSV file name used by records.load_snapshot()
SNAPSHOT_FILES = {
    "seasons": "seasons.csv",
    "matchups": "matchups.csv",
    "songs": "songs.csv",
    "brackets": "brackets.csv",
    "picks": "picks.csv",
    "master_results": "master_results.csv",
}
