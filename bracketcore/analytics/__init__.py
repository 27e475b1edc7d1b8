"""
Cohort Analytics

Modules:
- leaderboard: Ranked leaderboard assembly
- accuracy: Per-round accuracy of finalized brackets
- votes: Vote tallies and CSV export
"""


def __getattr__(name):
    """Lazy re-exports; submodules load on first use."""
    if name == "build_leaderboard":
        from bracketcore.analytics.leaderboard import build_leaderboard
        return build_leaderboard
    if name == "participant_rank":
        from bracketcore.analytics.leaderboard import participant_rank
        return participant_rank
    if name == "round_accuracy":
        from bracketcore.analytics.accuracy import round_accuracy
        return round_accuracy
    if name == "vote_counts":
        from bracketcore.analytics.votes import vote_counts
        return vote_counts
    if name == "export_votes_csv":
        from bracketcore.analytics.votes import export_votes_csv
        return export_votes_csv
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
