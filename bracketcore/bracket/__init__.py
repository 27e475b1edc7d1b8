"""
Bracket Logic

Modules:
- progression: Valid pick options derived from the tree and prior picks
- scoring: Round-weighted scoring against master results
"""


def __getattr__(name):
    """Lazy re-exports; submodules load on first use."""
    if name == "valid_options":
        from bracketcore.bracket.progression import valid_options
        return valid_options
    if name == "valid_master_options":
        from bracketcore.bracket.progression import valid_master_options
        return valid_master_options
    if name == "score":
        from bracketcore.bracket.scoring import score
        return score
    if name == "per_participant_scores":
        from bracketcore.bracket.scoring import per_participant_scores
        return per_participant_scores
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
