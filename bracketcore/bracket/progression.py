"""
Bracket Progression Resolver

Works out which songs a participant may pick for a matchup. Round 1 offers
the matchup's two fixed songs; every later matchup offers whatever the
participant picked in its two feeder matchups, so a whole personal bracket
can be filled in before any real result is known.

Feeders are positional by default: matchup m of round r is fed by matchups
2m-1 and 2m of round r-1 in the same season. Irregular layouts pass an
explicit feeder table (matchup id -> feeder matchup ids) instead.

Usage:
    from bracketcore.bracket.progression import valid_options
    options = valid_options(matchup, snapshot.matchups, snapshot.picks_for_bracket(bracket.id))
"""

from typing import Iterable, Mapping, Optional, Sequence

from bracketcore.records import Matchup, MasterResult, Pick, winners_by_matchup
from bracketcore.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

FeederTable = Mapping[str, Sequence[str]]


def feeder_positions(matchup_number: int) -> tuple[int, int]:
    """Matchup numbers in the previous round that feed matchup_number."""
    return 2 * matchup_number - 1, 2 * matchup_number


def feeder_matchups(matchup: Matchup, all_matchups: Iterable[Matchup]) -> list[Matchup]:
    """
    Return the positional feeder matchups of a matchup, in bracket order.

    Feeders missing from all_matchups are skipped; round 1 has none.
    """
    if matchup.round <= 1:
        return []

    by_number = {
        m.matchup_number: m for m in all_matchups
        if m.season_id == matchup.season_id and m.round == matchup.round - 1
    }
    return [by_number[n] for n in feeder_positions(matchup.matchup_number) if n in by_number]


def build_feeder_table(all_matchups: Iterable[Matchup]) -> dict[str, tuple[str, ...]]:
    """
    Materialize the positional feeder arithmetic as an explicit table.

    Args:
        all_matchups: Every matchup of the tree

    Returns:
        Dict of matchup id -> feeder matchup ids (empty tuple for round 1)
    """
    all_matchups = list(all_matchups)
    return {
        m.id: tuple(f.id for f in feeder_matchups(m, all_matchups))
        for m in all_matchups
    }


def feeder_table_from_numbers(
    all_matchups: Iterable[Matchup],
    feed_map: Mapping[int, Sequence[int]],
) -> dict[str, tuple[str, ...]]:
    """
    Build a feeder table from a season-wide matchup-number layout.

    Printed brackets often number matchups 1..15 across the whole season
    and pair them in a non-positional order, e.g. {9: [1, 3], 10: [2, 4]}.

    Args:
        all_matchups: Matchups of one season
        feed_map: Matchup number -> numbers of the matchups feeding it

    Returns:
        Dict of matchup id -> feeder matchup ids; numbers with no matchup are skipped
    """
    all_matchups = list(all_matchups)
    by_number = {m.matchup_number: m for m in all_matchups}
    table = {}
    for m in all_matchups:
        feeders = feed_map.get(m.matchup_number, ())
        table[m.id] = tuple(by_number[n].id for n in feeders if n in by_number)
    return table


def _feeder_ids(matchup, all_matchups, feeders):
    if feeders is not None:
        return list(feeders.get(matchup.id, ()))
    return [m.id for m in feeder_matchups(matchup, all_matchups)]


def _fixed_songs(matchup):
    return [song_id for song_id in (matchup.song1_id, matchup.song2_id) if song_id]


def valid_options(
    matchup: Matchup,
    all_matchups: Iterable[Matchup],
    participant_picks: Iterable[Pick],
    feeders: Optional[FeederTable] = None,
) -> list[str]:
    """
    Get the song ids a participant may pick for a matchup right now.

    Round 1 returns the matchup's non-null songs regardless of picks. Later
    rounds return the participant's own pick in each feeder matchup, skipping
    feeders not picked yet. An empty list means the matchup is not choosable yet.

    Args:
        matchup: Matchup being picked
        all_matchups: Every matchup of the tree
        participant_picks: Picks of one bracket only
        feeders: Optional explicit feeder table overriding positional feeders

    Returns:
        Song ids without duplicates
    """
    if matchup.round == 1:
        return _fixed_songs(matchup)

    picked = {pick.matchup_id: pick.picked_song_id for pick in participant_picks}
    options = [picked[feeder_id] for feeder_id in _feeder_ids(matchup, all_matchups, feeders) if feeder_id in picked]
    return list(dict.fromkeys(options))


def valid_master_options(
    matchup: Matchup,
    all_matchups: Iterable[Matchup],
    master_results: Iterable[MasterResult],
    feeders: Optional[FeederTable] = None,
) -> list[str]:
    """
    Get the song ids an administrator may declare as the winner of a matchup.

    Same as valid_options(), but later rounds advance the master winners of
    the feeder matchups rather than a participant's picks.
    """
    if matchup.round == 1:
        return _fixed_songs(matchup)

    winners = winners_by_matchup(master_results)
    options = [winners[feeder_id] for feeder_id in _feeder_ids(matchup, all_matchups, feeders) if feeder_id in winners]
    return list(dict.fromkeys(options))


def is_pick_legal(
    song_id: str,
    matchup: Matchup,
    all_matchups: Iterable[Matchup],
    participant_picks: Iterable[Pick],
    feeders: Optional[FeederTable] = None,
) -> bool:
    """True if song_id is currently one of the valid options for the matchup."""
    return song_id in valid_options(matchup, all_matchups, participant_picks, feeders)


def stale_picks(
    all_matchups: Iterable[Matchup],
    participant_picks: Iterable[Pick],
    feeders: Optional[FeederTable] = None,
) -> list[Pick]:
    """
    Find picks that are no longer legal for their matchup.

    A pick goes stale when the participant changes an earlier-round pick and
    the song they had advanced is no longer offered downstream. Staleness
    cascades: a stale pick offers nothing to the rounds after it. Picks for
    matchups outside all_matchups cannot be checked and are ignored.

    Args:
        all_matchups: Every matchup of the tree
        participant_picks: Picks of one bracket only
        feeders: Optional explicit feeder table

    Returns:
        Stale picks, in the order given
    """
    all_matchups = list(all_matchups)
    participant_picks = list(participant_picks)
    matchups_by_id = {m.id: m for m in all_matchups}

    checkable = [p for p in participant_picks if p.matchup_id in matchups_by_id]
    checkable.sort(key=lambda p: matchups_by_id[p.matchup_id].round)

    kept: list[Pick] = []
    stale_ids = set()
    for pick in checkable:
        matchup = matchups_by_id[pick.matchup_id]
        if is_pick_legal(pick.picked_song_id, matchup, all_matchups, kept, feeders):
            kept.append(pick)
        else:
            stale_ids.add(pick.id)

    stale = [p for p in participant_picks if p.id in stale_ids]
    if stale:
        logger.debug(f"{len(stale)} of {len(participant_picks)} picks are stale")
    return stale


def is_bracket_complete(all_matchups: Iterable[Matchup], participant_picks: Iterable[Pick]) -> bool:
    """True when every matchup of the tree has a pick; brackets are only finalized once complete.

    An empty tree is never complete.
    """
    all_matchups = list(all_matchups)
    if not all_matchups:
        return False
    picked = {pick.matchup_id for pick in participant_picks}
    return all(m.id in picked for m in all_matchups)
