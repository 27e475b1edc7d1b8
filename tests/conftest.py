"""
Shared fixtures: one season with a complete 4-round, 16-song tree.

Matchup ids are "r{round}m{number}", song ids "song{n}"; round 1 matchup m
pairs song 2m-1 against song 2m.
"""

import pytest

from bracketcore.records import Bracket, MasterResult, Matchup, Pick, Season, Song


def make_matchup(round_number, number, song1=None, song2=None, season_id="s1"):
    return Matchup(
        id=f"r{round_number}m{number}",
        season_id=season_id,
        round=round_number,
        matchup_number=number,
        song1_id=song1,
        song2_id=song2,
    )


def make_pick(bracket_id, matchup_id, song_id):
    return Pick(
        id=f"{bracket_id}-{matchup_id}",
        bracket_id=bracket_id,
        matchup_id=matchup_id,
        picked_song_id=song_id,
    )


def make_result(matchup_id, song_id, season_id="s1"):
    return MasterResult(id=f"res-{matchup_id}", season_id=season_id, matchup_id=matchup_id, winner_song_id=song_id)


@pytest.fixture
def season():
    return Season(id="s1", name="Spring Showdown", is_active=True)


@pytest.fixture
def songs():
    return [
        Song(id=f"song{n}", season_id="s1", title=f"Song {n}", artist=f"Artist {n}")
        for n in range(1, 17)
    ]


@pytest.fixture
def matchups():
    tree = [make_matchup(1, m, f"song{2 * m - 1}", f"song{2 * m}") for m in range(1, 9)]
    for round_number, count in ((2, 4), (3, 2), (4, 1)):
        tree.extend(make_matchup(round_number, m) for m in range(1, count + 1))
    return tree


@pytest.fixture
def chalk_picks():
    """A complete bracket where the lower-numbered song always wins."""
    winners = {
        "r1m1": "song1", "r1m2": "song3", "r1m3": "song5", "r1m4": "song7",
        "r1m5": "song9", "r1m6": "song11", "r1m7": "song13", "r1m8": "song15",
        "r2m1": "song1", "r2m2": "song5", "r2m3": "song9", "r2m4": "song13",
        "r3m1": "song1", "r3m2": "song9",
        "r4m1": "song1",
    }
    return [make_pick("b1", matchup_id, song_id) for matchup_id, song_id in winners.items()]


@pytest.fixture
def chalk_results(chalk_picks):
    return [make_result(p.matchup_id, p.picked_song_id) for p in chalk_picks]


@pytest.fixture
def finalized_bracket():
    return Bracket(id="b1", participant_id="p1", season_id="s1", finalized=True)
