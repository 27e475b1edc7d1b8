"""
Tests for bracket progression (valid pick options).
"""

from dataclasses import replace

from bracketcore.bracket.progression import (
    build_feeder_table,
    feeder_matchups,
    feeder_positions,
    feeder_table_from_numbers,
    is_bracket_complete,
    is_pick_legal,
    stale_picks,
    valid_master_options,
    valid_options,
)
from conftest import make_matchup, make_pick, make_result


def by_id(matchups, matchup_id):
    return next(m for m in matchups if m.id == matchup_id)


class TestRoundOneOptions:
    """Round 1 options come from the fixed tree only."""

    def test_returns_both_songs(self, matchups):
        assert set(valid_options(by_id(matchups, "r1m1"), matchups, [])) == {"song1", "song2"}

    def test_ignores_picks(self, matchups, chalk_picks):
        options = valid_options(by_id(matchups, "r1m2"), matchups, chalk_picks)
        assert set(options) == {"song3", "song4"}

    def test_skips_empty_slot(self):
        bye = make_matchup(1, 1, "song1", None)
        assert valid_options(bye, [bye], []) == ["song1"]

    def test_all_round_one_matchups(self, matchups, chalk_picks):
        for m in matchups:
            if m.round == 1:
                assert set(valid_options(m, matchups, chalk_picks)) == {m.song1_id, m.song2_id}


class TestLaterRoundOptions:
    """Later rounds offer the participant's own feeder picks."""

    def test_empty_without_feeder_picks(self, matchups):
        assert valid_options(by_id(matchups, "r2m1"), matchups, []) == []

    def test_single_feeder_picked(self, matchups):
        picks = [make_pick("b1", "r1m2", "song4")]
        assert valid_options(by_id(matchups, "r2m1"), matchups, picks) == ["song4"]

    def test_both_feeders_picked(self):
        # Two round-1 matchups (A vs B, C vs D) feeding round-2 matchup 1
        tree = [make_matchup(1, 1, "A", "B"), make_matchup(1, 2, "C", "D"), make_matchup(2, 1)]
        picks = [make_pick("b1", "r1m1", "A"), make_pick("b1", "r1m2", "D")]
        assert set(valid_options(tree[2], tree, picks)) == {"A", "D"}

    def test_uses_positional_feeders(self, matchups):
        # r2m2 is fed by r1m3 and r1m4, not by r1m1/r1m2
        picks = [make_pick("b1", "r1m1", "song1"), make_pick("b1", "r1m3", "song6")]
        assert valid_options(by_id(matchups, "r2m2"), matchups, picks) == ["song6"]

    def test_duplicates_coalesced(self, matchups):
        picks = [make_pick("b1", "r1m1", "song1"), make_pick("b1", "r1m2", "song1")]
        assert valid_options(by_id(matchups, "r2m1"), matchups, picks) == ["song1"]

    def test_other_season_feeders_ignored(self, matchups):
        other = replace(make_matchup(1, 1, "x1", "x2", season_id="s2"), id="other-r1m1")
        picks = [make_pick("b1", "other-r1m1", "x1")]
        assert valid_options(by_id(matchups, "r2m1"), matchups + [other], picks) == []

    def test_options_subset_of_feeder_picks(self, matchups, chalk_picks):
        picked = {p.matchup_id: p.picked_song_id for p in chalk_picks}
        for m in matchups:
            if m.round == 1:
                continue
            feeder_songs = {picked[f.id] for f in feeder_matchups(m, matchups)}
            assert set(valid_options(m, matchups, chalk_picks)) <= feeder_songs

    def test_final_offers_semifinal_picks(self, matchups, chalk_picks):
        assert set(valid_options(by_id(matchups, "r4m1"), matchups, chalk_picks)) == {"song1", "song9"}

    def test_idempotent(self, matchups, chalk_picks):
        m = by_id(matchups, "r3m2")
        assert valid_options(m, matchups, chalk_picks) == valid_options(m, matchups, chalk_picks)

    def test_advances_upset_pick(self, matchups):
        picks = [make_pick("b1", "r1m1", "song2")]
        assert valid_options(by_id(matchups, "r2m1"), matchups, picks) == ["song2"]


class TestFeeders:
    """Tests for positional and explicit feeder tables."""

    def test_feeder_positions(self):
        assert feeder_positions(1) == (1, 2)
        assert feeder_positions(3) == (5, 6)

    def test_round_one_has_no_feeders(self, matchups):
        assert feeder_matchups(by_id(matchups, "r1m1"), matchups) == []

    def test_build_feeder_table(self, matchups):
        table = build_feeder_table(matchups)
        assert table["r1m5"] == ()
        assert table["r2m3"] == ("r1m5", "r1m6")
        assert table["r4m1"] == ("r3m1", "r3m2")

    def test_printed_layout_table(self):
        # Season-wide numbering 1..3: matchup 3 is fed by 1 and 2 in reverse order
        tree = [
            make_matchup(1, 1, "A", "B"),
            make_matchup(1, 2, "C", "D"),
            make_matchup(2, 3),
        ]
        table = feeder_table_from_numbers(tree, {3: [2, 1]})
        assert table["r2m3"] == ("r1m2", "r1m1")
        assert table["r1m1"] == ()

        picks = [make_pick("b1", "r1m1", "B"), make_pick("b1", "r1m2", "C")]
        assert valid_options(tree[2], tree, picks, feeders=table) == ["C", "B"]

    def test_explicit_table_overrides_positions(self, matchups):
        table = {"r2m1": ("r1m7", "r1m8")}
        picks = [make_pick("b1", "r1m1", "song1"), make_pick("b1", "r1m8", "song16")]
        assert valid_options(by_id(matchups, "r2m1"), matchups, picks, feeders=table) == ["song16"]


class TestMasterOptions:
    """Master bracket options advance master winners."""

    def test_round_one(self, matchups):
        assert set(valid_master_options(by_id(matchups, "r1m8"), matchups, [])) == {"song15", "song16"}

    def test_uses_master_winners(self, matchups):
        results = [make_result("r1m1", "song2"), make_result("r1m2", "song3")]
        assert set(valid_master_options(by_id(matchups, "r2m1"), matchups, results)) == {"song2", "song3"}

    def test_empty_before_results(self, matchups):
        assert valid_master_options(by_id(matchups, "r3m1"), matchups, []) == []


class TestPickLegality:
    """Tests for is_pick_legal, stale_picks and is_bracket_complete."""

    def test_legal_pick(self, matchups, chalk_picks):
        assert is_pick_legal("song5", by_id(matchups, "r3m1"), matchups, chalk_picks)

    def test_illegal_pick(self, matchups, chalk_picks):
        assert not is_pick_legal("song3", by_id(matchups, "r3m1"), matchups, chalk_picks)

    def test_complete_bracket_has_no_stale_picks(self, matchups, chalk_picks):
        assert stale_picks(matchups, chalk_picks) == []

    def test_changed_round_one_pick_makes_downstream_stale(self, matchups, chalk_picks):
        changed = [p for p in chalk_picks if p.matchup_id != "r1m1"]
        changed.append(make_pick("b1", "r1m1", "song2"))

        stale = {p.matchup_id for p in stale_picks(matchups, changed)}
        # song1 was carried through r2m1, r3m1 and the final
        assert stale == {"r2m1", "r3m1", "r4m1"}

    def test_unknown_matchup_picks_ignored(self, matchups):
        assert stale_picks(matchups, [make_pick("b1", "nowhere", "song1")]) == []

    def test_bracket_complete(self, matchups, chalk_picks):
        assert is_bracket_complete(matchups, chalk_picks)

    def test_bracket_incomplete(self, matchups, chalk_picks):
        assert not is_bracket_complete(matchups, chalk_picks[:-1])

    def test_empty_bracket_incomplete(self, matchups):
        assert not is_bracket_complete(matchups, [])

    def test_empty_tree_never_complete(self):
        assert not is_bracket_complete([], [])
        assert not is_bracket_complete([], [make_pick("b1", "r1m1", "song1")])
