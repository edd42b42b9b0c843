import pytest

from builders import ranked_groups
from chaveamento.constants import BYE_MARKER
from chaveamento.exceptions import (
    BracketStateException,
    GroupsIncomplete,
    HasResults,
    InsufficientGroups,
)
from chaveamento.models import MatchStatus, Qualifier


def _first_round(bracket):
    nodes = bracket.round_nodes(1)
    return [(nodes[i].occupant, nodes[i + 1].occupant) for i in range(0, len(nodes), 2)]


def _qualifier(entrant_id, group_id, rank=1, ordinal=1):
    return Qualifier(
        entrant_id=entrant_id,
        group_ids=frozenset({group_id}),
        group_rank=rank,
        group_ordinal=ordinal,
    )


def test_four_groups_of_two_qualifiers_fill_bracket_of_eight(builder):
    groups, standings = ranked_groups(
        [["a1", "a2", "a3"], ["b1", "b2", "b3"], ["c1", "c2", "c3"], ["d1", "d2", "d3"]]
    )

    bracket = builder.build_bracket(groups, standings, 2, "s1")

    assert bracket.size == 8
    assert _first_round(bracket) == [
        ("a1", "d2"),
        ("d1", "a2"),
        ("b1", "c2"),
        ("c1", "b2"),
    ]
    assert not any(node.is_bye for node in bracket.nodes)
    assert len(bracket.matches) == 4
    assert all(m.status == MatchStatus.SCHEDULED for m in bracket.matches.values())
    assert all(m.round_label == "quarterfinal" for m in bracket.matches.values())
    assert bracket.origins["a2"] == "2º Grupo A"


def test_five_qualifiers_get_three_byes_on_top_seeds(builder):
    groups, standings = ranked_groups([["a1", "a2", "a3"], ["b1", "b2", "b3"], ["c1"]])

    bracket = builder.build_bracket(groups, standings, 2, "s1")

    assert bracket.size == 8
    assert _first_round(bracket) == [
        ("a1", BYE_MARKER),
        ("a2", "b2"),
        ("b1", BYE_MARKER),
        ("c1", BYE_MARKER),
    ]
    bye_matches = [m for m in bracket.matches.values() if m.status == MatchStatus.BYE]
    assert len(bye_matches) == 3

    # bye winners moved up, and b1 v c1 is already playable
    assert [n.occupant for n in bracket.round_nodes(2)] == ["a1", None, "b1", "c1"]
    semifinal = bracket.matches[bracket.node(2, 2).match_id]
    assert semifinal.status == MatchStatus.SCHEDULED
    assert (semifinal.side_a, semifinal.side_b) == (("b1",), ("c1",))
    assert semifinal.round_label == "semifinal"


@pytest.mark.parametrize("count", range(2, 17))
def test_seed_monotonicity_and_byes_to_top_seeds(builder, count):
    qualifiers = [_qualifier(f"q{i}", f"g{i}", ordinal=i) for i in range(1, count + 1)]

    bracket = builder.build_bracket_from_seeds(qualifiers)

    first_round = bracket.round_nodes(1)
    byes = bracket.size - count
    opponent_of = {}
    for node in first_round:
        if not node.has_entrant:
            continue
        other = bracket.sibling(node)
        opponent_of[node.seed] = None if other.is_bye else other.seed

    assert sorted(s for s, o in opponent_of.items() if o is None) == list(
        range(1, byes + 1)
    )
    real = sorted((s, o) for s, o in opponent_of.items() if o is not None)
    for (seed, opponent), (_, next_opponent) in zip(real, real[1:]):
        assert opponent > next_opponent


def test_same_group_first_round_is_repaired(builder):
    qualifiers = [
        _qualifier("a1", "g1", 1, 1),
        _qualifier("b1", "g2", 1, 2),
        _qualifier("c1", "g3", 1, 3),
        _qualifier("a2", "g1", 2, 1),
    ]

    bracket = builder.build_bracket_from_seeds(qualifiers)

    assert _first_round(bracket) == [("a1", "c1"), ("b1", "a2")]


def test_unavoidable_same_group_match_is_kept(builder):
    qualifiers = [_qualifier("a1", "g1", 1), _qualifier("a2", "g1", 2)]

    bracket = builder.build_bracket_from_seeds(qualifiers)

    assert _first_round(bracket) == [("a1", "a2")]
    assert bracket.node(1, 0).phase == "final"


def test_incomplete_group_blocks_bracket(builder):
    groups, standings = ranked_groups([["a1", "a2"], ["b1", "b2"]])
    groups[1].is_complete = False

    with pytest.raises(GroupsIncomplete):
        builder.build_bracket(groups, standings)


def test_single_group_is_insufficient(builder):
    groups, standings = ranked_groups([["a1", "a2", "a3", "a4"]])

    with pytest.raises(InsufficientGroups):
        builder.build_bracket(groups, standings)


def _decide(recorder, builder, bracket, match, sets=((6, 2),)):
    recorder.record_sets(match, list(sets))
    return builder.advance_match(bracket, match)


def test_advancing_winners_to_champion(builder, recorder):
    groups, standings = ranked_groups([["a1", "a2"], ["b1", "b2"]])
    bracket = builder.build_bracket(groups, standings, 2, "s1")
    first, second = (bracket.matches[n.match_id] for n in bracket.round_nodes(1)[::2])

    assert _decide(recorder, builder, bracket, first) is None
    assert bracket.node(2, 0).occupant == "a1"

    final = _decide(recorder, builder, bracket, second, [(2, 6)])
    assert final is not None
    assert (final.side_a, final.side_b) == (("a1",), ("a2",))
    assert final.round_label == "final"
    assert final.id == "s1:ko:r2m1"

    assert _decide(recorder, builder, bracket, final, [(6, 4)]) is None
    assert bracket.champion_id == "a1"


def test_advancing_twice_is_a_no_op(builder, recorder):
    groups, standings = ranked_groups([["a1", "a2"], ["b1", "b2"]])
    bracket = builder.build_bracket(groups, standings)
    match = bracket.matches[bracket.node(1, 0).match_id]

    _decide(recorder, builder, bracket, match)
    before = bracket.to_dict()
    assert builder.advance_match(bracket, match) is None
    assert bracket.to_dict() == before


def test_advance_rejects_entrant_not_on_node(builder):
    groups, standings = ranked_groups([["a1", "a2"], ["b1", "b2"]])
    bracket = builder.build_bracket(groups, standings)

    with pytest.raises(BracketStateException):
        builder.advance_winner(bracket, bracket.node(1, 0), "b1")


def test_cancel_bracket_without_results(builder):
    groups, standings = ranked_groups([["a1", "a2"], ["b1", "b2"]])
    bracket = builder.build_bracket(groups, standings)
    match_ids = set(bracket.matches)

    removed = builder.cancel_bracket(bracket)

    assert set(removed) == match_ids
    assert bracket.is_empty
    assert bracket.matches == {}


def test_cancel_bracket_with_results_changes_nothing(builder, recorder):
    groups, standings = ranked_groups([["a1", "a2"], ["b1", "b2"]])
    bracket = builder.build_bracket(groups, standings)
    _decide(recorder, builder, bracket, bracket.matches[bracket.node(1, 0).match_id])
    before = bracket.to_dict()

    with pytest.raises(HasResults):
        builder.cancel_bracket(bracket)

    assert bracket.to_dict() == before
