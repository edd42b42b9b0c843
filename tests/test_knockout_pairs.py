import random

import pytest

from chaveamento.exceptions import (
    InsufficientGroups,
    InvalidConfiguration,
    InvalidEntrantCount,
)
from chaveamento.models import Entrant, EntrantKind, Qualifier, Standing
from chaveamento.tournament import KnockoutPairBuilder


def _setup(rows):
    """rows: (player id, group ordinal, rank, points, game differential)"""
    qualifiers = []
    standings = {}
    players = {}
    for player_id, ordinal, rank, points, differential in rows:
        group_id = f"g{ordinal}"
        qualifiers.append(
            Qualifier(
                entrant_id=player_id,
                group_ids=frozenset({group_id}),
                group_rank=rank,
                group_ordinal=ordinal,
                origin=f"{rank}º {group_id}",
            )
        )
        standings[player_id] = Standing(
            entrant_id=player_id,
            group_id=group_id,
            points=points,
            wins=points // 3,
            games_for=10 + differential,
            games_against=10,
            rank=rank,
        )
        players[player_id] = Entrant(id=player_id, display_name=player_id.upper())
    return qualifiers, standings, players


TWO_GROUPS = [
    ("a1", 1, 1, 9, 10),
    ("b1", 2, 1, 9, 5),
    ("a2", 1, 2, 6, 2),
    ("b2", 2, 2, 6, 4),
]

THREE_GROUPS = [
    ("a1", 1, 1, 9, 3),
    ("b1", 2, 1, 9, 8),
    ("c1", 3, 1, 6, 1),
    ("a2", 1, 2, 6, 5),
    ("b2", 2, 2, 3, 0),
    ("c2", 3, 2, 6, 2),
]


def _members(entrants):
    return [e.member_ids for e in entrants]


def test_best_with_best_pairs_group_winners():
    qualifiers, standings, players = _setup(TWO_GROUPS)

    entrants, pair_qualifiers = KnockoutPairBuilder("best_with_best").build_pairs(
        qualifiers, standings, players, "s1"
    )

    assert _members(entrants) == [("a1", "b1"), ("b2", "a2")]
    assert entrants[0].id == "s1:kp1"
    assert entrants[0].display_name == "A1 / B1"
    assert entrants[0].kind == EntrantKind.PAIR
    assert [q.entrant_id for q in pair_qualifiers] == ["s1:kp1", "s1:kp2"]
    assert pair_qualifiers[0].group_ids == frozenset({"g1", "g2"})


def test_best_with_best_odd_winner_takes_best_runner_up():
    qualifiers, standings, players = _setup(THREE_GROUPS)

    entrants, _ = KnockoutPairBuilder("best_with_best").build_pairs(
        qualifiers, standings, players
    )

    assert _members(entrants) == [("b1", "a1"), ("c1", "a2"), ("c2", "b2")]


def test_ranking_cross_pairs_same_positions():
    qualifiers, standings, players = _setup(TWO_GROUPS)

    entrants, _ = KnockoutPairBuilder("ranking_cross").build_pairs(
        qualifiers, standings, players
    )

    assert _members(entrants) == [("a1", "b2"), ("b1", "a2")]


@pytest.mark.parametrize("seed", range(10))
def test_random_draw_keeps_group_mates_apart(seed):
    qualifiers, standings, players = _setup(TWO_GROUPS)

    entrants, pair_qualifiers = KnockoutPairBuilder(
        "random_draw", random.Random(seed)
    ).build_pairs(qualifiers, standings, players)

    assert sorted(p for e in entrants for p in e.member_ids) == ["a1", "a2", "b1", "b2"]
    assert all(len(q.group_ids) == 2 for q in pair_qualifiers)


def test_random_draw_is_reproducible():
    qualifiers, standings, players = _setup(THREE_GROUPS)

    def draw():
        builder = KnockoutPairBuilder("random_draw", random.Random(42))
        return _members(builder.build_pairs(qualifiers, standings, players)[0])

    assert draw() == draw()


def test_odd_qualifier_count_is_rejected():
    qualifiers, standings, players = _setup(THREE_GROUPS[:5])

    with pytest.raises(InvalidEntrantCount):
        KnockoutPairBuilder().build_pairs(qualifiers, standings, players)


def test_two_qualifiers_cannot_form_a_bracket():
    qualifiers, standings, players = _setup(TWO_GROUPS[:2])

    with pytest.raises(InsufficientGroups):
        KnockoutPairBuilder().build_pairs(qualifiers, standings, players)


def test_unknown_mode_is_rejected():
    with pytest.raises(InvalidConfiguration):
        KnockoutPairBuilder("king_of_the_hill")
