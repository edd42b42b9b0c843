from collections import Counter
from itertools import combinations

import pytest

from chaveamento.exceptions import InvalidVariantSize
from chaveamento.pairing import (
    ROTATING_PARTNER_TABLE,
    balanced_group_sizes,
    bracket_seed_order,
    get_super_x_schedule,
    next_power_of_two,
    partner_rotation_rounds,
    round_robin_rounds,
    snake_distribute,
)


@pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7, 8])
def test_round_robin_covers_every_pair_once(n):
    rounds = round_robin_rounds(n)
    pairs = [pair for round_pairs in rounds for pair in round_pairs]

    assert len(pairs) == n * (n - 1) // 2
    assert set(pairs) == set(combinations(range(n), 2))
    assert len(rounds) == (n - 1 if n % 2 == 0 else n)
    for round_pairs in rounds:
        seen = [position for pair in round_pairs for position in pair]
        assert len(seen) == len(set(seen))


def test_round_robin_of_one_is_empty():
    assert round_robin_rounds(1) == []


@pytest.mark.parametrize("n", [4, 8, 12])
def test_partner_rotation_pairs_everyone_once(n):
    rounds = partner_rotation_rounds(n)
    assert len(rounds) == n - 1

    partnerships = Counter(pair for round_pairs in rounds for pair in round_pairs)
    assert set(partnerships) == set(combinations(range(n), 2))
    assert set(partnerships.values()) == {1}
    for round_pairs in rounds:
        assert sorted(p for pair in round_pairs for p in pair) == list(range(n))


def test_partner_rotation_rejects_odd_counts():
    with pytest.raises(ValueError):
        partner_rotation_rounds(7)


def test_rotating_partner_table_is_canonical_k4_factorisation():
    partners = Counter()
    opponents = Counter()
    for (fixture,) in ROTATING_PARTNER_TABLE:
        side_a, side_b = fixture
        partners.update([frozenset(side_a), frozenset(side_b)])
        opponents.update(frozenset((a, b)) for a in side_a for b in side_b)

    all_pairs = {frozenset(p) for p in combinations(range(4), 2)}
    assert set(partners) == all_pairs
    assert set(partners.values()) == {1}
    assert set(opponents) == all_pairs
    assert set(opponents.values()) == {2}


@pytest.mark.parametrize("variant, rounds, per_round", [(8, 7, 2), (12, 11, 3)])
def test_super_x_partners_once_and_everyone_plays_each_round(variant, rounds, per_round):
    schedule = get_super_x_schedule(variant)
    assert len(schedule) == rounds

    partnerships = Counter()
    for fixtures in schedule:
        assert len(fixtures) == per_round
        players = [p for side_a, side_b in fixtures for p in side_a + side_b]
        assert sorted(players) == list(range(variant))
        for side_a, side_b in fixtures:
            partnerships.update([frozenset(side_a), frozenset(side_b)])

    assert set(partnerships) == {frozenset(p) for p in combinations(range(variant), 2)}
    assert set(partnerships.values()) == {1}


def test_super_8_first_round_matches_table():
    assert get_super_x_schedule(8)[0] == [((0, 1), (2, 3)), ((4, 5), (6, 7))]


def test_unsupported_super_x_variant():
    with pytest.raises(InvalidVariantSize):
        get_super_x_schedule(10)


def test_bracket_seed_order():
    assert bracket_seed_order(2) == [1, 2]
    assert bracket_seed_order(4) == [1, 4, 2, 3]
    assert bracket_seed_order(8) == [1, 8, 4, 5, 2, 7, 3, 6]
    with pytest.raises(ValueError):
        bracket_seed_order(6)


@pytest.mark.parametrize("size", [2, 4, 8, 16, 32])
def test_bracket_seed_order_pairs_sum_to_size_plus_one(size):
    order = bracket_seed_order(size)
    assert sorted(order) == list(range(1, size + 1))
    for i in range(0, size, 2):
        assert order[i] + order[i + 1] == size + 1


def test_next_power_of_two():
    assert [next_power_of_two(n) for n in (1, 2, 3, 5, 8, 9)] == [1, 2, 4, 8, 8, 16]


@pytest.mark.parametrize(
    "total, group_size, expected",
    [
        (8, 4, [4, 4]),
        (10, 4, [4, 3, 3]),
        (5, 4, [3, 2]),
        (3, 4, [3]),
        (7, 3, [3, 2, 2]),
        (5, 2, [3, 2]),
    ],
)
def test_balanced_group_sizes(total, group_size, expected):
    assert balanced_group_sizes(total, group_size) == expected


def test_snake_distribution():
    assert snake_distribute(list(range(8)), [4, 4]) == [[0, 3, 4, 7], [1, 2, 5, 6]]
    assert snake_distribute(list(range(8)), [3, 3, 2]) == [
        [0, 5, 6],
        [1, 4, 7],
        [2, 3],
    ]


def test_snake_distribution_rejects_wrong_total():
    with pytest.raises(ValueError):
        snake_distribute([1, 2, 3], [2, 2])
