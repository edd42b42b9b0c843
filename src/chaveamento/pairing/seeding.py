"""Seeding helpers shared by group placement and bracket construction."""

# Chaveamento
# Copyright (C) 2025  Chaveamento developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import math
import random
from typing import List, Optional, Sequence, TypeVar

from chaveamento.constants import MIN_ENTRANTS_PER_GROUP
from chaveamento.models.entrant import Entrant

T = TypeVar("T")


def next_power_of_two(n: int) -> int:
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def bracket_seed_order(size: int) -> List[int]:
    """Seed numbers in bracket slot order for a power-of-two ``size``.

    Slot pairs play each other in the first round, so for 8 the order
    ``[1, 8, 4, 5, 2, 7, 3, 6]`` gives 1v8, 4v5, 2v7 and 3v6 and keeps the
    top seeds apart until the last rounds.
    """
    if size < 1 or size & (size - 1):
        raise ValueError(f"Bracket size must be a power of two, got {size}")
    if size == 1:
        return [1]

    previous = bracket_seed_order(size // 2)
    order = []
    for seed in previous:
        order.append(seed)
        order.append(size + 1 - seed)
    return order


def balanced_group_sizes(
    total: int, group_size: int, min_size: int = MIN_ENTRANTS_PER_GROUP
) -> List[int]:
    """Sizes of ``ceil(total / group_size)`` groups differing by at most one.

    The group count shrinks while the smallest group would fall under
    ``min_size``. Larger groups come first.
    """
    if total <= 0:
        return []
    count = math.ceil(total / group_size)
    while count > 1 and total // count < min_size:
        count -= 1
    base, extra = divmod(total, count)
    return [base + 1] * extra + [base] * (count - extra)


def snake_distribute(items: Sequence[T], sizes: Sequence[int]) -> List[List[T]]:
    """Deal ``items`` across groups back and forth, respecting ``sizes``.

    The first sweep goes A, B, C, the next C, B, A, so the strongest items
    end up one per group.
    """
    if len(items) != sum(sizes):
        raise ValueError(
            f"Cannot distribute {len(items)} items into groups totalling {sum(sizes)}"
        )

    groups: List[List[T]] = [[] for _ in sizes]
    order = list(range(len(sizes)))
    placed = 0
    forward = True
    while placed < len(items):
        sweep = order if forward else order[::-1]
        for index in sweep:
            if placed < len(items) and len(groups[index]) < sizes[index]:
                groups[index].append(items[placed])
                placed += 1
        forward = not forward
    return groups


def seeded_order(
    entrants: Sequence[Entrant], rng: Optional[random.Random] = None
) -> List[Entrant]:
    """Seeded entrants by seed, then the unseeded ones.

    Unseeded entrants keep registration order unless ``rng`` is given, in
    which case they are shuffled with it.
    """
    seeded = sorted((e for e in entrants if e.is_seeded), key=lambda e: e.seeding_key)
    unseeded = sorted(
        (e for e in entrants if not e.is_seeded), key=lambda e: e.seeding_key
    )
    if rng is not None:
        rng.shuffle(unseeded)
    return seeded + unseeded
