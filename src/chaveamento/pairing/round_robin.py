"""Round robin tables built with the circle method."""

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

from typing import List, Optional, Tuple


def round_robin_rounds(n: int) -> List[List[Tuple[int, int]]]:
    """Split every unordered pair of ``n`` positions into rounds.

    Position 0 stays fixed while the others rotate one step per round. With
    an odd ``n`` a phantom position is added and whoever faces it rests.

    Parameters
    ----------
    n : int
        Number of positions in the group.

    Returns
    -------
    list of list of tuple
        ``n - 1`` rounds (``n`` when odd) of ``(low, high)`` position pairs.
    """
    if n < 2:
        return []

    positions: List[Optional[int]] = list(range(n))
    if n % 2 != 0:
        positions.append(None)

    half = len(positions) // 2
    rounds = []
    for _ in range(len(positions) - 1):
        left = positions[:half]
        right = positions[half:][::-1]
        round_pairs = []
        for a, b in zip(left, right):
            if a is None or b is None:
                continue
            round_pairs.append((min(a, b), max(a, b)))
        rounds.append(round_pairs)
        positions = [positions[0]] + [positions[-1]] + positions[1:-1]

    return rounds


def partner_rotation_rounds(n: int) -> List[List[Tuple[int, int]]]:
    """1-factorisation of the complete graph on ``n`` players.

    Every round splits all ``n`` players into partnerships and, across the
    ``n - 1`` rounds, each unordered pair of players partners exactly once.

    Raises
    ------
    ValueError
        If ``n`` is not a positive even number.
    """
    if n < 2 or n % 2 != 0:
        raise ValueError(f"Partner rotation needs an even number of players, got {n}")

    last = n - 1
    rounds = []
    for r in range(last):
        partnerships = [(r, last)]
        for k in range(1, n // 2):
            a = (r + k) % last
            b = (r - k) % last
            partnerships.append((min(a, b), max(a, b)))
        rounds.append(partnerships)
    return rounds
