"""Fixed pairing tables for the group formats.

Tables index players or entrants by their position inside the group
(0-based). Each round is a list of fixtures ``(side_a, side_b)`` where a side
is a tuple of positions.
"""

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

from typing import Dict

from chaveamento.constants import SUPER_8, SUPER_12, SUPPORTED_SUPER_X_VARIANTS
from chaveamento.exceptions import InvalidVariantSize
from chaveamento.pairing.round_robin import partner_rotation_rounds, round_robin_rounds
from chaveamento.type_hints import PairingTable

# Rei da Praia: A+B vs C+D, A+C vs B+D, A+D vs B+C
ROTATING_PARTNER_TABLE: PairingTable = [
    [((0, 1), (2, 3))],
    [((0, 2), (1, 3))],
    [((0, 3), (1, 2))],
]

SUPER_8_SCHEDULE: PairingTable = [
    # R1: A+B vs C+D, E+F vs G+H
    [((0, 1), (2, 3)), ((4, 5), (6, 7))],
    # R2: A+C vs B+D, E+G vs F+H
    [((0, 2), (1, 3)), ((4, 6), (5, 7))],
    # R3: A+D vs B+C, E+H vs F+G
    [((0, 3), (1, 2)), ((4, 7), (5, 6))],
    # R4: A+E vs B+F, C+G vs D+H
    [((0, 4), (1, 5)), ((2, 6), (3, 7))],
    # R5: A+F vs B+E, C+H vs D+G
    [((0, 5), (1, 4)), ((2, 7), (3, 6))],
    # R6: A+G vs B+H, C+E vs D+F
    [((0, 6), (1, 7)), ((2, 4), (3, 5))],
    # R7: A+H vs B+G, C+F vs D+E
    [((0, 7), (1, 6)), ((2, 5), (3, 4))],
]


def _rotation_schedule(players: int) -> PairingTable:
    """Pair consecutive partnerships of each rotation round into matches."""
    table: PairingTable = []
    for partnerships in partner_rotation_rounds(players):
        table.append(
            [
                (partnerships[i], partnerships[i + 1])
                for i in range(0, len(partnerships), 2)
            ]
        )
    return table


SUPER_12_SCHEDULE: PairingTable = _rotation_schedule(SUPER_12)

SUPER_X_SCHEDULES: Dict[int, PairingTable] = {
    SUPER_8: SUPER_8_SCHEDULE,
    SUPER_12: SUPER_12_SCHEDULE,
}


def get_super_x_schedule(variant: int) -> PairingTable:
    """Return the schedule of a Super X variant.

    Raises
    ------
    InvalidVariantSize
        If the variant has no table.
    """
    if variant not in SUPER_X_SCHEDULES:
        raise InvalidVariantSize(
            f"Super X variant must be one of {SUPPORTED_SUPER_X_VARIANTS}, got {variant}"
        )
    return SUPER_X_SCHEDULES[variant]


def single_entrant_table(size: int) -> PairingTable:
    """Full round robin where every side is one entrant (pairs or teams)."""
    return [
        [((a,), (b,)) for a, b in round_pairs]
        for round_pairs in round_robin_rounds(size)
    ]
