"""Predefined elimination crossings for team stages.

Team stages with three to eight groups do not use the generic seeded
bracket; each group count has a fixed first round. A crossing lists the
first-round slots in bracket order, two consecutive slots playing each
other and every pair of matches feeding the same next-round match. A slot
is ``(group_rank, group_index)`` with a 0-based group index, or ``None``
for a BYE.
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

from typing import Dict, List, Optional, Tuple

CrossingSlot = Optional[Tuple[int, int]]

A, B, C, D, E, F, G, H = range(8)
BYE = None

# Qualifiers per group the crossings are drawn for
TEAM_CROSSING_CLASSIFIERS = 2

TEAM_CROSSINGS: Dict[int, List[CrossingSlot]] = {
    3: [
        (1, A), BYE, (1, C), (2, B),
        (1, B), BYE, (2, A), (2, C),
    ],
    4: [
        (1, A), (2, B), (1, C), (2, D),
        (1, B), (2, A), (1, D), (2, C),
    ],
    5: [
        (1, A), BYE, (2, B), (2, C), (1, E), BYE, (1, D), BYE,
        (1, B), BYE, (2, D), (2, E), (1, C), BYE, (2, A), BYE,
    ],
    6: [
        (1, A), BYE, (2, B), (2, C), (1, D), BYE, (1, E), (2, F),
        (1, B), BYE, (2, D), (2, A), (1, C), BYE, (1, F), (2, E),
    ],
    7: [
        (1, A), BYE, (1, E), (2, F), (1, C), (2, D), (1, G), (2, B),
        (1, B), BYE, (1, F), (2, E), (1, D), (2, C), (2, A), (2, G),
    ],
    8: [
        (1, A), (2, B), (1, C), (2, D), (1, E), (2, F), (1, G), (2, H),
        (1, B), (2, A), (1, D), (2, C), (1, F), (2, E), (1, H), (2, G),
    ],
}  # fmt: skip


def get_team_crossing(group_count: int) -> Optional[List[CrossingSlot]]:
    """First-round slots for ``group_count`` groups, ``None`` when the
    generic seeded bracket applies."""
    return TEAM_CROSSINGS.get(group_count)
