"""Pair formation for the rei da praia knockout.

Rei da praia groups rank individual players, but the knockout is played by
pairs. The qualifiers of every group are paired up here before the bracket
is seeded.
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

import random
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from chaveamento.constants import (
    KNOCKOUT_BEST_WITH_BEST,
    KNOCKOUT_PAIRINGS,
    KNOCKOUT_RANDOM_DRAW,
    KNOCKOUT_RANKING_CROSS,
)
from chaveamento.exceptions import (
    InsufficientGroups,
    InvalidConfiguration,
    InvalidEntrantCount,
)
from chaveamento.models.bracket import Qualifier
from chaveamento.models.entrant import Entrant, EntrantKind
from chaveamento.models.standing import Standing
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)

QualifierPair = Tuple[Qualifier, Qualifier]


class KnockoutPairBuilder:
    """Forms knockout pairs from individually ranked qualifiers.

    Modes:
    - ``best_with_best``: group winners partner each other, best first; an
      odd winner out takes the best runner-up; runners-up pair among
      themselves.
    - ``ranking_cross``: the i-th best group winner partners the i-th best
      runner-up.
    - ``random_draw``: a seeded draw where players from the same group do
      not partner whenever another partner is still available.

    Performance across groups compares points, wins, game differential and
    set differential, then the group ordinal.
    """

    def __init__(
        self, mode: str = KNOCKOUT_BEST_WITH_BEST, rng: Optional[random.Random] = None
    ):
        if mode not in KNOCKOUT_PAIRINGS:
            raise InvalidConfiguration(f"Unknown knockout pairing '{mode}'")
        self.mode = mode
        self.rng = rng or random.Random()

    def build_pairs(
        self,
        qualifiers: Sequence[Qualifier],
        standings: Mapping[str, Standing],
        players: Mapping[str, Entrant],
        id_prefix: str = "",
    ) -> Tuple[List[Entrant], List[Qualifier]]:
        """Pair individual qualifiers.

        Args:
            qualifiers: Individual qualifiers from the group phase
            standings: Final standing of every qualifier by entrant id
            players: Player entrants by id, for names
            id_prefix: Prefix of the formed pair ids

        Returns:
            The formed pair entrants and their qualifiers, both in seed
            order (formation order)

        Raises:
            InvalidEntrantCount: Odd number of qualifiers
            InsufficientGroups: Fewer than two pairs can be formed
        """
        if len(qualifiers) % 2 != 0:
            raise InvalidEntrantCount(
                f"Knockout pairs need an even number of qualifiers, got {len(qualifiers)}"
            )
        if len(qualifiers) < 4:
            raise InsufficientGroups(
                f"At least 4 qualifiers are needed to form 2 pairs, got {len(qualifiers)}"
            )

        if self.mode == KNOCKOUT_RANKING_CROSS:
            pairs = self._ranking_cross(qualifiers, standings)
        elif self.mode == KNOCKOUT_RANDOM_DRAW:
            pairs = self._random_draw(qualifiers)
        else:
            pairs = self._best_with_best(qualifiers, standings)

        entrants = []
        pair_qualifiers = []
        for index, (first, second) in enumerate(pairs, start=1):
            entrant, qualifier = self._make_pair(
                index, first, second, players, id_prefix
            )
            entrants.append(entrant)
            pair_qualifiers.append(qualifier)
            logger.debug(f"Knockout pair {index}: {entrant.display_name}")

        logger.info(f"Formed {len(entrants)} knockout pairs ({self.mode})")
        return entrants, pair_qualifiers

    def _performance_key(
        self, qualifier: Qualifier, standings: Mapping[str, Standing]
    ) -> Tuple[int, ...]:
        row = standings[qualifier.entrant_id]
        return (
            -row.points,
            -row.wins,
            -row.game_differential,
            -row.set_differential,
            qualifier.group_ordinal,
        )

    def _by_tier(
        self, qualifiers: Sequence[Qualifier], standings: Mapping[str, Standing]
    ) -> List[Qualifier]:
        return sorted(
            qualifiers,
            key=lambda q: (q.group_rank,) + self._performance_key(q, standings),
        )

    def _best_with_best(
        self, qualifiers: Sequence[Qualifier], standings: Mapping[str, Standing]
    ) -> List[QualifierPair]:
        ordered = self._by_tier(qualifiers, standings)
        return [(ordered[i], ordered[i + 1]) for i in range(0, len(ordered), 2)]

    def _ranking_cross(
        self, qualifiers: Sequence[Qualifier], standings: Mapping[str, Standing]
    ) -> List[QualifierPair]:
        ordered = self._by_tier(qualifiers, standings)
        leaders = [q for q in ordered if q.group_rank == 1]
        others = [q for q in ordered if q.group_rank != 1]

        pairs = list(zip(leaders, others))
        # unequal tiers (e.g. one classifier per group) pair what is left in order
        rest = leaders[len(pairs) :] + others[len(pairs) :]
        pairs.extend((rest[i], rest[i + 1]) for i in range(0, len(rest), 2))
        return pairs

    def _random_draw(self, qualifiers: Sequence[Qualifier]) -> List[QualifierPair]:
        pool = list(qualifiers)
        self.rng.shuffle(pool)

        pairs = []
        while pool:
            first = pool.pop(0)
            partner_index = next(
                (i for i, q in enumerate(pool) if not q.shares_group_with(first)),
                0,
            )
            pairs.append((first, pool.pop(partner_index)))
        return pairs

    def _make_pair(
        self,
        index: int,
        first: Qualifier,
        second: Qualifier,
        players: Mapping[str, Entrant],
        id_prefix: str,
    ) -> Tuple[Entrant, Qualifier]:
        names: Dict[str, str] = {
            pid: players[pid].display_name if pid in players else pid
            for pid in (first.entrant_id, second.entrant_id)
        }
        pair_id = f"{id_prefix}:kp{index}" if id_prefix else f"kp{index}"
        entrant = Entrant(
            id=pair_id,
            display_name=f"{names[first.entrant_id]} / {names[second.entrant_id]}",
            kind=EntrantKind.PAIR,
            seed=index,
            registration_order=index,
            member_ids=(first.entrant_id, second.entrant_id),
        )
        qualifier = Qualifier(
            entrant_id=pair_id,
            group_ids=first.group_ids | second.group_ids,
            group_rank=min(first.group_rank, second.group_rank),
            group_ordinal=min(first.group_ordinal, second.group_ordinal),
            origin=f"{first.origin} + {second.origin}",
        )
        return entrant, qualifier
