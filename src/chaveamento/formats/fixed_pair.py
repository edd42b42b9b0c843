"""Dupla fixa: fixed pairs, registered together or drawn from individual
players, play a round robin in groups."""

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
from typing import List, Sequence

from chaveamento.constants import (
    FORMAT_FIXED_PAIR,
    MIN_ENTRANTS_PER_GROUP,
    PAIR_FORMATION_DRAW,
)
from chaveamento.exceptions import InvalidEntrantCount
from chaveamento.formats.base import FormatSpec
from chaveamento.models.entrant import Entrant, EntrantKind
from chaveamento.pairing.pair_formation import draw_pairs
from chaveamento.pairing.schedules import single_entrant_table
from chaveamento.pairing.seeding import balanced_group_sizes, snake_distribute
from chaveamento.type_hints import PairingTable
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


class FixedPairFormat(FormatSpec):
    tag = FORMAT_FIXED_PAIR

    @property
    def forms_pairs(self) -> bool:
        return self.config.pair_formation == PAIR_FORMATION_DRAW

    def validate_entrants(self, entrants: Sequence[Entrant]) -> None:
        if self.forms_pairs:
            self._validate_players(entrants)
            return
        if len(entrants) < MIN_ENTRANTS_PER_GROUP:
            logger.error(f"Fixed pair stage with {len(entrants)} pairs")
            raise InvalidEntrantCount(
                f"At least {MIN_ENTRANTS_PER_GROUP} pairs are required, "
                f"got {len(entrants)}"
            )

    def _validate_players(self, players: Sequence[Entrant]) -> None:
        count = len(players)
        if count % 2 or count < 2 * MIN_ENTRANTS_PER_GROUP:
            logger.error(f"Fixed pair draw with {count} players")
            raise InvalidEntrantCount(
                f"Drawing pairs needs an even number of at least "
                f"{2 * MIN_ENTRANTS_PER_GROUP} players, got {count}"
            )

    def prepare_entrants(
        self, entrants: Sequence[Entrant], id_prefix: str = ""
    ) -> List[Entrant]:
        """Draw the pairs when players registered individually."""
        if not self.forms_pairs:
            return list(entrants)

        drawn = draw_pairs(
            entrants, self.rng() or random.Random(), self.config.previous_pairs
        )
        pairs = [
            self._make_pair(index, first, second, id_prefix)
            for index, (first, second) in enumerate(drawn, start=1)
        ]
        logger.info(f"Drew {len(pairs)} pairs from {len(entrants)} players")
        return pairs

    def _make_pair(
        self, index: int, first: Entrant, second: Entrant, id_prefix: str
    ) -> Entrant:
        pair_id = f"{id_prefix}:d{index}" if id_prefix else f"d{index}"
        return Entrant(
            id=pair_id,
            display_name=f"{first.display_name} / {second.display_name}",
            kind=EntrantKind.PAIR,
            seed=first.seed,
            registration_order=index,
            member_ids=(first.id, second.id),
        )

    def partition(self, entrants: Sequence[Entrant]) -> List[List[Entrant]]:
        sizes = balanced_group_sizes(len(entrants), self.config.group_size)
        logger.debug(f"{len(entrants)} pairs split into group sizes {sizes}")
        return snake_distribute(self.placement_order(entrants), sizes)

    def pairing_table(self, size: int) -> PairingTable:
        return single_entrant_table(size)
