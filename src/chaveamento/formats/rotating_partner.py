"""Rei da praia: individuals in groups of four, a new partner every round.

The top players of each group are formed into pairs for the knockout.
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

from typing import List, Sequence

from chaveamento.constants import (
    FORMAT_ROTATING_PARTNER,
    MIN_ROTATING_PLAYERS,
    ROTATING_GROUP_SIZE,
)
from chaveamento.exceptions import InvalidEntrantCount
from chaveamento.formats.base import FormatSpec
from chaveamento.models.entrant import Entrant
from chaveamento.pairing.schedules import ROTATING_PARTNER_TABLE
from chaveamento.pairing.seeding import snake_distribute
from chaveamento.type_hints import PairingTable
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


class RotatingPartnerFormat(FormatSpec):
    tag = FORMAT_ROTATING_PARTNER
    requires_knockout_pairs = True

    def validate_entrants(self, entrants: Sequence[Entrant]) -> None:
        count = len(entrants)
        if count < MIN_ROTATING_PLAYERS or count % ROTATING_GROUP_SIZE != 0:
            logger.error(f"Rei da praia stage with {count} players")
            raise InvalidEntrantCount(
                f"Rei da praia needs a multiple of {ROTATING_GROUP_SIZE} players "
                f"and at least {MIN_ROTATING_PLAYERS}, got {count}"
            )

    def partition(self, entrants: Sequence[Entrant]) -> List[List[Entrant]]:
        groups = len(entrants) // ROTATING_GROUP_SIZE
        return snake_distribute(
            self.placement_order(entrants), [ROTATING_GROUP_SIZE] * groups
        )

    def pairing_table(self, size: int) -> PairingTable:
        if size != ROTATING_GROUP_SIZE:
            raise InvalidEntrantCount(
                f"Rei da praia groups have {ROTATING_GROUP_SIZE} players, got {size}"
            )
        return ROTATING_PARTNER_TABLE
