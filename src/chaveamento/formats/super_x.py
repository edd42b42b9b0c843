"""Super X: a single group of 8 or 12 players rotating partners.

Nobody is eliminated; the group table decides the champion.
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

from chaveamento.constants import FORMAT_SUPER_X
from chaveamento.exceptions import InvalidVariantSize
from chaveamento.formats.base import FormatSpec
from chaveamento.models.entrant import Entrant
from chaveamento.models.group import Group
from chaveamento.pairing.schedules import get_super_x_schedule
from chaveamento.type_hints import PairingTable
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


class SuperXFormat(FormatSpec):
    tag = FORMAT_SUPER_X

    @property
    def variant(self) -> int:
        return self.config.super_x_variant or 0

    @property
    def name(self) -> str:
        return f"Super {self.variant}"

    def validate_entrants(self, entrants: Sequence[Entrant]) -> None:
        # raises for unsupported variants
        get_super_x_schedule(self.variant)
        if len(entrants) != self.variant:
            logger.error(f"{self.name} stage with {len(entrants)} players")
            raise InvalidVariantSize(
                f"{self.name} needs exactly {self.variant} players, "
                f"got {len(entrants)}"
            )

    def partition(self, entrants: Sequence[Entrant]) -> List[List[Entrant]]:
        return [self.placement_order(entrants)]

    def pairing_table(self, size: int) -> PairingTable:
        if size != self.variant:
            raise InvalidVariantSize(
                f"{self.name} group must have {self.variant} players, got {size}"
            )
        return get_super_x_schedule(size)

    def supports_elimination(self, groups: Sequence[Group]) -> bool:
        return False
