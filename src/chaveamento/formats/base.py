"""Base class for stage formats.

A format bundles the rules that differ between the stage variants: how many
entrants are acceptable, how they are split into groups, which pairing table
a group plays and whether a knockout follows.
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
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from chaveamento.constants import FORMAT_NAMES, MIN_QUALIFYING_GROUPS
from chaveamento.models.entrant import Entrant
from chaveamento.models.group import Group
from chaveamento.models.stage_config import StageConfig
from chaveamento.pairing.crossings import CrossingSlot
from chaveamento.pairing.seeding import seeded_order
from chaveamento.type_hints import PairingTable


class FormatSpec(ABC):
    """Capability set of one stage format."""

    tag: str = ""
    requires_knockout_pairs: bool = False
    forms_pairs: bool = False

    def __init__(self, config: StageConfig):
        self.config = config

    @property
    def name(self) -> str:
        return FORMAT_NAMES.get(self.tag, self.tag)

    @abstractmethod
    def validate_entrants(self, entrants: Sequence[Entrant]) -> None:
        """Raise a validation exception when ``entrants`` cannot be played."""

    def prepare_entrants(
        self, entrants: Sequence[Entrant], id_prefix: str = ""
    ) -> List[Entrant]:
        """Turn registrations into the entrants that are placed into groups."""
        return list(entrants)

    @abstractmethod
    def partition(self, entrants: Sequence[Entrant]) -> List[List[Entrant]]:
        """Split prepared entrants into groups, in group ordinal order."""

    @abstractmethod
    def pairing_table(self, size: int) -> PairingTable:
        """Fixtures of a group of ``size`` entrants as position indices."""

    def supports_elimination(self, groups: Sequence[Group]) -> bool:
        return len(groups) >= MIN_QUALIFYING_GROUPS

    def knockout_crossing(
        self, groups: Sequence[Group]
    ) -> Optional[List[CrossingSlot]]:
        """Predefined first round of the elimination, ``None`` for seeding."""
        return None

    def round_label(self, round_number: int) -> str:
        return f"Rodada {round_number}"

    def rng(self) -> Optional[random.Random]:
        """Random source for draws, ``None`` when no seed is configured."""
        if self.config.random_seed is None:
            return None
        return random.Random(self.config.random_seed)

    def placement_order(self, entrants: Sequence[Entrant]) -> List[Entrant]:
        return seeded_order(entrants, self.rng())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(tag={self.tag!r})"
