"""Group assignment for stages.

This module splits the confirmed entrants of a stage into groups following
the rules of the stage format.
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

from collections import Counter
from dataclasses import replace
from typing import List, Sequence

from chaveamento.constants import BYE_MARKER
from chaveamento.exceptions import DuplicateAssignment, ReservedEntrantId
from chaveamento.formats.base import FormatSpec
from chaveamento.models.entrant import Entrant
from chaveamento.models.group import Group
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


def group_id_for(id_prefix: str, ordinal: int) -> str:
    return f"{id_prefix}:g{ordinal}" if id_prefix else f"g{ordinal}"


class GroupAssignmentEngine:
    """Partitions entrants into groups.

    This class is responsible for:
    - Rejecting entrant lists referencing the same id twice or a reserved id
    - Delegating count checks and sizing to the stage format
    - Forming teams before placement for team stages
    - Producing groups whose entrants carry their group id
    """

    def assign_groups(
        self,
        entrants: Sequence[Entrant],
        format_spec: FormatSpec,
        id_prefix: str = "",
    ) -> List[Group]:
        """Create the groups of a stage.

        Args:
            entrants: Confirmed entrants (pairs or individual players)
            format_spec: Format selected for the stage
            id_prefix: Prefix of every generated id, usually the stage id

        Returns:
            Groups in ordinal order. The input entrants are not modified;
            groups hold copies with ``group_id`` set.

        Raises:
            DuplicateAssignment: An entrant id appears more than once
            ReservedEntrantId: An entrant uses the bye marker as its id
            InvalidEntrantCount: The count does not fit the format
            InvalidVariantSize: The count does not match a Super X variant
        """
        self._check_unique(entrants)
        format_spec.validate_entrants(entrants)

        prepared = format_spec.prepare_entrants(entrants, id_prefix)
        partitions = format_spec.partition(prepared)

        groups = []
        for ordinal, members in enumerate(partitions, start=1):
            group_id = group_id_for(id_prefix, ordinal)
            groups.append(
                Group(
                    id=group_id,
                    ordinal=ordinal,
                    format_tag=format_spec.tag,
                    entrants=[
                        replace(entrant, group_id=group_id) for entrant in members
                    ],
                )
            )
            logger.debug(
                f"{groups[-1].name}: {', '.join(e.display_name for e in members)}"
            )

        logger.info(
            f"{format_spec.name}: {len(prepared)} entrants in {len(groups)} groups "
            f"of sizes {[group.size for group in groups]}"
        )
        return groups

    def _check_unique(self, entrants: Sequence[Entrant]) -> None:
        counts = Counter(entrant.id for entrant in entrants)
        repeated = sorted(entrant_id for entrant_id, n in counts.items() if n > 1)
        if repeated:
            logger.error(f"Repeated entrants in roster: {repeated}")
            raise DuplicateAssignment(
                f"Entrants registered more than once: {', '.join(repeated)}"
            )
        if BYE_MARKER in counts:
            logger.error(f"Entrant id {BYE_MARKER!r} is reserved for bracket byes")
            raise ReservedEntrantId(
                f"Entrant id {BYE_MARKER!r} is reserved for bracket byes"
            )
