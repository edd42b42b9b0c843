"""Round robin scheduling of group matches."""

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

from typing import List

from chaveamento.formats.base import FormatSpec
from chaveamento.models.group import Group
from chaveamento.models.match import Match, MatchStatus
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


class RoundRobinScheduler:
    """Turns the pairing table of a format into the matches of a group."""

    def schedule(self, group: Group, format_spec: FormatSpec) -> List[Match]:
        """Generate every match of ``group``.

        Args:
            group: Group with its entrants in placement order
            format_spec: Format providing the pairing table

        Returns:
            Matches in round order, all scheduled and without score. Match
            ids depend only on the group id, round and position, so the same
            group always yields the same fixtures.
        """
        entrant_ids = group.entrant_ids
        table = format_spec.pairing_table(group.size)

        matches = []
        for round_number, fixtures in enumerate(table, start=1):
            for index, (side_a, side_b) in enumerate(fixtures, start=1):
                match = Match(
                    id=f"{group.id}:r{round_number}m{index}",
                    group_id=group.id,
                    round_label=format_spec.round_label(round_number),
                    round_number=round_number,
                    side_a=tuple(entrant_ids[i] for i in side_a),
                    side_b=tuple(entrant_ids[i] for i in side_b),
                    status=MatchStatus.SCHEDULED,
                )
                matches.append(match)
                logger.debug(
                    f"{match.id}: {' + '.join(match.side_a)} vs {' + '.join(match.side_b)}"
                )

        logger.info(
            f"Scheduled {len(matches)} matches in {len(table)} rounds for {group.name}"
        )
        return matches
