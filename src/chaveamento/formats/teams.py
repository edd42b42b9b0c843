"""Teams: players registered individually are formed into teams of 4 or 6.

Teams then play a round robin, in a single group or, from six teams on, in
groups sized like fixed pair groups.
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
from collections import Counter
from typing import Dict, List, Optional, Sequence

from chaveamento.constants import (
    FORMAT_TEAMS,
    MIN_TEAMS,
    TEAM_FORMATION_MANUAL,
    TEAM_FORMATION_RANDOM,
    TEAMS_GROUP_STAGE_THRESHOLD,
)
from chaveamento.exceptions import DuplicateAssignment, InvalidEntrantCount
from chaveamento.formats.base import FormatSpec
from chaveamento.models.entrant import Entrant, EntrantKind
from chaveamento.models.group import Group
from chaveamento.pairing.crossings import (
    TEAM_CROSSING_CLASSIFIERS,
    CrossingSlot,
    get_team_crossing,
)
from chaveamento.pairing.schedules import single_entrant_table
from chaveamento.pairing.seeding import (
    balanced_group_sizes,
    seeded_order,
    snake_distribute,
)
from chaveamento.type_hints import PairingTable
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


class TeamFormat(FormatSpec):
    tag = FORMAT_TEAMS

    @property
    def team_size(self) -> int:
        return self.config.team_size

    def validate_entrants(self, entrants: Sequence[Entrant]) -> None:
        count = len(entrants)
        if count % self.team_size != 0 or count // self.team_size < MIN_TEAMS:
            logger.error(f"Team stage with {count} players")
            raise InvalidEntrantCount(
                f"Teams of {self.team_size} need a multiple of {self.team_size} "
                f"players forming at least {MIN_TEAMS} teams, got {count}"
            )
        if self.config.team_formation == TEAM_FORMATION_MANUAL:
            self._validate_manual_teams(entrants)

    def _validate_manual_teams(self, entrants: Sequence[Entrant]) -> None:
        known = {entrant.id for entrant in entrants}
        assigned = [pid for team in self.config.manual_teams for pid in team]
        counts = Counter(assigned)

        repeated = sorted(pid for pid, n in counts.items() if n > 1)
        if repeated:
            raise DuplicateAssignment(
                f"Players assigned to more than one team: {', '.join(repeated)}"
            )
        unknown = sorted(set(assigned) - known)
        if unknown:
            raise DuplicateAssignment(
                f"Players not registered in the stage: {', '.join(unknown)}"
            )
        missing = sorted(known - set(assigned))
        if missing:
            raise DuplicateAssignment(
                f"Players left without a team: {', '.join(missing)}"
            )
        for index, team in enumerate(self.config.manual_teams, start=1):
            if len(team) != self.team_size:
                raise InvalidEntrantCount(
                    f"Team {index} has {len(team)} players, "
                    f"expected {self.team_size}"
                )

    def prepare_entrants(
        self, entrants: Sequence[Entrant], id_prefix: str = ""
    ) -> List[Entrant]:
        """Form the teams that take part in the groups."""
        formation = self.config.team_formation
        if formation == TEAM_FORMATION_MANUAL:
            by_id = {entrant.id: entrant for entrant in entrants}
            line_ups = [
                [by_id[pid] for pid in team] for team in self.config.manual_teams
            ]
        elif formation == TEAM_FORMATION_RANDOM:
            rng = self.rng() or random.Random()
            players = list(entrants)
            rng.shuffle(players)
            line_ups = [
                players[i : i + self.team_size]
                for i in range(0, len(players), self.team_size)
            ]
        else:
            # balanced: strongest players spread one per team
            team_count = len(entrants) // self.team_size
            line_ups = snake_distribute(
                seeded_order(entrants), [self.team_size] * team_count
            )

        teams = [
            self._make_team(index, members, id_prefix)
            for index, members in enumerate(line_ups, start=1)
        ]
        logger.info(
            f"Formed {len(teams)} teams of {self.team_size} ({formation} formation)"
        )
        return teams

    def _make_team(
        self, index: int, members: Sequence[Entrant], id_prefix: str
    ) -> Entrant:
        names: Dict[int, str] = dict(enumerate(self.config.team_names, start=1))
        team_id = f"{id_prefix}:t{index}" if id_prefix else f"t{index}"
        return Entrant(
            id=team_id,
            display_name=names.get(index, f"Time {index}"),
            kind=EntrantKind.TEAM,
            registration_order=index,
            member_ids=tuple(member.id for member in members),
        )

    def partition(self, entrants: Sequence[Entrant]) -> List[List[Entrant]]:
        if len(entrants) < TEAMS_GROUP_STAGE_THRESHOLD:
            return [list(entrants)]
        sizes = balanced_group_sizes(len(entrants), self.config.group_size)
        return snake_distribute(list(entrants), sizes)

    def knockout_crossing(
        self, groups: Sequence[Group]
    ) -> Optional[List[CrossingSlot]]:
        if self.config.classifiers_per_group != TEAM_CROSSING_CLASSIFIERS:
            return None
        return get_team_crossing(len(groups))

    def pairing_table(self, size: int) -> PairingTable:
        return single_entrant_table(size)
