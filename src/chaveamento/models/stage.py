"""Stage (etapa) aggregate handed between the engine and its callers."""

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

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from chaveamento.models.bracket import Bracket
from chaveamento.models.entrant import Entrant
from chaveamento.models.group import Group
from chaveamento.models.match import Match
from chaveamento.models.stage_config import StageConfig
from chaveamento.models.standing import Standing


class StageState(Enum):
    """Progression of a stage through group play and elimination."""

    OPEN = "open"
    GROUPS_GENERATED = "groups_generated"
    GROUPS_COMPLETE = "groups_complete"
    ELIMINATION_GENERATED = "elimination_generated"
    FINISHED = "finished"


@dataclass
class Stage:
    """Everything the engine generated for one stage.

    Attributes
    ----------
    id : str
        Stage identifier, also the prefix of every generated id.
    config : StageConfig
        Format settings.
    entrants : list of Entrant
        Confirmed registrations (players or pairs).
    name : str
        Display name.
    state : StageState
        Current position in the stage state machine.
    teams : list of Entrant
        Teams formed from registered players (team stages only).
    pairs : list of Entrant
        Pairs drawn from registered players (fixed pair draw only).
    groups : list of Group
        Generated groups in ordinal order.
    matches : dict
        Group matches by id, in generation order.
    standings : dict
        Current standings per group id.
    knockout_entrants : list of Entrant
        Pairs formed from rotating partner qualifiers for the knockout.
    bracket : Bracket, optional
        Elimination bracket once generated.
    champion_id : str, optional
        Winner of the stage once finished.
    lock : threading.RLock
        Serialises mutating operations on this stage.
    """

    id: str
    config: StageConfig
    entrants: List[Entrant] = field(default_factory=list)
    name: str = ""
    state: StageState = StageState.OPEN
    teams: List[Entrant] = field(default_factory=list)
    pairs: List[Entrant] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    matches: Dict[str, Match] = field(default_factory=dict)
    standings: Dict[str, List[Standing]] = field(default_factory=dict)
    knockout_entrants: List[Entrant] = field(default_factory=list)
    bracket: Optional[Bracket] = None
    champion_id: Optional[str] = None
    lock: Any = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def get_group(self, group_id: str) -> Optional[Group]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def group_matches(self, group_id: str) -> List[Match]:
        return [m for m in self.matches.values() if m.group_id == group_id]

    def all_matches(self) -> List[Match]:
        """Group matches followed by elimination matches."""
        matches = list(self.matches.values())
        if self.bracket is not None:
            matches.extend(self.bracket.matches.values())
        return matches

    def find_match(self, match_id: str) -> Optional[Match]:
        """Look a match up among group and elimination matches and the games
        of team fixtures."""
        match = self.matches.get(match_id)
        if match is None and self.bracket is not None:
            match = self.bracket.matches.get(match_id)
        if match is not None:
            return match
        for fixture in self.all_matches():
            for game in fixture.sub_matches:
                if game.id == match_id:
                    return game
        return None

    def entrant_lookup(self) -> Dict[str, Entrant]:
        """Every entrant known to the stage by id."""
        lookup = {e.id: e for e in self.entrants}
        lookup.update({t.id: t for t in self.teams})
        lookup.update({p.id: p for p in self.pairs})
        lookup.update({p.id: p for p in self.knockout_entrants})
        for group in self.groups:
            lookup.update({e.id: e for e in group.entrants})
        return lookup

    def display_name(self, entrant_id: Optional[str]) -> str:
        if entrant_id is None:
            return "-"
        entrant = self.entrant_lookup().get(entrant_id)
        return entrant.display_name if entrant else entrant_id

    @property
    def has_group_results(self) -> bool:
        return any(
            game.has_result
            for m in self.matches.values()
            for game in [m] + m.sub_matches
        )

    @property
    def is_single_group(self) -> bool:
        return len(self.groups) == 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize stage to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "config": self.config.to_dict(),
            "state": self.state.value,
            "entrants": [e.to_dict() for e in self.entrants],
            "teams": [t.to_dict() for t in self.teams],
            "pairs": [p.to_dict() for p in self.pairs],
            "groups": [g.to_dict() for g in self.groups],
            "matches": [m.to_dict() for m in self.matches.values()],
            "standings": {
                group_id: [s.to_dict() for s in rows]
                for group_id, rows in self.standings.items()
            },
            "knockout_entrants": [p.to_dict() for p in self.knockout_entrants],
            "bracket": self.bracket.to_dict() if self.bracket else None,
            "champion_id": self.champion_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Stage":
        """Deserialize stage from dictionary."""
        matches = [Match.from_dict(m) for m in data.get("matches", [])]
        bracket = data.get("bracket")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            config=StageConfig.from_dict(data.get("config", {})),
            state=StageState(data.get("state", StageState.OPEN.value)),
            entrants=[Entrant.from_dict(e) for e in data.get("entrants", [])],
            teams=[Entrant.from_dict(t) for t in data.get("teams", [])],
            pairs=[Entrant.from_dict(p) for p in data.get("pairs", [])],
            groups=[Group.from_dict(g) for g in data.get("groups", [])],
            matches={m.id: m for m in matches},
            standings={
                group_id: [Standing.from_dict(s) for s in rows]
                for group_id, rows in data.get("standings", {}).items()
            },
            knockout_entrants=[
                Entrant.from_dict(p) for p in data.get("knockout_entrants", [])
            ],
            bracket=Bracket.from_dict(bracket) if bracket else None,
            champion_id=data.get("champion_id"),
        )
