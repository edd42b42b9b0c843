"""Elimination bracket stored as a flat arena of nodes.

Nodes are addressed by ``(round_number, slot)``. Slots ``2k`` and ``2k + 1``
of a round play each other and the winner moves to slot ``k`` of the next
round, so "advances-to" is an index computation rather than a reference.
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

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from chaveamento.constants import BYE_MARKER
from chaveamento.models.match import Match


def phase_label(slots: int) -> str:
    """Name of a bracket round holding ``slots`` entrants."""
    if slots == 2:
        return "final"
    if slots == 4:
        return "semifinal"
    if slots == 8:
        return "quarterfinal"
    return f"round_of_{slots}"


@dataclass
class Qualifier:
    """An entrant that earned a place in the elimination phase.

    Attributes
    ----------
    entrant_id : str
        Entrant occupying the bracket slot.
    group_ids : frozenset of str
        Groups the entrant comes from. Knockout pairs formed from two
        rotating-partner players carry both players' groups.
    group_rank : int
        Final rank inside the group (best rank for formed pairs).
    group_ordinal : int
        Ordinal of the source group (lowest for formed pairs).
    origin : str
        Label such as "1º Grupo A".
    """

    entrant_id: str
    group_ids: FrozenSet[str]
    group_rank: int
    group_ordinal: int
    origin: str = ""

    def shares_group_with(self, other: "Qualifier") -> bool:
        return bool(self.group_ids & other.group_ids)


@dataclass
class EliminationNode:
    """One bracket slot."""

    round_number: int
    slot: int
    phase: str
    occupant: Optional[str] = None
    match_id: Optional[str] = None
    seed: Optional[int] = None
    advances_to: Optional[Tuple[int, int]] = None

    @property
    def is_bye(self) -> bool:
        return self.occupant == BYE_MARKER

    @property
    def is_filled(self) -> bool:
        return self.occupant is not None

    @property
    def has_entrant(self) -> bool:
        return self.occupant is not None and self.occupant != BYE_MARKER

    @property
    def sibling_slot(self) -> int:
        return self.slot ^ 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize node to dictionary."""
        return {
            "round_number": self.round_number,
            "slot": self.slot,
            "phase": self.phase,
            "occupant": self.occupant,
            "match_id": self.match_id,
            "seed": self.seed,
            "advances_to": list(self.advances_to) if self.advances_to else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EliminationNode":
        """Deserialize node from dictionary."""
        advances_to = data.get("advances_to")
        return cls(
            round_number=data["round_number"],
            slot=data["slot"],
            phase=data["phase"],
            occupant=data.get("occupant"),
            match_id=data.get("match_id"),
            seed=data.get("seed"),
            advances_to=tuple(advances_to) if advances_to else None,
        )


@dataclass
class Bracket:
    """Arena of elimination nodes plus the matches played on them."""

    size: int
    id_prefix: str = ""
    nodes: List[EliminationNode] = field(default_factory=list)
    matches: Dict[str, Match] = field(default_factory=dict)
    origins: Dict[str, str] = field(default_factory=dict)
    champion_id: Optional[str] = None

    @classmethod
    def empty(cls, size: int, id_prefix: str = "") -> "Bracket":
        """Create every node of a bracket of ``size`` first-round slots."""
        bracket = cls(size=size, id_prefix=id_prefix)
        rounds = size.bit_length() - 1
        slots = size
        for round_number in range(1, rounds + 1):
            for slot in range(slots):
                advances_to = (
                    (round_number + 1, slot // 2) if round_number < rounds else None
                )
                bracket.nodes.append(
                    EliminationNode(
                        round_number=round_number,
                        slot=slot,
                        phase=phase_label(slots),
                        advances_to=advances_to,
                    )
                )
            slots //= 2
        return bracket

    @property
    def rounds(self) -> int:
        return self.size.bit_length() - 1

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def slots_in_round(self, round_number: int) -> int:
        return self.size >> (round_number - 1)

    def index(self, round_number: int, slot: int) -> int:
        """Position of ``(round_number, slot)`` in the flat node list."""
        if not 1 <= round_number <= self.rounds:
            raise IndexError(f"Round {round_number} outside bracket of {self.size}")
        if not 0 <= slot < self.slots_in_round(round_number):
            raise IndexError(f"Slot {slot} outside round {round_number}")
        offset = sum(self.slots_in_round(r) for r in range(1, round_number))
        return offset + slot

    def node(self, round_number: int, slot: int) -> EliminationNode:
        return self.nodes[self.index(round_number, slot)]

    def round_nodes(self, round_number: int) -> List[EliminationNode]:
        start = self.index(round_number, 0)
        return self.nodes[start : start + self.slots_in_round(round_number)]

    def sibling(self, node: EliminationNode) -> EliminationNode:
        return self.node(node.round_number, node.sibling_slot)

    def next_node(self, node: EliminationNode) -> Optional[EliminationNode]:
        if node.advances_to is None:
            return None
        return self.node(*node.advances_to)

    def nodes_for_match(self, match_id: str) -> List[EliminationNode]:
        return [node for node in self.nodes if node.match_id == match_id]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize bracket to dictionary."""
        return {
            "size": self.size,
            "id_prefix": self.id_prefix,
            "nodes": [n.to_dict() for n in self.nodes],
            "matches": [m.to_dict() for m in self.matches.values()],
            "origins": dict(self.origins),
            "champion_id": self.champion_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bracket":
        """Deserialize bracket from dictionary."""
        matches = [Match.from_dict(m) for m in data.get("matches", [])]
        return cls(
            size=data["size"],
            id_prefix=data.get("id_prefix", ""),
            nodes=[EliminationNode.from_dict(n) for n in data.get("nodes", [])],
            matches={m.id: m for m in matches},
            origins=dict(data.get("origins", {})),
            champion_id=data.get("champion_id"),
        )
