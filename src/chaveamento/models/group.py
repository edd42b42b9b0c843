"""Groups of a stage."""

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
from typing import Any, Dict, List

from chaveamento.constants import GROUP_LETTERS
from chaveamento.models.entrant import Entrant


def group_letter(ordinal: int) -> str:
    """Letter of a group from its 1-based ordinal (A, B, ..., Z, AA, AB)."""
    index = ordinal - 1
    letters = ""
    while True:
        letters = GROUP_LETTERS[index % 26] + letters
        index = index // 26 - 1
        if index < 0:
            return letters


@dataclass
class Group:
    """A group of entrants playing a round robin.

    Attributes
    ----------
    id : str
        Group identifier.
    ordinal : int
        1-based position of the group in the stage.
    format_tag : str
        Format the group was generated for.
    entrants : list of Entrant
        Entrants in placement order, which is also the fixture order.
    is_complete : bool
        True once every match of the group has a result.
    """

    id: str
    ordinal: int
    format_tag: str
    entrants: List[Entrant] = field(default_factory=list)
    is_complete: bool = False

    @property
    def name(self) -> str:
        return f"Grupo {group_letter(self.ordinal)}"

    @property
    def entrant_ids(self) -> List[str]:
        return [entrant.id for entrant in self.entrants]

    @property
    def size(self) -> int:
        return len(self.entrants)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize group to dictionary."""
        return {
            "id": self.id,
            "ordinal": self.ordinal,
            "format_tag": self.format_tag,
            "entrants": [e.to_dict() for e in self.entrants],
            "is_complete": self.is_complete,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Group":
        """Deserialize group from dictionary."""
        return cls(
            id=data["id"],
            ordinal=data["ordinal"],
            format_tag=data["format_tag"],
            entrants=[Entrant.from_dict(e) for e in data.get("entrants", [])],
            is_complete=data.get("is_complete", False),
        )
