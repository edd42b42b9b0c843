"""Entrants taking part in a stage: players, fixed pairs and teams."""

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
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class EntrantKind(Enum):
    """What an entrant id stands for."""

    PLAYER = "player"
    PAIR = "pair"
    TEAM = "team"


@dataclass
class Entrant:
    """A participant of a stage.

    Attributes
    ----------
    id : str
        Identifier supplied by the roster source.
    display_name : str
        Name shown on fixtures and standings.
    kind : EntrantKind
        Individual player, fixed pair (dupla) or team.
    seed : int, optional
        In-system ranking position, lower is stronger. ``None`` for unseeded.
    registration_order : int
        Order of registration, the last-resort tie-break.
    member_ids : tuple of str
        Player ids making up a pair or team. Empty for players.
    group_id : str, optional
        Group the entrant was assigned to, ``None`` until assignment.
    gender : str, optional
        "F" or "M" for players, used to line up team games. ``None`` when
        unknown.
    """

    id: str
    display_name: str
    kind: EntrantKind = EntrantKind.PLAYER
    seed: Optional[int] = None
    registration_order: int = 0
    member_ids: Tuple[str, ...] = field(default_factory=tuple)
    group_id: Optional[str] = None
    gender: Optional[str] = None

    @property
    def is_seeded(self) -> bool:
        return self.seed is not None

    @property
    def seeding_key(self) -> Tuple[int, int, int, str]:
        """Sort key putting seeded entrants first, strongest first."""
        if self.seed is None:
            return (1, 0, self.registration_order, self.id)
        return (0, self.seed, self.registration_order, self.id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize entrant to dictionary."""
        return {
            "id": self.id,
            "display_name": self.display_name,
            "kind": self.kind.value,
            "seed": self.seed,
            "registration_order": self.registration_order,
            "member_ids": list(self.member_ids),
            "group_id": self.group_id,
            "gender": self.gender,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entrant":
        """Deserialize entrant from dictionary."""
        return cls(
            id=data["id"],
            display_name=data.get("display_name", data["id"]),
            kind=EntrantKind(data.get("kind", EntrantKind.PLAYER.value)),
            seed=data.get("seed"),
            registration_order=data.get("registration_order", 0),
            member_ids=tuple(data.get("member_ids", ())),
            group_id=data.get("group_id"),
            gender=data.get("gender"),
        )

    def __str__(self) -> str:
        return self.display_name
