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

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Standing:
    """Record of one entrant inside one group."""

    entrant_id: str
    group_id: str
    points: int = 0
    wins: int = 0
    losses: int = 0
    games_for: int = 0
    games_against: int = 0
    sets_for: int = 0
    sets_against: int = 0
    matches_played: int = 0
    rank: int = 0

    @property
    def game_differential(self) -> int:
        return self.games_for - self.games_against

    @property
    def set_differential(self) -> int:
        return self.sets_for - self.sets_against

    def to_dict(self) -> Dict[str, Any]:
        """Serialize standing to dictionary."""
        return {
            "entrant_id": self.entrant_id,
            "group_id": self.group_id,
            "points": self.points,
            "wins": self.wins,
            "losses": self.losses,
            "games_for": self.games_for,
            "games_against": self.games_against,
            "sets_for": self.sets_for,
            "sets_against": self.sets_against,
            "matches_played": self.matches_played,
            "rank": self.rank,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Standing":
        """Deserialize standing from dictionary."""
        return cls(
            entrant_id=data["entrant_id"],
            group_id=data["group_id"],
            points=data.get("points", 0),
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            games_for=data.get("games_for", 0),
            games_against=data.get("games_against", 0),
            sets_for=data.get("sets_for", 0),
            sets_against=data.get("sets_against", 0),
            matches_played=data.get("matches_played", 0),
            rank=data.get("rank", 0),
        )
