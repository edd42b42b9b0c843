"""Matches and set scores."""

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
from typing import Any, Dict, List, Optional, Tuple

from chaveamento.type_hints import SideIds


class MatchStatus(Enum):
    """Lifecycle of a match."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    BYE = "bye"
    CANCELLED = "cancelled"
    WALKOVER = "walkover"


# Statuses that count as a recorded result
RESULT_STATUSES = frozenset({MatchStatus.FINISHED, MatchStatus.WALKOVER})
# Statuses after which nothing may change on the match
CLOSED_STATUSES = frozenset(
    {MatchStatus.FINISHED, MatchStatus.WALKOVER, MatchStatus.BYE, MatchStatus.CANCELLED}
)


class Side(Enum):
    """One of the two sides of a match."""

    A = "side_a"
    B = "side_b"

    @property
    def other(self) -> "Side":
        return Side.B if self is Side.A else Side.A


@dataclass(frozen=True)
class SetScore:
    """Games won by each side in one set."""

    side_a: int
    side_b: int

    @property
    def winner(self) -> Optional[Side]:
        if self.side_a > self.side_b:
            return Side.A
        if self.side_b > self.side_a:
            return Side.B
        return None

    def games(self, side: Side) -> int:
        return self.side_a if side is Side.A else self.side_b

    def to_list(self) -> List[int]:
        return [self.side_a, self.side_b]

    @classmethod
    def from_pair(cls, pair) -> "SetScore":
        side_a, side_b = pair
        return cls(side_a=int(side_a), side_b=int(side_b))


@dataclass
class Match:
    """A fixture between two sides.

    Attributes
    ----------
    id : str
        Deterministic id derived from the stage, group/bracket and position.
    group_id : str, optional
        Owning group, ``None`` for elimination matches.
    round_label : str
        Human readable round ("Rodada 2", "semifinal", ...).
    round_number : int
        1-based round within the group or bracket.
    side_a, side_b : tuple of str
        Entrant ids on each side. Rotating partner formats put two player ids
        on each side, every other format a single entrant id.
    status : MatchStatus
        Current lifecycle status.
    score : list of SetScore
        Ordered set tallies, empty until a result is recorded.
    winner : Side, optional
        Winning side once decided.
    sub_matches : list of Match
        Games between the pairs of two teams when this match is a team
        fixture (confronto). The fixture counts its games as sets.
    parent_id : str, optional
        Team fixture a game belongs to.
    """

    id: str
    group_id: Optional[str]
    round_label: str
    round_number: int
    side_a: SideIds
    side_b: SideIds
    status: MatchStatus = MatchStatus.SCHEDULED
    score: List[SetScore] = field(default_factory=list)
    winner: Optional[Side] = None
    sub_matches: List["Match"] = field(default_factory=list)
    parent_id: Optional[str] = None

    @property
    def is_elimination(self) -> bool:
        return self.group_id is None

    @property
    def has_result(self) -> bool:
        return self.status in RESULT_STATUSES

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STATUSES

    @property
    def participants(self) -> Tuple[str, ...]:
        return self.side_a + self.side_b

    def side_ids(self, side: Side) -> Tuple[str, ...]:
        return self.side_a if side is Side.A else self.side_b

    @property
    def is_team_fixture(self) -> bool:
        return bool(self.sub_matches)

    def sets_won(self, side: Side) -> int:
        if self.sub_matches:
            return sum(
                1
                for game in self.sub_matches
                if game.has_result and game.winner is side
            )
        return sum(1 for set_score in self.score if set_score.winner is side)

    def games_won(self, side: Side) -> int:
        if self.sub_matches:
            return sum(game.games_won(side) for game in self.sub_matches)
        return sum(set_score.games(side) for set_score in self.score)

    @property
    def winner_ids(self) -> Tuple[str, ...]:
        if self.winner is None:
            return ()
        return self.side_ids(self.winner)

    @property
    def loser_ids(self) -> Tuple[str, ...]:
        if self.winner is None:
            return ()
        return self.side_ids(self.winner.other)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "group_id": self.group_id,
            "round_label": self.round_label,
            "round_number": self.round_number,
            "side_a": list(self.side_a),
            "side_b": list(self.side_b),
            "status": self.status.value,
            "score": [s.to_list() for s in self.score],
            "winner": self.winner.value if self.winner else None,
            "sub_matches": [m.to_dict() for m in self.sub_matches],
            "parent_id": self.parent_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        winner = data.get("winner")
        return cls(
            id=data["id"],
            group_id=data.get("group_id"),
            round_label=data.get("round_label", ""),
            round_number=data.get("round_number", 1),
            side_a=tuple(data.get("side_a", ())),
            side_b=tuple(data.get("side_b", ())),
            status=MatchStatus(data.get("status", MatchStatus.SCHEDULED.value)),
            score=[SetScore.from_pair(s) for s in data.get("score", [])],
            winner=Side(winner) if winner else None,
            sub_matches=[cls.from_dict(m) for m in data.get("sub_matches", [])],
            parent_id=data.get("parent_id"),
        )
