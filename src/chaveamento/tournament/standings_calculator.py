"""Standings computation for groups.

Standings are rebuilt from scratch from the group's matches every time, so
the result does not depend on the order results were recorded in.
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

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from chaveamento.constants import DEFAULT_POINTS_PER_WIN
from chaveamento.models.group import Group
from chaveamento.models.match import Match, MatchStatus, Side
from chaveamento.models.standing import Standing
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


class StandingsCalculator:
    """Computes group standings with a fixed tie-break order.

    Ranking, best first: points, wins, game differential, set differential,
    then the entrant's seed and registration order, which makes the order
    total and independent of any random draw used to place the group.
    """

    def __init__(self, points_per_win: int = DEFAULT_POINTS_PER_WIN):
        self.points_per_win = points_per_win

    def recompute(
        self,
        group: Group,
        matches: Iterable[Match],
        points_per_win: Optional[int] = None,
    ) -> List[Standing]:
        """Rank the entrants of ``group`` from its matches.

        Args:
            group: Group being ranked
            matches: Matches of the group; other groups' matches are skipped
            points_per_win: Overrides the calculator default

        Returns:
            One standing per group entrant, ordered by rank (1 first)
        """
        ppw = self.points_per_win if points_per_win is None else points_per_win
        rows: Dict[str, Standing] = {
            entrant_id: Standing(entrant_id=entrant_id, group_id=group.id)
            for entrant_id in group.entrant_ids
        }

        for match in matches:
            if match.group_id != group.id:
                continue
            self._apply_match(rows, match)

        for row in rows.values():
            row.points = row.wins * ppw

        seeding = {entrant.id: entrant.seeding_key for entrant in group.entrants}
        ordered = sorted(rows.values(), key=lambda row: self._sort_key(seeding, row))
        for rank, row in enumerate(ordered, start=1):
            row.rank = rank
        return ordered

    def _sort_key(
        self, seeding: Dict[str, Tuple[int, int, int, str]], row: Standing
    ) -> Tuple[Any, ...]:
        return (
            -row.points,
            -row.wins,
            -row.game_differential,
            -row.set_differential,
            seeding[row.entrant_id],
        )

    def _apply_match(self, rows: Dict[str, Standing], match: Match) -> None:
        if match.status == MatchStatus.BYE:
            side = match.winner or (Side.A if match.side_a else Side.B)
            for entrant_id in match.side_ids(side):
                self._row(rows, entrant_id, match).wins += 1
            return

        if match.status not in (MatchStatus.FINISHED, MatchStatus.WALKOVER):
            return
        if match.winner is None:
            logger.warning(f"Match {match.id} closed without a winner, ignored")
            return

        winner, loser = match.winner, match.winner.other
        for side in (Side.A, Side.B):
            won = side is winner
            for entrant_id in match.side_ids(side):
                row = self._row(rows, entrant_id, match)
                row.matches_played += 1
                if won:
                    row.wins += 1
                else:
                    row.losses += 1
                if match.status == MatchStatus.FINISHED:
                    row.games_for += match.games_won(side)
                    row.games_against += match.games_won(side.other)
                    row.sets_for += match.sets_won(side)
                    row.sets_against += match.sets_won(side.other)
        logger.debug(
            f"Applied {match.id}: {' + '.join(match.side_ids(winner))} beat "
            f"{' + '.join(match.side_ids(loser))}"
        )

    def _row(
        self, rows: Dict[str, Standing], entrant_id: str, match: Match
    ) -> Standing:
        row = rows.get(entrant_id)
        if row is None:
            # entrant outside the group, keep its tally out of the table
            logger.warning(f"Entrant {entrant_id} of {match.id} is not in the group")
            return Standing(entrant_id=entrant_id, group_id=match.group_id or "")
        return row

    def is_group_complete(self, matches: Sequence[Match]) -> bool:
        """True when every match of a group is closed."""
        return bool(matches) and all(match.is_closed for match in matches)
