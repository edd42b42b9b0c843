"""Games of team fixtures (confrontos).

Two teams meet in a fixture made of games between their pairs. Teams of
four play two games and, when the games are split 1-1, a decider. Teams of
six play three games. When both teams field as many women as men the
games follow the players' gender (women's, men's and, for teams of six, a
mixed game); otherwise players are paired in line-up order.
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
from typing import List, Mapping, Optional, Sequence, Tuple

from chaveamento.constants import (
    DEFAULT_TEAM_SIZE,
    GAME_DECIDER,
    GAME_MEN,
    GAME_MIXED,
    GAME_OPEN,
    GAME_WOMEN,
    GENDER_FEMALE,
    GENDER_MALE,
)
from chaveamento.exceptions import InvalidResultException
from chaveamento.models.entrant import Entrant
from chaveamento.models.match import Match, MatchStatus, Side
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)

GameLineUp = Tuple[str, List[Entrant], List[Entrant]]

# Teams of this size settle a 1-1 split with a decider
DECIDER_TEAM_SIZE = 4


class TeamFixtureBuilder:
    """Creates and settles the games of team fixtures.

    This class is responsible for:
    - Lining up the pairs of each game
    - Adding the decider of a tied fixture
    - Deciding the fixture from its games
    """

    def __init__(
        self, team_size: int = DEFAULT_TEAM_SIZE, random_seed: Optional[int] = None
    ):
        """Initialize the builder.

        Args:
            team_size: Players per team
            random_seed: Shuffles line-ups per fixture when set; without it
                players keep their team order
        """
        self.team_size = team_size
        self.random_seed = random_seed

    @property
    def has_decider(self) -> bool:
        return self.team_size == DECIDER_TEAM_SIZE

    def attach_games(
        self, match: Match, entrants: Mapping[str, Entrant]
    ) -> List[Match]:
        """Create the games of a team fixture.

        Args:
            match: Fixture between two teams
            entrants: Teams and players of the stage by id

        Returns:
            The new games, empty when the fixture already has games or is
            still waiting for a team
        """
        if match.sub_matches or not (match.side_a and match.side_b):
            return []
        if match.status not in (MatchStatus.SCHEDULED, MatchStatus.IN_PROGRESS):
            return []

        rng = self._rng(match.id)
        team_a = self._line_up(entrants[match.side_a[0]], entrants, rng)
        team_b = self._line_up(entrants[match.side_b[0]], entrants, rng)
        if self._is_balanced(team_a) and self._is_balanced(team_b):
            line_ups = self._gender_games(team_a, team_b)
        else:
            line_ups = self._open_games(team_a, team_b)

        match.sub_matches = [
            self._game(match, number, kind, pair_a, pair_b)
            for number, (kind, pair_a, pair_b) in enumerate(line_ups, start=1)
        ]
        logger.debug(
            f"{match.id}: {len(match.sub_matches)} games "
            f"({', '.join(game.round_label for game in match.sub_matches)})"
        )
        return match.sub_matches

    def settle(self, match: Match, entrants: Mapping[str, Entrant]) -> Optional[Match]:
        """Update a fixture after one of its games changed.

        Closes the fixture once its games decide it. A 1-1 split between
        teams of four adds the decider; a decider no longer needed after a
        correction is dropped.

        Returns:
            The decider when it was just created, otherwise None
        """
        regular = [g for g in match.sub_matches if g.round_label != GAME_DECIDER]
        decider = next(
            (g for g in match.sub_matches if g.round_label == GAME_DECIDER), None
        )
        won_a, won_b = self._tally(regular)
        created = None

        if self.has_decider and all(g.is_closed for g in regular) and won_a == won_b:
            if decider is None:
                decider = self._decider(match, entrants)
                match.sub_matches.append(decider)
                created = decider
                logger.info(f"{match.id}: games split {won_a}-{won_b}, decider added")
            games = regular + [decider]
        else:
            if decider is not None:
                match.sub_matches.remove(decider)
                logger.info(f"{match.id}: decider dropped after a correction")
            games = regular

        if not all(g.is_closed for g in games):
            match.winner = None
            match.status = MatchStatus.IN_PROGRESS
            return created

        won_a, won_b = self._tally(games)
        match.winner = Side.A if won_a > won_b else Side.B
        match.status = MatchStatus.FINISHED
        logger.info(
            f"{match.id}: {' + '.join(match.winner_ids)} win the fixture "
            f"{max(won_a, won_b)}-{min(won_a, won_b)}"
        )
        return created

    def check_correction(self, match: Match, game: Match) -> None:
        """Refuse correcting a regular game once the fixture's decider has a
        result.

        Raises:
            InvalidResultException: The decider was already played
        """
        if game.round_label == GAME_DECIDER:
            return
        for other in match.sub_matches:
            if other.round_label == GAME_DECIDER and other.has_result:
                raise InvalidResultException(
                    f"{match.id} was decided by its decider, "
                    f"{game.id} can no longer be corrected"
                )

    def close_games(self, match: Match) -> List[str]:
        """Cancel the open games of a fixture decided by walkover."""
        cancelled = []
        for game in match.sub_matches:
            if not game.is_closed:
                game.status = MatchStatus.CANCELLED
                cancelled.append(game.id)
        return cancelled

    def _tally(self, games: Sequence[Match]) -> Tuple[int, int]:
        won_a = sum(1 for g in games if g.has_result and g.winner is Side.A)
        won_b = sum(1 for g in games if g.has_result and g.winner is Side.B)
        return won_a, won_b

    def _rng(self, key: str) -> Optional[random.Random]:
        if self.random_seed is None:
            return None
        return random.Random(f"{self.random_seed}:{key}")

    def _line_up(
        self,
        team: Entrant,
        entrants: Mapping[str, Entrant],
        rng: Optional[random.Random],
    ) -> List[Entrant]:
        players = [
            entrants.get(pid) or Entrant(id=pid, display_name=pid)
            for pid in team.member_ids
        ]
        if rng is not None:
            rng.shuffle(players)
        return players

    def _split(self, players: Sequence[Entrant]) -> Tuple[List[Entrant], List[Entrant]]:
        women = [p for p in players if p.gender == GENDER_FEMALE]
        men = [p for p in players if p.gender == GENDER_MALE]
        return women, men

    def _is_balanced(self, players: Sequence[Entrant]) -> bool:
        women, men = self._split(players)
        half = self.team_size // 2
        return len(women) == half and len(men) == half

    def _gender_games(
        self, team_a: Sequence[Entrant], team_b: Sequence[Entrant]
    ) -> List[GameLineUp]:
        women_a, men_a = self._split(team_a)
        women_b, men_b = self._split(team_b)
        games = [
            (GAME_WOMEN, women_a[:2], women_b[:2]),
            (GAME_MEN, men_a[:2], men_b[:2]),
        ]
        if self.team_size == 6:
            games.append(
                (GAME_MIXED, [women_a[2], men_a[2]], [women_b[2], men_b[2]])
            )
        return games

    def _open_games(
        self, team_a: Sequence[Entrant], team_b: Sequence[Entrant]
    ) -> List[GameLineUp]:
        genders = {p.gender for p in list(team_a) + list(team_b)}
        if genders == {GENDER_FEMALE}:
            kind = GAME_WOMEN
        elif genders == {GENDER_MALE}:
            kind = GAME_MEN
        else:
            kind = GAME_OPEN
        return [
            (kind, list(team_a[i : i + 2]), list(team_b[i : i + 2]))
            for i in range(0, self.team_size, 2)
        ]

    def _decider(self, match: Match, entrants: Mapping[str, Entrant]) -> Match:
        rng = self._rng(f"{match.id}:{GAME_DECIDER}")
        team_a = self._line_up(entrants[match.side_a[0]], entrants, rng)
        team_b = self._line_up(entrants[match.side_b[0]], entrants, rng)
        if self._is_balanced(team_a) and self._is_balanced(team_b):
            pair_a = [self._split(team_a)[0][0], self._split(team_a)[1][0]]
            pair_b = [self._split(team_b)[0][0], self._split(team_b)[1][0]]
        else:
            pair_a, pair_b = team_a[:2], team_b[:2]
        number = len(match.sub_matches) + 1
        return self._game(match, number, GAME_DECIDER, pair_a, pair_b)

    def _game(
        self,
        match: Match,
        number: int,
        kind: str,
        pair_a: Sequence[Entrant],
        pair_b: Sequence[Entrant],
    ) -> Match:
        return Match(
            id=f"{match.id}:j{number}",
            group_id=match.group_id,
            round_label=kind,
            round_number=number,
            side_a=tuple(player.id for player in pair_a),
            side_b=tuple(player.id for player in pair_b),
            parent_id=match.id,
        )
