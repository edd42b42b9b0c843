"""Result recording and validation for matches.

This module records set scores and walkovers on matches with proper
validation, keeping submissions idempotent per match.
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

from typing import List, Union

from chaveamento.exceptions import InvalidResultException, ResultAlreadyRecorded
from chaveamento.models.match import Match, MatchStatus, SetScore, Side
from chaveamento.type_hints import RawSets, SideName
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


class ResultRecorder:
    """Handles recording and validating match results.

    This class is responsible for:
    - Validating set scores before touching the match
    - Deciding the winner from the sets won
    - Recording walkovers
    - Treating an identical resubmission as a no-op
    - Correcting a recorded result on request
    """

    def record_sets(self, match: Match, sets: RawSets) -> bool:
        """Record the set scores of a match.

        Args:
            match: Match to record the result on
            sets: ``(side_a_games, side_b_games)`` per set, in playing order

        Returns:
            True if the result was recorded, False if the identical result
            was already recorded

        Raises:
            InvalidResultException: The match cannot take a result or the
                score is malformed, tied or undecided
            ResultAlreadyRecorded: A different result is already recorded
        """
        self._check_playable(match)
        score = self._parse_sets(match, sets)

        if match.has_result:
            if match.status == MatchStatus.FINISHED and match.score == score:
                logger.info(f"Match {match.id}: identical result resubmitted, ignored")
                return False
            raise ResultAlreadyRecorded(
                f"Match {match.id} already has a result ({self._describe(match)}), "
                "submit a correction to change it"
            )

        match.winner = self._decide(match, score)
        match.score = score
        match.status = MatchStatus.FINISHED
        logger.info(f"Match {match.id}: {self._describe(match)}")
        return True

    def correct_sets(self, match: Match, sets: RawSets) -> bool:
        """Replace the recorded result of a match with new set scores.

        Works on finished and walked over matches alike; the match ends up
        finished with the winner of the new sets.

        Returns:
            True if the result changed, False if ``sets`` equals the
            recorded score

        Raises:
            InvalidResultException: The match has no result yet or the new
                score is malformed, tied or undecided
        """
        self._check_playable(match)
        if not match.has_result:
            raise InvalidResultException(
                f"Match {match.id} has no result to correct, record it first"
            )
        score = self._parse_sets(match, sets)
        winner = self._decide(match, score)
        if match.status == MatchStatus.FINISHED and match.score == score:
            return False

        previous = self._describe(match)
        match.score = score
        match.winner = winner
        match.status = MatchStatus.FINISHED
        logger.info(
            f"Match {match.id}: result corrected from {previous} "
            f"to {self._describe(match)}"
        )
        return True

    def record_walkover(self, match: Match, winner: Union[Side, SideName]) -> bool:
        """Award a match to ``winner`` without a score.

        Returns:
            True if recorded, False if the same walkover was already recorded
        """
        self._check_playable(match)
        side = winner if isinstance(winner, Side) else Side(winner)

        if match.has_result:
            if match.status == MatchStatus.WALKOVER and match.winner is side:
                return False
            raise ResultAlreadyRecorded(
                f"Match {match.id} already has a result ({self._describe(match)})"
            )

        match.score = []
        match.winner = side
        match.status = MatchStatus.WALKOVER
        logger.info(f"Match {match.id}: walkover to {' + '.join(match.side_ids(side))}")
        return True

    def start_match(self, match: Match) -> bool:
        """Mark a scheduled match as in progress.

        Returns:
            True if the status changed, False if it was already in progress
        """
        if match.status == MatchStatus.IN_PROGRESS:
            return False
        if match.status != MatchStatus.SCHEDULED:
            raise InvalidResultException(
                f"Match {match.id} cannot start from status {match.status.value}"
            )
        self._check_playable(match)
        match.status = MatchStatus.IN_PROGRESS
        logger.debug(f"Match {match.id} started")
        return True

    def _check_playable(self, match: Match) -> None:
        if match.status in (MatchStatus.BYE, MatchStatus.CANCELLED):
            raise InvalidResultException(
                f"Match {match.id} is {match.status.value} and takes no result"
            )
        if not match.side_a or not match.side_b:
            raise InvalidResultException(
                f"Match {match.id} is still waiting for its opponents"
            )

    def _parse_sets(self, match: Match, sets: RawSets) -> List[SetScore]:
        if not sets:
            raise InvalidResultException(f"Match {match.id}: no sets given")

        score = []
        for number, raw in enumerate(sets, start=1):
            try:
                set_score = SetScore.from_pair(raw)
            except (TypeError, ValueError) as e:
                raise InvalidResultException(
                    f"Match {match.id}: set {number} is malformed ({raw!r})"
                ) from e
            if set_score.side_a < 0 or set_score.side_b < 0:
                raise InvalidResultException(
                    f"Match {match.id}: set {number} has negative games"
                )
            if set_score.winner is None:
                raise InvalidResultException(
                    f"Match {match.id}: set {number} is tied "
                    f"{set_score.side_a}-{set_score.side_b}"
                )
            score.append(set_score)
        return score

    def _decide(self, match: Match, score: List[SetScore]) -> Side:
        sets_a = sum(1 for s in score if s.winner is Side.A)
        sets_b = sum(1 for s in score if s.winner is Side.B)
        if sets_a == sets_b:
            raise InvalidResultException(
                f"Match {match.id}: sets are tied {sets_a}-{sets_b}, no winner"
            )
        return Side.A if sets_a > sets_b else Side.B

    def _describe(self, match: Match) -> str:
        if match.status == MatchStatus.WALKOVER:
            return "walkover"
        return " ".join(f"{s.side_a}-{s.side_b}" for s in match.score)
