"""Stage orchestration.

The orchestrator drives one stage through its state machine::

    OPEN -> GROUPS_GENERATED -> GROUPS_COMPLETE -> ELIMINATION_GENERATED -> FINISHED

with cancel edges GROUPS_GENERATED -> OPEN and ELIMINATION_GENERATED ->
GROUPS_COMPLETE, and GROUPS_COMPLETE -> FINISHED for stages played in a
single group. Every mutating call holds the stage lock and checks all
preconditions before writing to the stage.
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
from typing import Callable, Dict, List, Optional, Sequence, Union

from chaveamento.constants import FORMAT_TEAMS
from chaveamento.exceptions import (
    BracketStateException,
    GroupsIncomplete,
    HasResults,
    InsufficientGroups,
    InvalidResultException,
    MatchNotFoundException,
    StageStateException,
)
from chaveamento.formats import FormatSpec, create_format
from chaveamento.models.bracket import Bracket
from chaveamento.models.entrant import Entrant
from chaveamento.models.group import Group
from chaveamento.models.match import Match, MatchStatus, Side
from chaveamento.models.stage import Stage, StageState
from chaveamento.models.stage_config import StageConfig
from chaveamento.models.standing import Standing
from chaveamento.tournament.bracket_builder import EliminationBracketBuilder
from chaveamento.tournament.group_assignment import GroupAssignmentEngine
from chaveamento.tournament.knockout_pairs import KnockoutPairBuilder
from chaveamento.tournament.result_recorder import ResultRecorder
from chaveamento.tournament.scheduler import RoundRobinScheduler
from chaveamento.tournament.standings_calculator import StandingsCalculator
from chaveamento.tournament.team_fixtures import TeamFixtureBuilder
from chaveamento.utils import generate_id, setup_logger

logger = setup_logger(__name__)


class ChaveamentoOrchestrator:
    """Runs stages from registration to champion.

    This class is responsible for:
    - Enforcing the stage state machine
    - Generating groups and their fixtures
    - Recording results and keeping standings current
    - Generating, advancing and cancelling the elimination bracket
    - Playing team fixtures through their games

    Components are injected through the constructor; defaults are created
    for anything not supplied.
    """

    def __init__(
        self,
        group_engine: Optional[GroupAssignmentEngine] = None,
        scheduler: Optional[RoundRobinScheduler] = None,
        standings_calculator: Optional[StandingsCalculator] = None,
        bracket_builder: Optional[EliminationBracketBuilder] = None,
        result_recorder: Optional[ResultRecorder] = None,
        knockout_pair_builder: Optional[KnockoutPairBuilder] = None,
        team_fixture_builder: Optional[TeamFixtureBuilder] = None,
        format_factory: Callable[[StageConfig], FormatSpec] = create_format,
    ):
        """Initialize the orchestrator.

        Args:
            group_engine: Splits entrants into groups
            scheduler: Creates group fixtures
            standings_calculator: Ranks group entrants
            bracket_builder: Builds and advances elimination brackets
            result_recorder: Validates and records match results
            knockout_pair_builder: Pairs rei da praia qualifiers; when None a
                builder is created per stage from its configuration
            team_fixture_builder: Creates and settles the games of team
                fixtures; when None a builder is created per stage
            format_factory: Selects the format of a stage configuration
        """
        self.group_engine = group_engine or GroupAssignmentEngine()
        self.scheduler = scheduler or RoundRobinScheduler()
        self.standings_calculator = standings_calculator or StandingsCalculator()
        self.bracket_builder = bracket_builder or EliminationBracketBuilder()
        self.result_recorder = result_recorder or ResultRecorder()
        self.knockout_pair_builder = knockout_pair_builder
        self.team_fixture_builder = team_fixture_builder
        self.format_factory = format_factory

    def create_stage(
        self,
        entrants: Sequence[Entrant],
        config: Optional[StageConfig] = None,
        stage_id: Optional[str] = None,
        name: str = "",
    ) -> Stage:
        """Create an open stage after validating its configuration."""
        config = config or StageConfig()
        config.validate()
        stage = Stage(
            id=stage_id or generate_id(),
            config=config,
            entrants=list(entrants),
            name=name,
        )
        logger.info(
            f"Stage {stage.id} created: {config.format_tag}, {len(stage.entrants)} entrants"
        )
        return stage

    # ------------------------------------------------------------------
    # Group phase
    # ------------------------------------------------------------------

    def generate_groups(self, stage: Stage) -> List[Group]:
        """Create the groups, their matches and initial standings.

        Returns:
            The generated groups

        Raises:
            StageStateException: The stage is not open
            ValidationException: The entrants do not fit the format; the
                stage is left unchanged
        """
        with stage.lock:
            self._require_state(stage, StageState.OPEN, "generate groups")
            format_spec = self.format_factory(stage.config)

            groups = self.group_engine.assign_groups(
                stage.entrants, format_spec, stage.id
            )
            matches: Dict[str, Match] = {}
            standings: Dict[str, List[Standing]] = {}
            for group in groups:
                group_matches = self.scheduler.schedule(group, format_spec)
                matches.update((m.id, m) for m in group_matches)
                standings[group.id] = self._recompute(stage, group, group_matches)

            prepared = [e for g in groups for e in g.entrants]
            if format_spec.tag == FORMAT_TEAMS:
                lookup = {e.id: e for e in list(stage.entrants) + prepared}
                builder = self._fixture_builder(stage)
                for match in matches.values():
                    builder.attach_games(match, lookup)

            stage.groups = groups
            stage.matches = matches
            stage.standings = standings
            stage.teams = prepared if format_spec.tag == FORMAT_TEAMS else []
            stage.pairs = prepared if format_spec.forms_pairs else []
            self._transition(stage, StageState.GROUPS_GENERATED)
            return groups

    def cancel_groups(self, stage: Stage) -> List[str]:
        """Remove every group and group match.

        Returns:
            Ids of the removed matches

        Raises:
            StageStateException: No groups to cancel, or elimination exists
            HasResults: A group match already has a result
        """
        with stage.lock:
            self._require_state(
                stage,
                (StageState.GROUPS_GENERATED, StageState.GROUPS_COMPLETE),
                "cancel groups",
            )
            if stage.has_group_results:
                played = sum(
                    1
                    for m in stage.matches.values()
                    for g in [m] + m.sub_matches
                    if g.has_result
                )
                raise HasResults(
                    f"Stage {stage.id} has {played} group results, "
                    "groups cannot be cancelled"
                )

            removed = list(stage.matches)
            stage.groups = []
            stage.matches = {}
            stage.standings = {}
            stage.pairs = []
            stage.teams = []
            self._transition(stage, StageState.OPEN)
            return removed

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def record_result(self, stage: Stage, match_id: str, sets) -> Match:
        """Record set scores for a group or elimination match.

        Args:
            stage: Stage owning the match
            match_id: Id of the match
            sets: ``(side_a_games, side_b_games)`` per set

        Returns:
            The updated match
        """
        with stage.lock:
            match = self._find_match(stage, match_id)
            if match.is_team_fixture:
                raise InvalidResultException(
                    f"Match {match.id} is decided by its games, record those instead"
                )
            changed = self.result_recorder.record_sets(match, sets)
            if changed:
                self._after_change(stage, match)
            return match

    def record_walkover(
        self, stage: Stage, match_id: str, winner: Union[Side, str]
    ) -> Match:
        """Award a match to ``winner`` without a score."""
        with stage.lock:
            match = self._find_match(stage, match_id)
            changed = self.result_recorder.record_walkover(match, winner)
            if changed:
                if match.is_team_fixture:
                    closed = self._fixture_builder(stage).close_games(match)
                    logger.info(f"{match.id}: walkover closes {len(closed)} games")
                self._after_change(stage, match)
            return match

    def correct_result(self, stage: Stage, match_id: str, sets) -> Match:
        """Replace the result of a match that was recorded wrongly.

        Group matches can be corrected until the elimination phase is
        generated. Elimination matches can be corrected while the winner
        has not started a later match; a new winner takes the old winner's
        place in the bracket, and in the final the champion changes.

        Args:
            stage: Stage owning the match
            match_id: Id of the match
            sets: ``(side_a_games, side_b_games)`` per set

        Returns:
            The updated match

        Raises:
            StageStateException: A group match after elimination was generated
            BracketStateException: The winner already played on
            InvalidResultException: No result yet, or the new score is invalid
        """
        with stage.lock:
            match = self._find_match(stage, match_id)
            if match.is_team_fixture:
                raise InvalidResultException(
                    f"Match {match.id} is decided by its games, correct those instead"
                )
            if match.parent_id is not None:
                return self._correct_game(stage, match, sets)

            path = []
            if match.is_elimination:
                path = self.bracket_builder.correction_path(stage.bracket, match)
            else:
                self._require_state(
                    stage,
                    (StageState.GROUPS_GENERATED, StageState.GROUPS_COMPLETE),
                    f"correct {match_id}",
                )

            previous = match.winner_ids
            if not self.result_recorder.correct_sets(match, sets):
                return match

            if not match.is_elimination:
                self._after_result(stage, match)
                return match

            self._replace_winner(stage, match, path, previous[0])
            return match

    def start_match(self, stage: Stage, match_id: str) -> Match:
        """Mark a match as in progress."""
        with stage.lock:
            match = self._find_match(stage, match_id)
            self.result_recorder.start_match(match)
            if match.parent_id is not None:
                parent = stage.find_match(match.parent_id)
                if parent.status == MatchStatus.SCHEDULED:
                    self.result_recorder.start_match(parent)
            return match

    def _correct_game(self, stage: Stage, game: Match, sets) -> Match:
        """Correct one game of a team fixture and settle the fixture again.

        A corrected group game may reopen its fixture (a 2-0 turned into a
        1-1 waiting for its decider). An elimination fixture must stay
        decided; such a correction is refused and nothing changes.
        """
        parent = stage.find_match(game.parent_id)
        builder = self._fixture_builder(stage)
        builder.check_correction(parent, game)

        path = []
        if parent.is_elimination:
            if parent.has_result:
                path = self.bracket_builder.correction_path(stage.bracket, parent)
        else:
            self._require_state(
                stage,
                (StageState.GROUPS_GENERATED, StageState.GROUPS_COMPLETE),
                f"correct {game.id}",
            )

        previous = parent.winner_ids
        saved_game = (game.score, game.winner, game.status)
        saved_parent = (list(parent.sub_matches), parent.winner, parent.status)
        if not self.result_recorder.correct_sets(game, sets):
            return game
        builder.settle(parent, stage.entrant_lookup())

        if not parent.is_elimination:
            self._after_result(stage, parent)
            return game

        if previous and not parent.has_result:
            game.score, game.winner, game.status = saved_game
            parent.sub_matches, parent.winner, parent.status = saved_parent
            raise BracketStateException(
                f"Correcting {game.id} would reopen {parent.id}, "
                "an elimination fixture must stay decided"
            )
        if not previous and parent.has_result:
            self._after_result(stage, parent)
        elif previous and parent.winner_ids != previous:
            self._replace_winner(stage, parent, path, previous[0])
            for node in path:
                if node.match_id is not None:
                    stage.bracket.matches[node.match_id].sub_matches = []
            self._attach_bracket_games(stage)
        return game

    def _replace_winner(self, stage: Stage, match: Match, path, previous_id: str):
        self.bracket_builder.replace_winner(stage.bracket, match, path, previous_id)
        if stage.champion_id is not None:
            stage.champion_id = stage.bracket.champion_id
            logger.info(
                f"Stage {stage.id} champion is now "
                f"{stage.display_name(stage.champion_id)}"
            )

    def _after_change(self, stage: Stage, match: Match) -> None:
        if match.parent_id is None:
            self._after_result(stage, match)
            return

        parent = stage.find_match(match.parent_id)
        was_decided = parent.has_result
        self._fixture_builder(stage).settle(parent, stage.entrant_lookup())
        if parent.has_result and not was_decided:
            self._after_result(stage, parent)

    def _fixture_builder(self, stage: Stage) -> TeamFixtureBuilder:
        if self.team_fixture_builder is not None:
            return self.team_fixture_builder
        return TeamFixtureBuilder(stage.config.team_size, stage.config.random_seed)

    def _attach_bracket_games(self, stage: Stage) -> None:
        if stage.config.format_tag != FORMAT_TEAMS or stage.bracket is None:
            return
        builder = self._fixture_builder(stage)
        lookup = stage.entrant_lookup()
        for match in stage.bracket.matches.values():
            if match.status == MatchStatus.SCHEDULED:
                builder.attach_games(match, lookup)

    def _find_match(self, stage: Stage, match_id: str) -> Match:
        match = stage.find_match(match_id)
        if match is None:
            raise MatchNotFoundException(
                f"Match {match_id} not found in stage {stage.id}"
            )

        if match.is_elimination:
            allowed = (StageState.ELIMINATION_GENERATED, StageState.FINISHED)
        else:
            allowed = (
                StageState.GROUPS_GENERATED,
                StageState.GROUPS_COMPLETE,
                StageState.ELIMINATION_GENERATED,
                StageState.FINISHED,
            )
        self._require_state(stage, allowed, f"record results on {match_id}")
        return match

    def _after_result(self, stage: Stage, match: Match) -> None:
        if match.is_elimination:
            self.bracket_builder.advance_match(stage.bracket, match)
            self._attach_bracket_games(stage)
            if stage.bracket.champion_id is not None:
                stage.champion_id = stage.bracket.champion_id
                self._transition(stage, StageState.FINISHED)
            return

        group = stage.get_group(match.group_id)
        group_matches = stage.group_matches(group.id)
        stage.standings[group.id] = self._recompute(stage, group, group_matches)
        group.is_complete = self.standings_calculator.is_group_complete(group_matches)
        if group.is_complete:
            logger.info(f"{group.name} of stage {stage.id} is complete")

        if stage.state == StageState.GROUPS_COMPLETE and not group.is_complete:
            logger.info(f"{group.name} of stage {stage.id} reopened by a correction")
            self._transition(stage, StageState.GROUPS_GENERATED)
        if stage.state == StageState.GROUPS_GENERATED and all(
            g.is_complete for g in stage.groups
        ):
            self._transition(stage, StageState.GROUPS_COMPLETE)

    def _recompute(
        self, stage: Stage, group: Group, matches: Sequence[Match]
    ) -> List[Standing]:
        return self.standings_calculator.recompute(
            group, matches, stage.config.points_per_win
        )

    # ------------------------------------------------------------------
    # Elimination phase
    # ------------------------------------------------------------------

    def generate_elimination(self, stage: Stage) -> Bracket:
        """Build the elimination bracket from the final group standings.

        Raises:
            GroupsIncomplete: Group matches are still open
            InsufficientGroups: The stage cannot have an elimination phase
            StageStateException: The stage is in any other state
        """
        with stage.lock:
            if stage.state == StageState.GROUPS_GENERATED:
                raise GroupsIncomplete(
                    f"Stage {stage.id} still has group matches to play"
                )
            self._require_state(
                stage, StageState.GROUPS_COMPLETE, "generate the elimination phase"
            )

            format_spec = self.format_factory(stage.config)
            if not format_spec.supports_elimination(stage.groups):
                raise InsufficientGroups(
                    f"{format_spec.name} stage {stage.id} has no elimination phase, "
                    "finish it from the group standings"
                )

            qualifiers = self.bracket_builder.collect_qualifiers(
                stage.groups, stage.standings, stage.config.classifiers_per_group
            )
            knockout_entrants: List[Entrant] = []
            if format_spec.requires_knockout_pairs:
                rows = {
                    row.entrant_id: row
                    for group_rows in stage.standings.values()
                    for row in group_rows
                }
                knockout_entrants, qualifiers = self._pair_builder(stage).build_pairs(
                    qualifiers, rows, stage.entrant_lookup(), stage.id
                )

            crossing = format_spec.knockout_crossing(stage.groups)
            if crossing is not None:
                bracket = self.bracket_builder.build_bracket_from_crossing(
                    qualifiers, crossing, stage.id
                )
            else:
                bracket = self.bracket_builder.build_bracket_from_seeds(
                    qualifiers, stage.id
                )
            stage.knockout_entrants = knockout_entrants
            stage.bracket = bracket
            self._attach_bracket_games(stage)
            self._transition(stage, StageState.ELIMINATION_GENERATED)
            return bracket

    def _pair_builder(self, stage: Stage) -> KnockoutPairBuilder:
        if self.knockout_pair_builder is not None:
            return self.knockout_pair_builder
        seed = stage.config.random_seed
        return KnockoutPairBuilder(
            stage.config.knockout_pairing,
            random.Random(seed) if seed is not None else None,
        )

    def cancel_elimination(self, stage: Stage) -> List[str]:
        """Tear the whole bracket down.

        Returns:
            Ids of the removed matches

        Raises:
            StageStateException: No elimination phase to cancel
            HasResults: An elimination match has a result; nothing changes
        """
        with stage.lock:
            self._require_state(
                stage, StageState.ELIMINATION_GENERATED, "cancel the elimination phase"
            )
            removed = self.bracket_builder.cancel_bracket(stage.bracket)
            stage.bracket = None
            stage.knockout_entrants = []
            self._transition(stage, StageState.GROUPS_COMPLETE)
            return removed

    def finish_stage(self, stage: Stage) -> str:
        """Close a stage played without elimination, crowning the group winner.

        Returns:
            Id of the champion
        """
        with stage.lock:
            self._require_state(stage, StageState.GROUPS_COMPLETE, "finish the stage")
            format_spec = self.format_factory(stage.config)
            if format_spec.supports_elimination(stage.groups):
                raise StageStateException(
                    f"Stage {stage.id} has {len(stage.groups)} groups and must be "
                    "decided in an elimination phase"
                )

            group = stage.groups[0]
            stage.champion_id = stage.standings[group.id][0].entrant_id
            self._transition(stage, StageState.FINISHED)
            logger.info(
                f"Stage {stage.id} won by {stage.display_name(stage.champion_id)}"
            )
            return stage.champion_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_standings(self, stage: Stage, group_id: str) -> List[Standing]:
        """Current standings of a group, best first."""
        return list(stage.standings.get(group_id, []))

    def pending_matches(self, stage: Stage) -> List[Match]:
        """Matches waiting for a result, group matches first.

        Team fixtures are listed through their open games.
        """
        pending = []
        for match in stage.all_matches():
            if match.is_team_fixture:
                pending.extend(g for g in match.sub_matches if not g.is_closed)
            elif not match.is_closed:
                pending.append(match)
        return pending

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _require_state(self, stage: Stage, allowed, action: str) -> None:
        if isinstance(allowed, StageState):
            allowed = (allowed,)
        if stage.state not in allowed:
            raise StageStateException(
                f"Cannot {action}: stage {stage.id} is {stage.state.value}"
            )

    def _transition(self, stage: Stage, new_state: StageState) -> None:
        logger.info(
            f"Stage {stage.id}: {stage.state.value} -> {new_state.value}"
        )
        stage.state = new_state
