"""Stage simulator.

Generates synthetic rosters and seeded random results, then drives a whole
stage through the orchestrator until a champion is known. Useful for smoke
testing every format end to end and for producing sample data.
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

import json
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from chaveamento.constants import (
    DEFAULT_CLASSIFIERS_PER_GROUP,
    DEFAULT_GROUP_SIZE,
    DEFAULT_TEAM_SIZE,
    FORMAT_FIXED_PAIR,
    FORMAT_SUPER_X,
    KNOCKOUT_BEST_WITH_BEST,
)
from chaveamento.formats import create_format
from chaveamento.models.entrant import Entrant, EntrantKind
from chaveamento.models.match import Match, Side
from chaveamento.models.stage import Stage, StageState
from chaveamento.models.stage_config import StageConfig
from chaveamento.tournament.orchestrator import ChaveamentoOrchestrator
from chaveamento.utils import setup_logger
from chaveamento.validation.schedule_validator import ScheduleValidator

logger = setup_logger(__name__)

FIRST_NAMES = [
    "Ana", "Bruno", "Carla", "Diego", "Elisa", "Felipe", "Gabi", "Heitor",
    "Isis", "João", "Karen", "Lucas", "Marina", "Nando", "Olga", "Paulo",
    "Quésia", "Rafa", "Sofia", "Tiago", "Úrsula", "Vitor", "Wanda", "Yuri",
]  # fmt: skip

GAMES_TO_WIN_SET = 6


@dataclass
class SimulatorConfig:
    """Configuration for a simulated stage."""

    format_tag: str = FORMAT_FIXED_PAIR
    num_entrants: int = 8
    group_size: int = DEFAULT_GROUP_SIZE
    super_x_variant: Optional[int] = None
    team_size: int = DEFAULT_TEAM_SIZE
    classifiers_per_group: int = DEFAULT_CLASSIFIERS_PER_GROUP
    knockout_pairing: str = KNOCKOUT_BEST_WITH_BEST
    seed: Optional[int] = None
    seeded_fraction: float = 0.25
    walkover_rate: float = 0.0
    upset_rate: float = 0.3
    validate: bool = False

    def stage_config(self) -> StageConfig:
        variant = self.super_x_variant
        if self.format_tag == FORMAT_SUPER_X and variant is None:
            variant = self.num_entrants
        return StageConfig(
            format_tag=self.format_tag,
            group_size=self.group_size,
            classifiers_per_group=self.classifiers_per_group,
            super_x_variant=variant,
            team_size=self.team_size,
            knockout_pairing=self.knockout_pairing,
            random_seed=self.seed,
        )


class EntrantFactory:
    """Creates synthetic rosters."""

    def __init__(self, config: SimulatorConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )

    def _player_name(self, number: int) -> str:
        first = FIRST_NAMES[(number - 1) % len(FIRST_NAMES)]
        return f"{first} {number}"

    def create_entrants(self) -> List[Entrant]:
        """Pairs for fixed pair stages, individual players otherwise."""
        count = self.config.num_entrants
        seeded = int(count * self.config.seeded_fraction)
        seeds = list(range(1, seeded + 1))
        seeded_positions = set(self.random.sample(range(count), seeded))

        entrants = []
        for index in range(count):
            number = index + 1
            seed = seeds.pop(0) if index in seeded_positions else None
            if self.config.format_tag == FORMAT_FIXED_PAIR:
                members = (f"p{2 * number - 1}", f"p{2 * number}")
                entrant = Entrant(
                    id=f"d{number}",
                    display_name=(
                        f"{self._player_name(2 * number - 1)} / "
                        f"{self._player_name(2 * number)}"
                    ),
                    kind=EntrantKind.PAIR,
                    seed=seed,
                    registration_order=number,
                    member_ids=members,
                )
            else:
                entrant = Entrant(
                    id=f"p{number}",
                    display_name=self._player_name(number),
                    kind=EntrantKind.PLAYER,
                    seed=seed,
                    registration_order=number,
                )
            entrants.append(entrant)

        logger.info(f"Created {len(entrants)} entrants ({seeded} seeded)")
        return entrants


class ResultSimulator:
    """Produces one-set results, usually won by the stronger side."""

    def __init__(self, config: SimulatorConfig):
        self.config = config
        self.random = (
            random.Random(config.seed) if config.seed is not None else random.Random()
        )

    def _strength(self, stage: Stage, side: Tuple[str, ...]) -> float:
        lookup = stage.entrant_lookup()
        total = 0.0
        for entrant_id in side:
            entrant = lookup.get(entrant_id)
            seed = entrant.seed if entrant is not None else None
            total += 1.0 / seed if seed else 0.0
        return total

    def is_walkover(self) -> bool:
        return self.random.random() < self.config.walkover_rate

    def simulate(
        self, stage: Stage, match: Match
    ) -> Tuple[Side, List[Tuple[int, int]]]:
        """Return the winning side and the set scores."""
        strength_a = self._strength(stage, match.side_a)
        strength_b = self._strength(stage, match.side_b)
        if strength_a == strength_b:
            winner = self.random.choice([Side.A, Side.B])
        else:
            favourite = Side.A if strength_a > strength_b else Side.B
            upset = self.random.random() < self.config.upset_rate
            winner = favourite.other if upset else favourite

        loser_games = self.random.randint(0, GAMES_TO_WIN_SET - 1)
        if winner is Side.A:
            return winner, [(GAMES_TO_WIN_SET, loser_games)]
        return winner, [(loser_games, GAMES_TO_WIN_SET)]


class StageSimulator:
    """Runs a complete synthetic stage."""

    def __init__(
        self,
        config: SimulatorConfig,
        orchestrator: Optional[ChaveamentoOrchestrator] = None,
    ):
        self.config = config
        self.orchestrator = orchestrator or ChaveamentoOrchestrator()
        self.entrant_factory = EntrantFactory(config)
        self.result_simulator = ResultSimulator(config)
        self.validator = ScheduleValidator()

    def run(self, stage_id: str = "sim") -> Stage:
        """Play a stage from group generation to champion."""
        entrants = self.entrant_factory.create_entrants()
        stage = self.orchestrator.create_stage(
            entrants, self.config.stage_config(), stage_id, name="Simulated stage"
        )

        self.orchestrator.generate_groups(stage)
        while stage.state == StageState.GROUPS_GENERATED:
            if not self._play_pending(stage):
                break

        format_spec = create_format(stage.config)
        if format_spec.supports_elimination(stage.groups):
            self.orchestrator.generate_elimination(stage)
            while stage.state != StageState.FINISHED:
                if not self._play_pending(stage):
                    break
        else:
            self.orchestrator.finish_stage(stage)

        logger.info(
            f"Simulated stage {stage.id} won by {stage.display_name(stage.champion_id)}"
        )
        return stage

    def _play_pending(self, stage: Stage) -> int:
        played = 0
        for match in self.orchestrator.pending_matches(stage):
            if not match.side_a or not match.side_b:
                continue
            if self.result_simulator.is_walkover():
                winner, _ = self.result_simulator.simulate(stage, match)
                self.orchestrator.record_walkover(stage, match.id, winner)
            else:
                _, sets = self.result_simulator.simulate(stage, match)
                self.orchestrator.record_result(stage, match.id, sets)
            played += 1
        return played

    def validate(self, stage: Stage) -> Dict[str, Any]:
        """Validation summaries of every group and the bracket."""
        reports = {
            group_id: report.summary
            for group_id, report in self.validator.validate_stage_groups(
                stage.groups, stage.matches
            ).items()
        }
        if stage.bracket is not None:
            reports["bracket"] = self.validator.validate_bracket(stage.bracket).summary
        return reports

    def summarize(self, stage: Stage) -> Dict[str, Any]:
        summary: Dict[str, Any] = {
            "stage": stage.to_dict(),
            "champion": stage.display_name(stage.champion_id),
        }
        if self.config.validate:
            summary["validation"] = self.validate(stage)
        return summary

    def export_json(self, stage: Stage) -> str:
        return json.dumps(self.summarize(stage), indent=2, ensure_ascii=False)
