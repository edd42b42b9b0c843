"""Stage engine components and the orchestrator driving them."""

from chaveamento.tournament.bracket_builder import EliminationBracketBuilder
from chaveamento.tournament.group_assignment import GroupAssignmentEngine
from chaveamento.tournament.knockout_pairs import KnockoutPairBuilder
from chaveamento.tournament.orchestrator import ChaveamentoOrchestrator
from chaveamento.tournament.result_recorder import ResultRecorder
from chaveamento.tournament.scheduler import RoundRobinScheduler
from chaveamento.tournament.standings_calculator import StandingsCalculator
from chaveamento.tournament.team_fixtures import TeamFixtureBuilder

__all__ = [
    "ChaveamentoOrchestrator",
    "EliminationBracketBuilder",
    "GroupAssignmentEngine",
    "KnockoutPairBuilder",
    "ResultRecorder",
    "RoundRobinScheduler",
    "StandingsCalculator",
    "TeamFixtureBuilder",
]
