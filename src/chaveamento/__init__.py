"""Chaveamento: group and bracket engine for beach tennis stages."""

from chaveamento.formats import create_format
from chaveamento.models import (
    Bracket,
    EliminationNode,
    Entrant,
    EntrantKind,
    Group,
    Match,
    MatchStatus,
    SetScore,
    Side,
    Stage,
    StageConfig,
    StageState,
    Standing,
)
from chaveamento.tournament import ChaveamentoOrchestrator

__version__ = "0.1.0"

__all__ = [
    "Bracket",
    "ChaveamentoOrchestrator",
    "EliminationNode",
    "Entrant",
    "EntrantKind",
    "Group",
    "Match",
    "MatchStatus",
    "SetScore",
    "Side",
    "Stage",
    "StageConfig",
    "StageState",
    "Standing",
    "create_format",
    "__version__",
]
