from chaveamento.models.bracket import (
    Bracket,
    EliminationNode,
    Qualifier,
    phase_label,
)
from chaveamento.models.entrant import Entrant, EntrantKind
from chaveamento.models.group import Group, group_letter
from chaveamento.models.match import Match, MatchStatus, SetScore, Side
from chaveamento.models.stage import Stage, StageState
from chaveamento.models.stage_config import StageConfig
from chaveamento.models.standing import Standing

__all__ = [
    "Bracket",
    "EliminationNode",
    "Qualifier",
    "phase_label",
    "Entrant",
    "EntrantKind",
    "Group",
    "group_letter",
    "Match",
    "MatchStatus",
    "SetScore",
    "Side",
    "Stage",
    "StageState",
    "StageConfig",
    "Standing",
]
