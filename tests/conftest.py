import pytest

from chaveamento.models import StageConfig
from chaveamento.tournament import (
    ChaveamentoOrchestrator,
    EliminationBracketBuilder,
    ResultRecorder,
)


@pytest.fixture
def orchestrator():
    return ChaveamentoOrchestrator()


@pytest.fixture
def builder():
    return EliminationBracketBuilder()


@pytest.fixture
def recorder():
    return ResultRecorder()


@pytest.fixture
def fixed_pair_config():
    return StageConfig(format_tag="dupla_fixa", group_size=4)
