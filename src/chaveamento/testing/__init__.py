"""Simulation tooling for exercising whole stages."""

from chaveamento.testing.simulator import (
    EntrantFactory,
    ResultSimulator,
    SimulatorConfig,
    StageSimulator,
)

__all__ = ["EntrantFactory", "ResultSimulator", "SimulatorConfig", "StageSimulator"]
