"""Pairing tables and seeding helpers."""

from chaveamento.pairing.crossings import TEAM_CROSSINGS, get_team_crossing
from chaveamento.pairing.pair_formation import draw_pairs
from chaveamento.pairing.round_robin import partner_rotation_rounds, round_robin_rounds
from chaveamento.pairing.schedules import (
    ROTATING_PARTNER_TABLE,
    SUPER_X_SCHEDULES,
    get_super_x_schedule,
    single_entrant_table,
)
from chaveamento.pairing.seeding import (
    balanced_group_sizes,
    bracket_seed_order,
    next_power_of_two,
    seeded_order,
    snake_distribute,
)

__all__ = [
    "TEAM_CROSSINGS",
    "get_team_crossing",
    "draw_pairs",
    "partner_rotation_rounds",
    "round_robin_rounds",
    "ROTATING_PARTNER_TABLE",
    "SUPER_X_SCHEDULES",
    "get_super_x_schedule",
    "single_entrant_table",
    "balanced_group_sizes",
    "bracket_seed_order",
    "next_power_of_two",
    "seeded_order",
    "snake_distribute",
]
