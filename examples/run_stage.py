"""Example script driving stages through the orchestrator API.

Shows a dupla fixa stage with groups and elimination, and a Super 8 stage
decided in a single group.
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

from chaveamento import (
    ChaveamentoOrchestrator,
    Entrant,
    EntrantKind,
    StageConfig,
    StageState,
)


def play_open_matches(orchestrator, stage):
    """Side A wins every playable match, 6-3."""
    played = 0
    for match in orchestrator.pending_matches(stage):
        if match.side_a and match.side_b:
            orchestrator.record_result(stage, match.id, [(6, 3)])
            played += 1
    return played


def print_standings(orchestrator, stage):
    for group in stage.groups:
        print(f"\n  {group.name}")
        for row in orchestrator.get_standings(stage, group.id):
            print(
                f"    {row.rank}. {stage.display_name(row.entrant_id):20} "
                f"{row.points:3} pts  {row.wins}V {row.losses}D  "
                f"saldo {row.game_differential:+d}"
            )


def example_fixed_pair_stage():
    """Example: ten pairs, groups of four, top two go through."""

    print("\n" + "=" * 70)
    print("EXAMPLE 1: Dupla fixa with elimination")
    print("=" * 70)

    pairs = [
        Entrant(
            id=f"d{i}",
            display_name=f"Dupla {i}",
            kind=EntrantKind.PAIR,
            seed=i if i <= 3 else None,
            registration_order=i,
        )
        for i in range(1, 11)
    ]
    orchestrator = ChaveamentoOrchestrator()
    stage = orchestrator.create_stage(
        pairs, StageConfig(format_tag="dupla_fixa", group_size=4), "etapa-1"
    )

    groups = orchestrator.generate_groups(stage)
    print(f"\nGenerated {len(groups)} groups, {len(stage.matches)} matches")

    play_open_matches(orchestrator, stage)
    print_standings(orchestrator, stage)

    bracket = orchestrator.generate_elimination(stage)
    print(f"\nBracket of {bracket.size}:")
    for node in bracket.round_nodes(1)[::2]:
        other = bracket.sibling(node)
        print(
            f"  {bracket.origins.get(node.occupant, node.occupant)} x "
            f"{bracket.origins.get(other.occupant, other.occupant)}"
        )

    while stage.state != StageState.FINISHED and play_open_matches(orchestrator, stage):
        pass
    print(f"\nChampion: {stage.display_name(stage.champion_id)}")


def example_super_8_stage():
    """Example: Super 8, every player partners every other once."""

    print("\n" + "=" * 70)
    print("EXAMPLE 2: Super 8")
    print("=" * 70)

    players = [
        Entrant(id=f"p{i}", display_name=f"Jogador {i}", registration_order=i)
        for i in range(1, 9)
    ]
    orchestrator = ChaveamentoOrchestrator()
    stage = orchestrator.create_stage(
        players, StageConfig(format_tag="super_x", super_x_variant=8), "super-8"
    )

    orchestrator.generate_groups(stage)
    for match in list(stage.matches.values())[:4]:
        print(
            f"  {match.round_label}: {' / '.join(match.side_a)} x "
            f"{' / '.join(match.side_b)}"
        )
    print("  ...")

    play_open_matches(orchestrator, stage)
    print_standings(orchestrator, stage)

    champion = orchestrator.finish_stage(stage)
    print(f"\nChampion: {stage.display_name(champion)}")


if __name__ == "__main__":
    example_fixed_pair_stage()
    example_super_8_stage()
