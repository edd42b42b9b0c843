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

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from chaveamento.constants import (
    DEFAULT_CLASSIFIERS_PER_GROUP,
    DEFAULT_GROUP_SIZE,
    DEFAULT_POINTS_PER_WIN,
    DEFAULT_TEAM_SIZE,
    FORMAT_FIXED_PAIR,
    FORMAT_SUPER_X,
    FORMAT_TEAMS,
    KNOCKOUT_BEST_WITH_BEST,
    KNOCKOUT_PAIRINGS,
    MIN_ENTRANTS_PER_GROUP,
    PAIR_FORMATION_REGISTERED,
    PAIR_FORMATIONS,
    SUPPORTED_FORMATS,
    SUPPORTED_SUPER_X_VARIANTS,
    SUPPORTED_TEAM_SIZES,
    TEAM_FORMATION_BALANCED,
    TEAM_FORMATION_MANUAL,
    TEAM_FORMATIONS,
)
from chaveamento.exceptions import InvalidConfiguration, InvalidVariantSize


@dataclass
class StageConfig:
    """Configuration settings for a stage, supplied by the caller.

    Attributes
    ----------
    format_tag : str
        One of "dupla_fixa", "rei_da_praia", "super_x" or "teams".
    group_size : int
        Target entrants per group (jogadoresPorGrupo) for fixed pairs and
        for teams split into groups.
    classifiers_per_group : int
        Entrants of each group reaching the elimination phase.
    super_x_variant : int, optional
        8 or 12, required for Super X stages.
    pair_formation : str
        "registered" when entrants are pairs, "draw" to draw the pairs of a
        fixed pair stage from individually registered players.
    previous_pairs : list of list of str
        Player id pairs that already played together, avoided by the draw.
    team_size : int
        Players per team for team stages (4 or 6).
    team_formation : str
        "balanced", "random" or "manual".
    manual_teams : list of list of str
        Player ids of each team when formation is manual.
    team_names : list of str
        Optional names for manually formed teams.
    knockout_pairing : str
        How rotating partner qualifiers are paired for the knockout.
    points_per_win : int
        Standing points credited per win.
    random_seed : int, optional
        Seed for every random draw of the stage; ``None`` keeps draws
        deterministic by seed and registration order.
    """

    format_tag: str = FORMAT_FIXED_PAIR
    group_size: int = DEFAULT_GROUP_SIZE
    classifiers_per_group: int = DEFAULT_CLASSIFIERS_PER_GROUP
    super_x_variant: Optional[int] = None
    pair_formation: str = PAIR_FORMATION_REGISTERED
    previous_pairs: List[List[str]] = field(default_factory=list)
    team_size: int = DEFAULT_TEAM_SIZE
    team_formation: str = TEAM_FORMATION_BALANCED
    manual_teams: List[List[str]] = field(default_factory=list)
    team_names: List[str] = field(default_factory=list)
    knockout_pairing: str = KNOCKOUT_BEST_WITH_BEST
    points_per_win: int = DEFAULT_POINTS_PER_WIN
    random_seed: Optional[int] = None

    def validate(self) -> None:
        """Reject impossible configurations before anything is generated.

        Raises
        ------
        InvalidConfiguration
            Unknown format, formation or pairing mode, or out-of-range sizes.
        InvalidVariantSize
            Unsupported Super X variant or team size.
        """
        if self.format_tag not in SUPPORTED_FORMATS:
            raise InvalidConfiguration(f"Unknown stage format '{self.format_tag}'")
        if self.group_size < MIN_ENTRANTS_PER_GROUP:
            raise InvalidConfiguration(
                f"Group size must be at least {MIN_ENTRANTS_PER_GROUP}, "
                f"got {self.group_size}"
            )
        if self.classifiers_per_group < 1:
            raise InvalidConfiguration(
                f"Classifiers per group must be at least 1, "
                f"got {self.classifiers_per_group}"
            )
        if self.points_per_win < 1:
            raise InvalidConfiguration(
                f"Points per win must be positive, got {self.points_per_win}"
            )
        if self.knockout_pairing not in KNOCKOUT_PAIRINGS:
            raise InvalidConfiguration(
                f"Unknown knockout pairing '{self.knockout_pairing}'"
            )

        if self.format_tag == FORMAT_SUPER_X:
            if self.super_x_variant not in SUPPORTED_SUPER_X_VARIANTS:
                raise InvalidVariantSize(
                    f"Super X variant must be one of {SUPPORTED_SUPER_X_VARIANTS}, "
                    f"got {self.super_x_variant}"
                )

        if self.pair_formation not in PAIR_FORMATIONS:
            raise InvalidConfiguration(
                f"Unknown pair formation '{self.pair_formation}'"
            )

        if self.format_tag == FORMAT_TEAMS:
            if self.team_size not in SUPPORTED_TEAM_SIZES:
                raise InvalidVariantSize(
                    f"Team size must be one of {SUPPORTED_TEAM_SIZES}, "
                    f"got {self.team_size}"
                )
            if self.team_formation not in TEAM_FORMATIONS:
                raise InvalidConfiguration(
                    f"Unknown team formation '{self.team_formation}'"
                )
            if self.team_formation == TEAM_FORMATION_MANUAL and not self.manual_teams:
                raise InvalidConfiguration(
                    "Manual team formation requires the team line-ups"
                )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "format_tag": self.format_tag,
            "group_size": self.group_size,
            "classifiers_per_group": self.classifiers_per_group,
            "super_x_variant": self.super_x_variant,
            "pair_formation": self.pair_formation,
            "previous_pairs": [list(pair) for pair in self.previous_pairs],
            "team_size": self.team_size,
            "team_formation": self.team_formation,
            "manual_teams": [list(team) for team in self.manual_teams],
            "team_names": list(self.team_names),
            "knockout_pairing": self.knockout_pairing,
            "points_per_win": self.points_per_win,
            "random_seed": self.random_seed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StageConfig":
        """Deserialize configuration from dictionary."""
        return cls(
            format_tag=data.get("format_tag", FORMAT_FIXED_PAIR),
            group_size=data.get("group_size", DEFAULT_GROUP_SIZE),
            classifiers_per_group=data.get(
                "classifiers_per_group", DEFAULT_CLASSIFIERS_PER_GROUP
            ),
            super_x_variant=data.get("super_x_variant"),
            pair_formation=data.get("pair_formation", PAIR_FORMATION_REGISTERED),
            previous_pairs=[list(pair) for pair in data.get("previous_pairs", [])],
            team_size=data.get("team_size", DEFAULT_TEAM_SIZE),
            team_formation=data.get("team_formation", TEAM_FORMATION_BALANCED),
            manual_teams=[list(team) for team in data.get("manual_teams", [])],
            team_names=list(data.get("team_names", [])),
            knockout_pairing=data.get("knockout_pairing", KNOCKOUT_BEST_WITH_BEST),
            points_per_win=data.get("points_per_win", DEFAULT_POINTS_PER_WIN),
            random_seed=data.get("random_seed"),
        )
