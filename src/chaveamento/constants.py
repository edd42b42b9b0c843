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

# --- Logging ---
LOG_LEVEL_ENV_VAR = "CHAVEAMENTO_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Stage formats
FORMAT_FIXED_PAIR = "dupla_fixa"
FORMAT_ROTATING_PARTNER = "rei_da_praia"
FORMAT_SUPER_X = "super_x"
FORMAT_TEAMS = "teams"

SUPPORTED_FORMATS = (
    FORMAT_FIXED_PAIR,
    FORMAT_ROTATING_PARTNER,
    FORMAT_SUPER_X,
    FORMAT_TEAMS,
)

FORMAT_NAMES = {
    FORMAT_FIXED_PAIR: "Dupla Fixa",
    FORMAT_ROTATING_PARTNER: "Rei da Praia",
    FORMAT_SUPER_X: "Super X",
    FORMAT_TEAMS: "Teams",
}

# Group sizing (jogadoresPorGrupo)
DEFAULT_GROUP_SIZE = 4
MIN_ENTRANTS_PER_GROUP = 2

# Rotating partner groups are always four players
ROTATING_GROUP_SIZE = 4
MIN_ROTATING_PLAYERS = 8

# Super X variants (single group, fixed schedule)
SUPER_8 = 8
SUPER_12 = 12
SUPPORTED_SUPER_X_VARIANTS = (SUPER_8, SUPER_12)

# Teams
SUPPORTED_TEAM_SIZES = (4, 6)
DEFAULT_TEAM_SIZE = 4
MIN_TEAMS = 2
# Fewer teams than this play one single group
TEAMS_GROUP_STAGE_THRESHOLD = 6

TEAM_FORMATION_BALANCED = "balanced"
TEAM_FORMATION_RANDOM = "random"
TEAM_FORMATION_MANUAL = "manual"
TEAM_FORMATIONS = (
    TEAM_FORMATION_BALANCED,
    TEAM_FORMATION_RANDOM,
    TEAM_FORMATION_MANUAL,
)

# Pair formation for fixed pair stages
PAIR_FORMATION_REGISTERED = "registered"
PAIR_FORMATION_DRAW = "draw"
PAIR_FORMATIONS = (PAIR_FORMATION_REGISTERED, PAIR_FORMATION_DRAW)

# Knockout pairing for rotating partner stages
KNOCKOUT_BEST_WITH_BEST = "best_with_best"
KNOCKOUT_RANKING_CROSS = "ranking_cross"
KNOCKOUT_RANDOM_DRAW = "random_draw"
KNOCKOUT_PAIRINGS = (
    KNOCKOUT_BEST_WITH_BEST,
    KNOCKOUT_RANKING_CROSS,
    KNOCKOUT_RANDOM_DRAW,
)

# Elimination
DEFAULT_CLASSIFIERS_PER_GROUP = 2
MIN_QUALIFYING_GROUPS = 2
BYE_MARKER = "BYE"

# Player genders and the games of a team fixture
GENDER_FEMALE = "F"
GENDER_MALE = "M"
GAME_WOMEN = "feminino"
GAME_MEN = "masculino"
GAME_MIXED = "misto"
GAME_OPEN = "livre"
GAME_DECIDER = "decider"

# Standings
DEFAULT_POINTS_PER_WIN = 3

GROUP_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
