"""Drawing fixed pairs from individually registered players.

Seeded players (cabeças de chave) are protected: each one is drawn with an
unseeded partner and the remaining unseeded players are drawn among
themselves. Partnerships listed in the pair history are avoided whenever
another partner is still available. Once every partnership between seeded
players already happened, the protection is lifted and all players are
drawn together.
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

import random
from itertools import combinations
from typing import FrozenSet, Iterable, List, Sequence, Set, Tuple

from chaveamento.exceptions import InvalidEntrantCount
from chaveamento.models.entrant import Entrant
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)

DrawnPair = Tuple[Entrant, Entrant]


def pair_history(previous_pairs: Iterable[Sequence[str]]) -> Set[FrozenSet[str]]:
    """Unordered player id pairs that already played together."""
    return {frozenset(pair) for pair in previous_pairs if len(pair) == 2}


def seeded_partnerships_exhausted(
    players: Sequence[Entrant], history: Set[FrozenSet[str]]
) -> bool:
    """True when at least two seeded players exist and all of them already
    partnered each other."""
    seeded = [player.id for player in players if player.is_seeded]
    if len(seeded) < 2:
        return False
    return all(frozenset(pair) in history for pair in combinations(seeded, 2))


def draw_pairs(
    players: Sequence[Entrant],
    rng: random.Random,
    previous_pairs: Iterable[Sequence[str]] = (),
) -> List[DrawnPair]:
    """Draw fixed pairs from ``players``.

    Parameters
    ----------
    players : sequence of Entrant
        Individually registered players; seeded players carry a ``seed``.
    rng : random.Random
        Source of the draw.
    previous_pairs : iterable of (str, str)
        Player id pairs that already played together in earlier stages.

    Returns
    -------
    list of (Entrant, Entrant)
        Seeded pairs first, each led by its seeded player in seed order.

    Raises
    ------
    InvalidEntrantCount
        Odd number of players, or more seeded than unseeded players while
        seeded players are still protected.
    """
    if len(players) % 2:
        raise InvalidEntrantCount(
            f"Pairs cannot be drawn from an odd number of players ({len(players)})"
        )
    history = pair_history(previous_pairs)

    if seeded_partnerships_exhausted(players, history):
        logger.info("Every seeded partnership already played, drawing freely")
        pool = list(players)
        rng.shuffle(pool)
        return _pair_off(pool, history)

    seeded = sorted((p for p in players if p.is_seeded), key=lambda p: p.seeding_key)
    unseeded = [p for p in players if not p.is_seeded]
    if len(seeded) > len(unseeded):
        raise InvalidEntrantCount(
            f"{len(seeded)} seeded players need at least as many unseeded "
            f"partners, got {len(unseeded)}"
        )

    rng.shuffle(unseeded)
    pairs = [(head, _take_partner(head, unseeded, history)) for head in seeded]
    pairs.extend(_pair_off(unseeded, history))
    logger.debug(
        f"Drew {len(pairs)} pairs, {len(seeded)} of them led by a seeded player"
    )
    return pairs


def _pair_off(pool: List[Entrant], history: Set[FrozenSet[str]]) -> List[DrawnPair]:
    pairs = []
    while pool:
        first = pool.pop(0)
        pairs.append((first, _take_partner(first, pool, history)))
    return pairs


def _take_partner(
    player: Entrant, pool: List[Entrant], history: Set[FrozenSet[str]]
) -> Entrant:
    """Remove and return the first partner of ``player`` not in the history."""
    for index, candidate in enumerate(pool):
        if frozenset((player.id, candidate.id)) not in history:
            return pool.pop(index)
    partner = pool.pop(0)
    logger.warning(f"{player.id} and {partner.id} partner again, no one else is left")
    return partner
