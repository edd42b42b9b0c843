"""Elimination bracket construction and progression.

Qualifiers are seeded into a power-of-two bracket using the standard seeded
order, so seed 1 meets the weakest seed and the two top seeds can only meet
in the final. Empty slots become BYEs; BYE matches are resolved right away so
the bracket always shows who is waiting for whom.
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

from typing import Dict, List, Optional, Sequence, Tuple

from chaveamento.constants import (
    BYE_MARKER,
    DEFAULT_CLASSIFIERS_PER_GROUP,
    MIN_QUALIFYING_GROUPS,
)
from chaveamento.exceptions import (
    BracketStateException,
    GroupsIncomplete,
    HasResults,
    InsufficientGroups,
)
from chaveamento.models.bracket import Bracket, EliminationNode, Qualifier
from chaveamento.models.group import Group, group_letter
from chaveamento.models.match import Match, MatchStatus, Side
from chaveamento.pairing.crossings import CrossingSlot
from chaveamento.pairing.seeding import bracket_seed_order, next_power_of_two
from chaveamento.type_hints import StandingsByGroup
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


def _swap(side: Tuple[str, ...], old: str, new: str) -> Tuple[str, ...]:
    return tuple(new if entrant_id == old else entrant_id for entrant_id in side)


class EliminationBracketBuilder:
    """Builds, advances and tears down elimination brackets."""

    def collect_qualifiers(
        self,
        groups: Sequence[Group],
        standings: StandingsByGroup,
        classifiers_per_group: int = DEFAULT_CLASSIFIERS_PER_GROUP,
    ) -> List[Qualifier]:
        """Top ranked entrants of every group, in seed order.

        Seed order is group rank first, then group ordinal: every group
        winner is seeded ahead of every runner-up.

        Raises:
            GroupsIncomplete: A group still has open matches
            InsufficientGroups: Fewer than two groups contributed qualifiers
        """
        pending = [group.name for group in groups if not group.is_complete]
        if pending:
            raise GroupsIncomplete(
                f"Groups with matches still to play: {', '.join(pending)}"
            )

        qualifiers = []
        contributing = 0
        for group in sorted(groups, key=lambda g: g.ordinal):
            rows = sorted(standings.get(group.id, ()), key=lambda s: s.rank)
            rows = rows[:classifiers_per_group]
            if rows:
                contributing += 1
            for row in rows:
                qualifiers.append(
                    Qualifier(
                        entrant_id=row.entrant_id,
                        group_ids=frozenset({group.id}),
                        group_rank=row.rank,
                        group_ordinal=group.ordinal,
                        origin=f"{row.rank}º {group.name}",
                    )
                )

        if contributing < MIN_QUALIFYING_GROUPS:
            raise InsufficientGroups(
                f"An elimination phase needs at least {MIN_QUALIFYING_GROUPS} "
                f"qualifying groups, got {contributing}"
            )

        qualifiers.sort(key=lambda q: (q.group_rank, q.group_ordinal))
        return qualifiers

    def build_bracket(
        self,
        groups: Sequence[Group],
        standings: StandingsByGroup,
        classifiers_per_group: int = DEFAULT_CLASSIFIERS_PER_GROUP,
        id_prefix: str = "",
    ) -> Bracket:
        """Build the bracket from the final group standings."""
        qualifiers = self.collect_qualifiers(groups, standings, classifiers_per_group)
        return self.build_bracket_from_seeds(qualifiers, id_prefix)

    def build_bracket_from_seeds(
        self, qualifiers: Sequence[Qualifier], id_prefix: str = ""
    ) -> Bracket:
        """Build a bracket from qualifiers already in seed order.

        Args:
            qualifiers: Seed 1 first
            id_prefix: Prefix of the elimination match ids

        Returns:
            A bracket with every first-round match created. BYE matches are
            already resolved and their winners moved up.
        """
        if len(qualifiers) < 2:
            raise InsufficientGroups(
                f"An elimination phase needs at least 2 qualifiers, got {len(qualifiers)}"
            )

        size = next_power_of_two(len(qualifiers))
        seed_of = {q.entrant_id: seed for seed, q in enumerate(qualifiers, start=1)}
        slots: List[Optional[Qualifier]] = [
            qualifiers[seed - 1] if seed <= len(qualifiers) else None
            for seed in bracket_seed_order(size)
        ]
        self._separate_group_mates(slots, seed_of)
        return self._fill_bracket(size, slots, seed_of, id_prefix)

    def build_bracket_from_crossing(
        self,
        qualifiers: Sequence[Qualifier],
        crossing: Sequence[CrossingSlot],
        id_prefix: str = "",
    ) -> Bracket:
        """Build a bracket whose first round follows a predefined crossing.

        Args:
            qualifiers: Seed 1 first, as returned by :meth:`collect_qualifiers`
            crossing: First-round slots as ``(group_rank, group_index)`` or
                ``None`` for a BYE
            id_prefix: Prefix of the elimination match ids

        Raises:
            InsufficientGroups: A slot of the crossing has no qualifier, or
                a qualifier has no slot
        """
        ordinals = sorted({q.group_ordinal for q in qualifiers})
        by_origin = {
            (q.group_rank, ordinals.index(q.group_ordinal)): q for q in qualifiers
        }
        slots: List[Optional[Qualifier]] = []
        for origin in crossing:
            if origin is None:
                slots.append(None)
                continue
            if origin not in by_origin:
                rank, index = origin
                raise InsufficientGroups(
                    f"No qualifier ranked {rank} in group {group_letter(index + 1)}"
                )
            slots.append(by_origin[origin])
        if len(by_origin) != sum(1 for slot in slots if slot is not None):
            raise InsufficientGroups(
                f"{len(qualifiers)} qualifiers do not fit a crossing of "
                f"{len(crossing)} slots"
            )

        seed_of = {q.entrant_id: seed for seed, q in enumerate(qualifiers, start=1)}
        return self._fill_bracket(len(crossing), slots, seed_of, id_prefix)

    def _fill_bracket(
        self,
        size: int,
        slots: Sequence[Optional[Qualifier]],
        seed_of: Dict[str, int],
        id_prefix: str,
    ) -> Bracket:
        bracket = Bracket.empty(size, id_prefix)
        for slot, qualifier in enumerate(slots):
            node = bracket.node(1, slot)
            if qualifier is None:
                node.occupant = BYE_MARKER
            else:
                node.occupant = qualifier.entrant_id
                node.seed = seed_of[qualifier.entrant_id]
                bracket.origins[qualifier.entrant_id] = qualifier.origin

        for pair_index in range(size // 2):
            self._open_match(bracket, 1, pair_index)

        logger.info(
            f"Bracket of {size} built for {len(seed_of)} qualifiers "
            f"({size - len(seed_of)} byes)"
        )
        return bracket

    def _separate_group_mates(
        self, slots: List[Optional[Qualifier]], seed_of: Dict[str, int]
    ) -> None:
        """Swap weaker seeds so first-round opponents come from different groups.

        The weaker entrant of a clashing pairing trades places with the
        weaker entrant of the nearest real pairing where the swap leaves both
        pairings clean. Pairings against a BYE are never touched.
        """
        pairs = len(slots) // 2

        def weaker_position(pair: int) -> int:
            a, b = slots[2 * pair], slots[2 * pair + 1]
            if seed_of[a.entrant_id] > seed_of[b.entrant_id]:
                return 2 * pair
            return 2 * pair + 1

        for pair in range(pairs):
            a, b = slots[2 * pair], slots[2 * pair + 1]
            if a is None or b is None or not a.shares_group_with(b):
                continue

            weak_pos = weaker_position(pair)
            weak, strong = slots[weak_pos], slots[weak_pos ^ 1]
            candidates = sorted(
                (other for other in range(pairs) if other != pair),
                key=lambda other: (abs(other - pair), other),
            )
            for other in candidates:
                if slots[2 * other] is None or slots[2 * other + 1] is None:
                    continue
                other_weak_pos = weaker_position(other)
                other_weak = slots[other_weak_pos]
                other_strong = slots[other_weak_pos ^ 1]
                if strong.shares_group_with(other_weak):
                    continue
                if other_strong.shares_group_with(weak):
                    continue
                slots[weak_pos], slots[other_weak_pos] = other_weak, weak
                logger.debug(
                    f"Swapped {weak.entrant_id} and {other_weak.entrant_id} "
                    "to avoid a first-round group rematch"
                )
                break
            else:
                logger.warning(
                    f"{a.entrant_id} and {b.entrant_id} share a group and meet in "
                    "round 1, no alternative placement"
                )

    def _match_id(self, bracket: Bracket, round_number: int, pair_index: int) -> str:
        local = f"ko:r{round_number}m{pair_index + 1}"
        return f"{bracket.id_prefix}:{local}" if bracket.id_prefix else local

    def _open_match(
        self, bracket: Bracket, round_number: int, pair_index: int
    ) -> Optional[Match]:
        """Create the match of a slot pair once both slots are filled.

        Returns:
            The new playable match, or the next playable match reached
            through BYE auto-advancement, or None
        """
        first = bracket.node(round_number, 2 * pair_index)
        second = bracket.node(round_number, 2 * pair_index + 1)
        if not (first.is_filled and second.is_filled) or first.match_id is not None:
            return None

        if first.is_bye and second.is_bye:
            target = bracket.next_node(first)
            if target is None:
                return None
            target.occupant = BYE_MARKER
            return self._open_match(bracket, target.round_number, target.slot // 2)

        match = Match(
            id=self._match_id(bracket, round_number, pair_index),
            group_id=None,
            round_label=first.phase,
            round_number=round_number,
            side_a=(first.occupant,) if first.has_entrant else (),
            side_b=(second.occupant,) if second.has_entrant else (),
        )
        bracket.matches[match.id] = match
        first.match_id = match.id
        second.match_id = match.id

        if first.is_bye or second.is_bye:
            winner_node = second if first.is_bye else first
            match.status = MatchStatus.BYE
            match.winner = Side.B if first.is_bye else Side.A
            logger.debug(f"{winner_node.occupant} advances on a bye ({match.id})")
            return self.advance_winner(bracket, winner_node, winner_node.occupant)

        logger.debug(
            f"{match.id} ({match.round_label}): "
            f"{first.occupant} vs {second.occupant}"
        )
        return match

    def advance_winner(
        self, bracket: Bracket, node: EliminationNode, winner_id: str
    ) -> Optional[Match]:
        """Copy ``winner_id`` from ``node`` into the next round.

        Args:
            bracket: Bracket being played
            node: Node occupied by the winner
            winner_id: Entrant that won the match under ``node``

        Returns:
            The next match if it became playable, otherwise None

        Raises:
            BracketStateException: ``winner_id`` does not occupy ``node``, or
                the next slot already holds a different entrant
        """
        if node.occupant != winner_id:
            raise BracketStateException(
                f"{winner_id} does not occupy round {node.round_number} "
                f"slot {node.slot}"
            )

        target = bracket.next_node(node)
        if target is None:
            bracket.champion_id = winner_id
            logger.info(f"Champion decided: {winner_id}")
            return None

        if target.occupant == winner_id:
            return None
        if target.is_filled:
            raise BracketStateException(
                f"Round {target.round_number} slot {target.slot} already holds "
                f"{target.occupant}"
            )

        target.occupant = winner_id
        target.seed = node.seed
        return self._open_match(bracket, target.round_number, target.slot // 2)

    def advance_match(self, bracket: Bracket, match: Match) -> Optional[Match]:
        """Advance the winner of a decided elimination match."""
        if match.winner is None:
            raise BracketStateException(f"Match {match.id} has no winner yet")
        winner_id = match.winner_ids[0]
        for node in bracket.nodes_for_match(match.id):
            if node.occupant == winner_id:
                return self.advance_winner(bracket, node, winner_id)
        raise BracketStateException(
            f"Match {match.id} is not part of the bracket"
        )

    def correction_path(
        self, bracket: Bracket, match: Match
    ) -> List[EliminationNode]:
        """Later-round nodes holding the current winner of ``match``.

        The walk follows BYE matches the winner passed through and stops at
        the first real match. Nothing is modified.

        Raises:
            BracketStateException: ``match`` has no winner, or its winner
                already started or finished a later match
        """
        if match.winner is None:
            raise BracketStateException(f"Match {match.id} has no result to correct")
        winner_id = match.winner_ids[0]
        nodes = [
            n for n in bracket.nodes_for_match(match.id) if n.occupant == winner_id
        ]
        if not nodes:
            raise BracketStateException(f"Match {match.id} is not part of the bracket")

        path = []
        target = bracket.next_node(nodes[0])
        while target is not None and target.occupant == winner_id:
            path.append(target)
            if target.match_id is None:
                break
            later = bracket.matches[target.match_id]
            if later.status != MatchStatus.BYE:
                if later.status != MatchStatus.SCHEDULED:
                    raise BracketStateException(
                        f"{winner_id} already played on in {later.id}, "
                        f"{match.id} can no longer be corrected"
                    )
                break
            target = bracket.next_node(target)
        return path

    def replace_winner(
        self,
        bracket: Bracket,
        match: Match,
        path: Sequence[EliminationNode],
        previous_id: str,
    ) -> None:
        """Put the corrected winner of ``match`` where ``previous_id`` stood.

        Args:
            bracket: Bracket being played
            match: Elimination match whose result was corrected
            path: Nodes returned by :meth:`correction_path` before the
                correction
            previous_id: Winner before the correction
        """
        winner_id = match.winner_ids[0]
        if winner_id == previous_id:
            return
        own = [n for n in bracket.nodes_for_match(match.id) if n.occupant == winner_id]
        seed = own[0].seed if own else None
        for node in path:
            node.occupant = winner_id
            node.seed = seed
            if node.match_id is None:
                continue
            later = bracket.matches[node.match_id]
            later.side_a = _swap(later.side_a, previous_id, winner_id)
            later.side_b = _swap(later.side_b, previous_id, winner_id)

        if bracket.champion_id == previous_id:
            bracket.champion_id = winner_id
        logger.info(f"{match.id}: {winner_id} replaces {previous_id} in the bracket")

    def cancel_bracket(self, bracket: Bracket) -> List[str]:
        """Remove every node and match of ``bracket``.

        Returns:
            Ids of the removed matches

        Raises:
            HasResults: An elimination match is finished or walked over;
                the bracket is left untouched
        """
        played = sorted(
            game.id
            for m in bracket.matches.values()
            for game in [m] + m.sub_matches
            if game.has_result
        )
        if played:
            raise HasResults(
                f"Elimination matches already have results: {', '.join(played)}"
            )

        removed = list(bracket.matches)
        bracket.matches.clear()
        bracket.nodes.clear()
        bracket.origins.clear()
        bracket.champion_id = None
        logger.info(f"Bracket cancelled, {len(removed)} matches removed")
        return removed
