"""Audit of generated group fixtures and elimination brackets.

Each check yields a ``CriterionResult``; a ``ValidationReport`` gathers them.
Group criteria:

- G1: nobody plays twice in the same round
- G2: the two sides of a match share nobody
- G3: every group entrant takes part in the schedule
- G4: single-entrant formats meet every opponent exactly once
- G5: rotating formats pair every two players as partners exactly once

Bracket criteria:

- B1: BYEs face the top seeds only
- B2: first-round opponents come from different groups (warning)
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

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Dict, List, Mapping, Optional, Sequence

from chaveamento.models.bracket import Bracket
from chaveamento.models.group import Group
from chaveamento.models.match import Match
from chaveamento.utils import setup_logger

logger = setup_logger(__name__)


class CriterionStatus(Enum):
    """Status of a criterion check."""

    COMPLIANT = "COMPLIANT"
    VIOLATION = "VIOLATION"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class ViolationType(Enum):
    """Severity of a violation."""

    ABSOLUTE = "ABSOLUTE"  # fixtures are wrong
    WARNING = "WARNING"  # allowed but worth a look


@dataclass
class CriterionResult:
    """Result of validating a single criterion."""

    criterion: str
    status: CriterionStatus
    violation_type: Optional[ViolationType] = None
    description: str = ""
    details: Dict[str, object] = field(default_factory=dict)

    @property
    def is_violation(self) -> bool:
        return self.status == CriterionStatus.VIOLATION


@dataclass
class ValidationReport:
    """Complete validation report for a schedule or bracket."""

    total_criteria: int
    compliant_count: int
    violations: List[CriterionResult]
    overall_status: CriterionStatus
    summary: str
    warnings: List[CriterionResult] = field(default_factory=list)
    criteria_results: List[CriterionResult] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.overall_status != CriterionStatus.VIOLATION

    @property
    def compliance_percentage(self) -> float:
        if self.total_criteria == 0:
            return 100.0
        return (self.compliant_count / self.total_criteria) * 100.0


def _compliant(criterion: str, description: str) -> CriterionResult:
    return CriterionResult(
        criterion=criterion, status=CriterionStatus.COMPLIANT, description=description
    )


def _violation(
    criterion: str,
    description: str,
    details: Dict[str, object],
    violation_type: ViolationType = ViolationType.ABSOLUTE,
) -> CriterionResult:
    return CriterionResult(
        criterion=criterion,
        status=CriterionStatus.VIOLATION,
        violation_type=violation_type,
        description=description,
        details=details,
    )


class ScheduleValidator:
    """Checks fixtures and brackets produced by the engine."""

    def validate_group(
        self, group: Group, matches: Sequence[Match]
    ) -> ValidationReport:
        """Validate the schedule of one group."""
        matches = [m for m in matches if m.group_id == group.id]
        results = [
            self.check_one_appearance_per_round(matches),
            self.check_disjoint_sides(matches),
            self.check_everyone_plays(group, matches),
            self.check_single_meetings(group, matches),
            self.check_partner_rotation(group, matches),
        ]
        return self._report(results, f"{group.name}")

    def validate_stage_groups(
        self, groups: Sequence[Group], matches: Mapping[str, Match]
    ) -> Dict[str, ValidationReport]:
        """Validate every group; reports are keyed by group id."""
        return {
            group.id: self.validate_group(group, list(matches.values()))
            for group in groups
        }

    def check_one_appearance_per_round(
        self, matches: Sequence[Match]
    ) -> CriterionResult:
        """G1: Nobody plays twice in the same round."""
        by_round: Dict[int, Counter] = defaultdict(Counter)
        for match in matches:
            by_round[match.round_number].update(match.participants)

        clashes = {
            round_number: sorted(eid for eid, n in counts.items() if n > 1)
            for round_number, counts in by_round.items()
            if any(n > 1 for n in counts.values())
        }
        if clashes:
            return _violation(
                "G1",
                f"Entrants scheduled twice in a round: {clashes}",
                {"rounds": clashes},
            )
        return _compliant("G1", "Every entrant plays at most once per round")

    def check_disjoint_sides(self, matches: Sequence[Match]) -> CriterionResult:
        """G2: The sides of a match share nobody."""
        bad = [m.id for m in matches if set(m.side_a) & set(m.side_b)]
        if bad:
            return _violation("G2", f"Entrants on both sides: {bad}", {"matches": bad})
        return _compliant("G2", "Match sides are disjoint")

    def check_everyone_plays(
        self, group: Group, matches: Sequence[Match]
    ) -> CriterionResult:
        """G3: Every entrant of the group is scheduled."""
        scheduled = {eid for m in matches for eid in m.participants}
        missing = sorted(set(group.entrant_ids) - scheduled)
        if missing:
            return _violation(
                "G3", f"Entrants without matches: {missing}", {"entrants": missing}
            )
        return _compliant("G3", "Every entrant is scheduled")

    def check_single_meetings(
        self, group: Group, matches: Sequence[Match]
    ) -> CriterionResult:
        """G4: In single-entrant formats every two entrants meet once."""
        if any(len(m.side_a) != 1 or len(m.side_b) != 1 for m in matches):
            return CriterionResult(
                criterion="G4",
                status=CriterionStatus.NOT_APPLICABLE,
                description="Sides hold more than one player",
            )

        meetings = Counter(frozenset(m.participants) for m in matches)
        expected = {frozenset(p) for p in combinations(group.entrant_ids, 2)}
        repeated = sorted(sorted(p) for p, n in meetings.items() if n > 1)
        missing = sorted(sorted(p) for p in expected - set(meetings))
        if repeated or missing:
            return _violation(
                "G4",
                f"{len(repeated)} repeated and {len(missing)} missing meetings",
                {"repeated": repeated, "missing": missing},
            )
        return _compliant("G4", f"All {len(expected)} meetings scheduled once")

    def check_partner_rotation(
        self, group: Group, matches: Sequence[Match]
    ) -> CriterionResult:
        """G5: In rotating formats every two players partner exactly once."""
        if any(len(m.side_a) != 2 or len(m.side_b) != 2 for m in matches):
            return CriterionResult(
                criterion="G5",
                status=CriterionStatus.NOT_APPLICABLE,
                description="Sides are single entrants",
            )

        partnerships = Counter(
            frozenset(side) for m in matches for side in (m.side_a, m.side_b)
        )
        expected = {frozenset(p) for p in combinations(group.entrant_ids, 2)}
        repeated = sorted(sorted(p) for p, n in partnerships.items() if n > 1)
        missing = sorted(sorted(p) for p in expected - set(partnerships))
        if repeated or missing:
            return _violation(
                "G5",
                f"{len(repeated)} repeated and {len(missing)} missing partnerships",
                {"repeated": repeated, "missing": missing},
            )
        return _compliant("G5", f"All {len(expected)} partnerships play once")

    def validate_bracket(
        self, bracket: Bracket, group_of: Optional[Mapping[str, str]] = None
    ) -> ValidationReport:
        """Validate the first round of an elimination bracket.

        Args:
            bracket: Bracket to check
            group_of: Source group of each entrant, enables B2
        """
        results = [self.check_byes_to_top_seeds(bracket)]
        if group_of is not None:
            results.append(self.check_first_round_groups(bracket, group_of))
        return self._report(results, "Bracket")

    def check_byes_to_top_seeds(self, bracket: Bracket) -> CriterionResult:
        """B1: BYEs face the highest seeds only."""
        if bracket.is_empty:
            return CriterionResult(
                criterion="B1",
                status=CriterionStatus.NOT_APPLICABLE,
                description="Bracket is empty",
            )

        first_round = bracket.round_nodes(1)
        byes = sum(1 for node in first_round if node.is_bye)
        receivers = sorted(
            node.seed
            for node in first_round
            if node.has_entrant and bracket.sibling(node).is_bye
        )
        if receivers != list(range(1, byes + 1)):
            return _violation(
                "B1",
                f"BYEs went to seeds {receivers}, expected 1-{byes}",
                {"seeds": receivers},
            )
        return _compliant("B1", f"{byes} BYEs assigned to the top seeds")

    def check_first_round_groups(
        self, bracket: Bracket, group_of: Mapping[str, str]
    ) -> CriterionResult:
        """B2: First-round opponents come from different groups."""
        rematches = []
        for node in bracket.round_nodes(1)[::2]:
            other = bracket.sibling(node)
            if not (node.has_entrant and other.has_entrant):
                continue
            group = group_of.get(node.occupant)
            if group is not None and group == group_of.get(other.occupant):
                rematches.append([node.occupant, other.occupant])
        if rematches:
            return _violation(
                "B2",
                f"{len(rematches)} first-round group rematches",
                {"pairs": rematches},
                ViolationType.WARNING,
            )
        return _compliant("B2", "No first-round group rematches")

    def _report(self, results: List[CriterionResult], subject: str) -> ValidationReport:
        violations = [
            r
            for r in results
            if r.is_violation and r.violation_type == ViolationType.ABSOLUTE
        ]
        warnings = [
            r
            for r in results
            if r.is_violation and r.violation_type == ViolationType.WARNING
        ]
        compliant = sum(1 for r in results if r.status == CriterionStatus.COMPLIANT)
        overall = CriterionStatus.VIOLATION if violations else CriterionStatus.COMPLIANT

        if violations:
            summary = (
                f"{subject}: {len(violations)} criteria failed, "
                f"{len(warnings)} warnings"
            )
            logger.warning(summary)
        else:
            summary = f"{subject}: valid, {len(warnings)} warnings"
            logger.debug(summary)

        return ValidationReport(
            total_criteria=len(results),
            compliant_count=compliant,
            violations=violations,
            overall_status=overall,
            summary=summary,
            warnings=warnings,
            criteria_results=results,
        )
