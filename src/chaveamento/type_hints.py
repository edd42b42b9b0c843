"""Type hints used in Chaveamento."""

from typing import Dict, List, Literal, Sequence, Tuple

# Ids are opaque strings handed over by the roster source
EntrantId = str
GroupId = str

# One or two entrant ids playing together on one side of a match
SideIds = Tuple[EntrantId, ...]

# Raw set tallies as submitted, e.g. [(6, 4), (3, 6), (10, 8)]
RawSets = Sequence[Tuple[int, int]]

SideName = Literal["side_a", "side_b"]

# Positions inside a group (0-based) playing on one side
SideIndices = Tuple[int, ...]
# One fixture expressed with group positions
FixtureIndices = Tuple[SideIndices, SideIndices]
# Fixtures for every round of a schedule
PairingTable = List[List[FixtureIndices]]

# Standings for every group of a stage
StandingsByGroup = Dict[GroupId, List["Standing"]]

#  LocalWords:  FixtureIndices PairingTable
