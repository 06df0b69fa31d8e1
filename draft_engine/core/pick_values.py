"""Draft pick value chart"""
from typing import Dict, Iterator, Optional, Tuple


# Modified Stuart chart for the first 50 overall picks
BASE_PICK_VALUES = (
    1000, 875, 750, 650, 550, 475, 415, 365, 325, 290,
    260, 235, 215, 195, 180, 165, 152, 140, 130, 120,
    112, 104, 97, 91, 85, 80, 75, 71, 67, 63,
    60, 57, 54, 51, 49, 46, 44, 42, 40, 38,
    36, 34, 33, 31, 30, 29, 27, 26, 25, 24
)

MAX_PICK = 300


class PickValueTable:
    """Value of every overall pick from 1 to MAX_PICK

    Values never increase with the pick number. Picks outside the chart have
    no value: get() returns None for them and indexing raises KeyError.
    """

    def __init__(self, max_pick: int = MAX_PICK):
        self.max_pick = max_pick
        self._values: Dict[int, int] = {}

        for pick, value in enumerate(BASE_PICK_VALUES, 1):
            self._values[pick] = value

        # Diminishing returns past the base chart
        for pick in range(len(BASE_PICK_VALUES) + 1, max_pick + 1):
            self._values[pick] = max(1, 24 - (pick - 50) // 10)

    def __contains__(self, pick: int) -> bool:
        return pick in self._values

    def __getitem__(self, pick: int) -> int:
        return self._values[pick]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return iter(sorted(self._values.items()))

    def get(self, pick: int, default: Optional[int] = None) -> Optional[int]:
        """Value of a pick, or default when the pick is off the chart"""
        return self._values.get(pick, default)

    def value_or_zero(self, pick: int) -> int:
        """Value of a pick for arithmetic, with off-chart picks worth 0"""
        return self._values.get(pick, 0)
