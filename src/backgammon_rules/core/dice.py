"""Dice for backgammon.

This module handles dice rolling and tracking which die values are still
available during a turn. A roll is immutable: consuming a die returns a
new ``Dice`` value.
"""

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from backgammon_rules.errors import DieNotAvailableError


@dataclass(frozen=True)
class Dice:
    """A dice roll and the die values not yet used this turn.

    Attributes:
        values: The two rolled values, each 1-6
        remaining: Unused die values, kept sorted (a multiset). Doubles
            start with four copies of the rolled value.
    """
    values: Tuple[int, int]
    remaining: Tuple[int, ...]

    def __post_init__(self):
        """Validate dice values."""
        assert len(self.values) == 2, "A roll has exactly two dice"
        assert all(1 <= v <= 6 for v in self.values), f"Invalid dice: {self.values}"
        assert all(1 <= v <= 6 for v in self.remaining), f"Invalid remaining dice: {self.remaining}"
        assert len(self.remaining) <= 4, "At most four dice can remain"
        assert remaining_fits_roll(self.values, self.remaining), (
            f"Remaining dice {list(self.remaining)} cannot come from a roll of {self.values}"
        )
        object.__setattr__(self, "values", tuple(int(v) for v in self.values))
        object.__setattr__(self, "remaining", tuple(sorted(int(v) for v in self.remaining)))

    @staticmethod
    def from_values(die1: int, die2: int) -> "Dice":
        """Create a fresh roll from two known values.

        Examples:
            >>> Dice.from_values(3, 5).remaining
            (3, 5)
            >>> Dice.from_values(4, 4).remaining
            (4, 4, 4, 4)
        """
        return Dice(values=(die1, die2), remaining=tuple(dice_values((die1, die2))))

    @property
    def is_double(self) -> bool:
        return is_doubles(self.values)

    @property
    def exhausted(self) -> bool:
        """True when every die has been used or forfeited."""
        return not self.remaining

    def distinct_remaining(self) -> List[int]:
        """Distinct unused die values, largest first."""
        return sorted(set(self.remaining), reverse=True)

    def has(self, die: int) -> bool:
        return die in self.remaining

    def consume(self, die: int) -> "Dice":
        """Use one occurrence of a die value.

        Args:
            die: Die value to use

        Returns:
            New Dice with one copy of ``die`` removed

        Raises:
            DieNotAvailableError: If ``die`` is not among the remaining values
        """
        if die not in self.remaining:
            raise DieNotAvailableError(die, self.remaining)
        remaining = list(self.remaining)
        remaining.remove(die)
        return Dice(values=self.values, remaining=tuple(remaining))

    def __str__(self) -> str:
        return dice_to_string(self.values)


def all_dice_rolls() -> List[Tuple[int, int]]:
    """Generate all 21 unique dice outcomes.

    (2,3) and (3,2) are equivalent, so there are 21 unique rolls:
    6 doubles and 15 non-doubles.

    Returns:
        List of all 21 unique dice combinations, sorted
    """
    rolls = []
    for die1 in range(1, 7):
        for die2 in range(die1, 7):
            rolls.append((die1, die2))
    return rolls


def remaining_fits_roll(values: Tuple[int, int], remaining: Sequence[int]) -> bool:
    """Check that ``remaining`` is what is left of a roll of ``values``.

    Each remaining value must be one the roll granted, no more often than
    it was granted (four times for a double).
    """
    granted = Counter(dice_values(values))
    left = Counter(remaining)
    return all(count <= granted[value] for value, count in left.items())


def is_doubles(values: Tuple[int, int]) -> bool:
    """Check if a roll is a double."""
    return values[0] == values[1]


def dice_values(values: Tuple[int, int]) -> List[int]:
    """Get the die values available for moves.

    Examples:
        >>> dice_values((3, 5))
        [3, 5]
        >>> dice_values((4, 4))
        [4, 4, 4, 4]
    """
    if is_doubles(values):
        return [values[0]] * 4
    return [values[0], values[1]]


def roll_dice(rng: Optional[np.random.Generator] = None) -> Dice:
    """Roll two dice.

    Args:
        rng: NumPy random generator. The caller owns the random source; a
            fresh unseeded generator is used if none is given.

    Returns:
        A fresh Dice roll
    """
    if rng is None:
        rng = np.random.default_rng()
    die1 = int(rng.integers(1, 7))
    die2 = int(rng.integers(1, 7))
    return Dice.from_values(die1, die2)


def dice_to_string(values: Tuple[int, int]) -> str:
    """Convert a roll to readable text.

    Examples:
        >>> dice_to_string((3, 5))
        '3-5'
        >>> dice_to_string((4, 4))
        'Double 4s'
    """
    if is_doubles(values):
        return f"Double {values[0]}s"
    return f"{values[0]}-{values[1]}"


ALL_DICE_ROLLS = all_dice_rolls()
