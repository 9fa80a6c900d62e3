"""Exact rational beat positions.

A Malody beat is written as ``[beat, numerator, denominator]``: a whole
beat plus a fraction of the next one. Comparisons go through
:class:`fractions.Fraction` so ``[1, 1, 2]`` and ``[1, 2, 4]`` land on the
same position regardless of the divisor used in the chart.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Any

from malody_chart.errors import InvalidBeatTime, InvalidDenominator


class Ordering(Enum):
    """Result of comparing two time-marked values."""

    LESS = -1
    EQUAL = 0
    GREATER = 1
    INCOMPARABLE = None


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _order(left: Any, right: Any) -> Ordering:
    if left < right:
        return Ordering.LESS
    if left > right:
        return Ordering.GREATER
    return Ordering.EQUAL


@dataclass(frozen=True, eq=False)
class BeatTime:
    """A musical position as a whole beat plus an exact fraction.

    Parameters
    ----------
    beat : int
        Whole beats from the chart offset.
    numerator : int
        Dividend of the fractional part.
    denominator : int
        Beat divisor; must be a positive integer.

    Raises
    ------
    InvalidDenominator
        If ``denominator`` is not a positive integer.
    InvalidBeatTime
        If ``beat`` or ``numerator`` is not an integer.

    Examples
    --------
    >>> BeatTime(1, 1, 2) == BeatTime(1, 2, 4)
    True
    >>> BeatTime(0, 0, 1) < BeatTime(1, 1, 2)
    True
    """

    beat: int
    numerator: int
    denominator: int

    def __post_init__(self) -> None:
        if not _is_int(self.denominator) or self.denominator <= 0:
            msg = f"Denominator must be a positive integer, got {self.denominator!r}"
            raise InvalidDenominator(msg)
        if not _is_int(self.beat) or not _is_int(self.numerator):
            msg = f"Beat and numerator must be integers, got {self.beat!r} and {self.numerator!r}"
            raise InvalidBeatTime(msg)

    @classmethod
    def from_wire(cls, value: Any) -> BeatTime:
        """Build a beat time from its JSON ``[beat, numerator, denominator]`` form.

        Parameters
        ----------
        value : Any
            The raw ``beat`` value of a chart entry.

        Returns
        -------
        BeatTime
            The parsed position.

        Raises
        ------
        InvalidDenominator
            If the value is missing or not a 3-item sequence, since no usable
            denominator can be read from it.
        """
        if isinstance(value, BeatTime):
            return value
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) != 3:
            msg = f"Beat must be a [beat, numerator, denominator] triple, got {value!r}"
            raise InvalidDenominator(msg)
        beat, numerator, denominator = value
        return cls(beat, numerator, denominator)

    @property
    def fraction(self) -> Fraction:
        """The fractional part as an exact (possibly improper) fraction."""
        return Fraction(self.numerator, self.denominator)

    def as_tuple(self) -> tuple[int, int, int]:
        """Return the canonical ``(beat, numerator, denominator)`` triple."""
        return (self.beat, self.numerator, self.denominator)

    def same_time(self, other: BeatTime) -> bool:
        """Check whether two beat times name the same position.

        Whole beats must match; the fractions are compared exactly, so a zero
        numerator matches any other zero numerator whatever the divisor.
        """
        if self.beat != other.beat:
            return False
        if self.numerator == 0 and other.numerator == 0:
            return True
        return self.fraction == other.fraction

    def compare(self, other: object) -> Ordering:
        """Order by whole beat, then by exact fraction.

        Returns :attr:`Ordering.INCOMPARABLE` instead of raising when
        ``other`` is not a beat time.
        """
        if not isinstance(other, BeatTime):
            return Ordering.INCOMPARABLE
        if self.beat != other.beat:
            return _order(self.beat, other.beat)
        return _order(self.fraction, other.fraction)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BeatTime):
            return NotImplemented
        return self.same_time(other)

    def __hash__(self) -> int:
        return hash((self.beat, self.fraction))

    def __lt__(self, other: object) -> bool:
        result = self.compare(other)
        if result is Ordering.INCOMPARABLE:
            return NotImplemented
        return result is Ordering.LESS

    def __le__(self, other: object) -> bool:
        result = self.compare(other)
        if result is Ordering.INCOMPARABLE:
            return NotImplemented
        return result is not Ordering.GREATER

    def __gt__(self, other: object) -> bool:
        result = self.compare(other)
        if result is Ordering.INCOMPARABLE:
            return NotImplemented
        return result is Ordering.GREATER

    def __ge__(self, other: object) -> bool:
        result = self.compare(other)
        if result is Ordering.INCOMPARABLE:
            return NotImplemented
        return result is not Ordering.LESS
