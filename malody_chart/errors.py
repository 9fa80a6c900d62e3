"""Exceptions raised while building Malody chart data.

Every error derives from :class:`ChartError` and from the builtin exception
a generic caller would expect (``ValueError``, ``TypeError``, ...), so both
``except ChartError`` and the usual builtin handlers catch them.
"""

from __future__ import annotations


class ChartError(Exception):
    """Base class for all chart parsing and construction errors."""


class InvalidBeatTime(ChartError, ValueError):
    """A beat value is missing or is not a ``[beat, numerator, denominator]`` triple."""


class InvalidDenominator(InvalidBeatTime):
    """A beat time was given a denominator that is not a positive integer."""


class MissingField(ChartError, LookupError):
    """One or more required metadata keys are absent.

    Parameters
    ----------
    keys : tuple[str, ...]
        Every missing key, in declaration order.
    """

    def __init__(self, keys: tuple[str, ...]) -> None:
        self.keys = keys
        super().__init__(f"key {', '.join(keys)} is not defined")


class FieldTypeMismatch(ChartError, TypeError):
    """One or more required metadata keys hold a value of the wrong type.

    Parameters
    ----------
    mismatches : dict[str, list[tuple[str, str]]]
        Expected type name mapped to the ``(key, actual type name)`` pairs
        that violated it.

    Examples
    --------
    >>> str(FieldTypeMismatch({"int": [("version", "str")]}))
    'on version (given str), expected int'
    """

    def __init__(self, mismatches: dict[str, list[tuple[str, str]]]) -> None:
        self.mismatches = mismatches
        groups = []
        for expected, offenders in mismatches.items():
            given = ", ".join(f"{key} (given {actual})" for key, actual in offenders)
            groups.append(f"on {given}, expected {expected}")
        super().__init__("; ".join(groups))


class UnsupportedMode(ChartError, ValueError):
    """The document's mode identifier has no registered symbolic name."""

    def __init__(self, mode_id: object) -> None:
        self.mode_id = mode_id
        super().__init__(f"Unsupported mode ID {mode_id!r}")


class ModeNotImplemented(ChartError, NotImplementedError):
    """The mode is registered by name but has no concrete type namespace."""

    def __init__(self, mode_id: int, name: str) -> None:
        self.mode_id = mode_id
        self.name = name
        super().__init__(f"Namespace {name} (mode {mode_id}) is not implemented yet")


class ModeMismatch(ChartError, ValueError):
    """The metadata mode disagrees with the concrete chart class being built."""


class AbstractInstantiation(ChartError, TypeError):
    """An abstract base type was constructed directly."""

    def __init__(self, cls: type) -> None:
        self.cls = cls
        super().__init__(f"Cannot instantiate abstract class {cls.__name__}")
