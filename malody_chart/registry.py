"""Game mode identifiers and the mode registry.

Malody stores modes as small integers and mode sets as bit fields
(``1 << mode``). :class:`ModeRegistry` is an immutable lookup table from
symbolic names to identifiers, plus the concrete chart types implemented
for each identifier.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from malody_chart.chart import Chart
    from malody_chart.entries import EffectEntry, NoteEntry


class Mode(IntEnum):
    """Numeric mode identifiers. 1 and 2 are reserved."""

    KEY = 0
    CATCH = 3
    PAD = 4
    TAIKO = 5
    RING = 6
    SLIDE = 7
    LIVE = 8


@dataclass(frozen=True)
class ModeNamespace:
    """The concrete types used to build charts of one mode.

    Parameters
    ----------
    chart : type[Chart]
        Concrete chart document class.
    effect : type[EffectEntry]
        Effect entry class for the ``effect`` array.
    note : type[NoteEntry]
        Note entry class for playable ``note`` array elements.
    """

    chart: type[Chart]
    effect: type[EffectEntry]
    note: type[NoteEntry]

    @classmethod
    def of(cls, chart: type[Chart]) -> ModeNamespace:
        """Collect the namespace declared by a concrete chart class."""
        return cls(chart=chart, effect=chart.effect_type, note=chart.note_type)

    @property
    def mode(self) -> int:
        return int(self.chart.MODE)


ModeRef = str | int


@dataclass(frozen=True, eq=False)
class ModeRegistry:
    """Immutable table of mode names, identifiers and implementations.

    Parameters
    ----------
    modes : Mapping[str, int]
        Symbolic name to numeric identifier.
    namespaces : Mapping[int, ModeNamespace]
        Numeric identifier to implemented types. An identifier may be
        registered in ``modes`` without a namespace.

    Examples
    --------
    >>> registry = ModeRegistry({"key": 0, "pad": 4})
    >>> registry.combined_bits("key", 4)
    17
    >>> sorted(registry.modes_from_bits(17))
    ['key', 'pad']
    """

    modes: Mapping[str, int]
    namespaces: Mapping[int, ModeNamespace] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "modes", MappingProxyType(dict(self.modes)))
        object.__setattr__(self, "namespaces", MappingProxyType(dict(self.namespaces)))

    @classmethod
    def from_enum(cls, namespaces: Iterable[ModeNamespace] = ()) -> ModeRegistry:
        """Build a registry of every :class:`Mode`, named in lower case."""
        return cls(
            modes={mode.name.lower(): int(mode) for mode in Mode},
            namespaces={ns.mode: ns for ns in namespaces},
        )

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.modes)

    def id_for(self, value: ModeRef) -> int | None:
        """Resolve a name or identifier to a registered identifier."""
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            return self.modes.get(value)
        if isinstance(value, int) and int(value) in self.modes.values():
            return int(value)
        return None

    def name_for(self, mode_id: object) -> str | None:
        """Return the symbolic name of an identifier, or None if unregistered."""
        if isinstance(mode_id, bool) or not isinstance(mode_id, int):
            return None
        for name, value in self.modes.items():
            if value == mode_id:
                return name
        return None

    def namespace_for(self, mode_id: int) -> ModeNamespace | None:
        return self.namespaces.get(mode_id)

    def bit_for(self, value: ModeRef) -> int | None:
        """Return ``1 << id`` for a registered name or identifier.

        Returns None when the value is not registered.
        """
        mode_id = self.id_for(value)
        if mode_id is None:
            return None
        return 1 << mode_id

    def combined_bits(self, *values: ModeRef) -> int | None:
        """OR together the bits of several modes.

        Unresolvable values are skipped. Returns None when no value was
        given or none of them resolved.
        """
        bits = [bit for bit in (self.bit_for(value) for value in values) if bit is not None]
        if not bits:
            return None
        result = 0
        for bit in bits:
            result |= bit
        return result

    def modes_from_bits(self, value: int) -> frozenset[str]:
        """Return the names of every registered mode whose bit is set."""
        return frozenset(name for name, mode_id in self.modes.items() if value & (1 << mode_id))

    def with_namespace(self, namespace: ModeNamespace) -> ModeRegistry:
        """Return a copy of the registry with one more implemented mode."""
        namespaces = dict(self.namespaces)
        namespaces[namespace.mode] = namespace
        return ModeRegistry(modes=self.modes, namespaces=namespaces)
