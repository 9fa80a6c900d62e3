"""Time-marked chart entries.

Every record in a chart's ``time``, ``effect`` and ``note`` arrays is anchored
to a :class:`~malody_chart.beat.BeatTime`. Entries compare by that time
within their own family (timing, effect, command/note); entries of unrelated
families are incomparable.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, ClassVar, Literal, TypeVar

from malody_chart.abstract import Abstract
from malody_chart.beat import BeatTime, Ordering
from malody_chart.paths import freeze, thaw

_E = TypeVar("_E", bound="TimeMarkedEntry")

ObjectKind = Literal["command", "note"]

# An object carrying both of these is a command, not a playable note
COMMAND_FIELDS: tuple[str, str] = ("sound", "offset")


def classify_object(data: Mapping[str, Any]) -> ObjectKind:
    """Decide whether a ``note`` array element is a command or a note.

    Parameters
    ----------
    data : Mapping[str, Any]
        One raw element of the chart's ``note`` array.

    Returns
    -------
    ObjectKind
        ``"command"`` when the element has both a ``sound`` and an
        ``offset`` field, ``"note"`` otherwise.

    Examples
    --------
    >>> classify_object({"beat": [0, 0, 1], "sound": "bgm.ogg", "offset": 211})
    'command'
    >>> classify_object({"beat": [0, 0, 1], "column": 2})
    'note'
    """
    if all(name in data for name in COMMAND_FIELDS):
        return "command"
    return "note"


@dataclass(frozen=True, eq=False)
class TimeMarkedEntry(Abstract):
    """Base of every beat-anchored chart record.

    Parameters
    ----------
    time : BeatTime
        Position of the entry. A ``(beat, numerator, denominator)`` tuple is
        accepted and converted.
    """

    _abstract: ClassVar[bool] = True
    # Entries only compare against entries sharing the same family root
    _family: ClassVar[type | None] = None

    time: BeatTime

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if TimeMarkedEntry in cls.__bases__:
            cls._family = cls

    def __post_init__(self) -> None:
        object.__setattr__(self, "time", BeatTime.from_wire(self.time))

    @classmethod
    def from_wire(cls: type[_E], data: Mapping[str, Any]) -> _E:
        """Build an entry from one element of a chart JSON array.

        Unknown fields are ignored.
        """
        return cls(**cls._wire_fields(data))

    @classmethod
    def _wire_fields(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        return {"time": BeatTime.from_wire(data.get("beat"))}

    def _payload(self) -> tuple[Any, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the chart JSON shape."""
        return {"beat": list(self.time.as_tuple())}

    def compare(self, other: object) -> Ordering:
        """Compare by time, or report incomparable across families."""
        if not isinstance(other, TimeMarkedEntry) or self._family is not other._family:
            return Ordering.INCOMPARABLE
        return self.time.compare(other.time)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeMarkedEntry):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.compare(other) is Ordering.EQUAL
            and self._payload() == other._payload()
        )

    def __hash__(self) -> int:
        return hash((self._family, self.time))

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


@dataclass(frozen=True, eq=False)
class TimingEntry(TimeMarkedEntry):
    """A tempo change.

    Parameters
    ----------
    time : BeatTime
        Where the tempo takes effect.
    bpm : float
        Beats per minute. Not range-checked; a zero BPM only fails once
        :attr:`sec_per_beat` or :attr:`ms_per_beat` is read.

    Examples
    --------
    >>> TimingEntry((0, 0, 1), 120).sec_per_beat
    0.5
    """

    bpm: float

    @classmethod
    def _wire_fields(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        fields = super()._wire_fields(data)
        fields["bpm"] = data.get("bpm")
        return fields

    def _payload(self) -> tuple[Any, ...]:
        return (self.bpm,)

    @property
    def sec_per_beat(self) -> float:
        """Seconds per beat, divided exactly before converting to float."""
        return float(Fraction(60) / Fraction(self.bpm))

    @property
    def ms_per_beat(self) -> float:
        """Milliseconds per beat, divided exactly before converting to float."""
        return float(Fraction(60000) / Fraction(self.bpm))

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["bpm"] = self.bpm
        return data


@dataclass(frozen=True, eq=False)
class EffectEntry(TimeMarkedEntry):
    """A non-playable directive (scroll speed, display hints, ...).

    Parameters
    ----------
    time : BeatTime
        Where the effect applies.
    payload : Mapping[str, Any]
        Every field of the JSON object besides ``beat``, stored as a
        read-only copy.
    """

    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "payload", freeze(self.payload))

    @classmethod
    def _wire_fields(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        fields = super()._wire_fields(data)
        fields["payload"] = {k: v for k, v in data.items() if k != "beat"}
        return fields

    def _payload(self) -> tuple[Any, ...]:
        return (thaw(self.payload),)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(thaw(self.payload))
        return data


@dataclass(frozen=True, eq=False)
class CommandEntry(TimeMarkedEntry):
    """A resource trigger, such as a background sample played at a beat.

    Notes derive from this class, so commands and notes share one
    comparison family and can be sorted together.

    Parameters
    ----------
    time : BeatTime
        Trigger position.
    sound : str | None
        Referenced sound file.
    offset : int | None
        Playback offset into the sound, in milliseconds.
    volume : int | None
        Playback volume (``vol`` in JSON).
    kind : int | None
        Command type code (``type`` in JSON).
    """

    sound: str | None = None
    offset: int | None = None
    volume: int | None = None
    kind: int | None = None

    @classmethod
    def _wire_fields(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        fields = super()._wire_fields(data)
        fields.update(
            sound=data.get("sound"),
            offset=data.get("offset"),
            volume=data.get("vol"),
            kind=data.get("type"),
        )
        return fields

    def _payload(self) -> tuple[Any, ...]:
        return (self.sound, self.offset, self.volume, self.kind)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        for key, value in (
            ("sound", self.sound),
            ("offset", self.offset),
            ("vol", self.volume),
            ("type", self.kind),
        ):
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True, eq=False)
class NoteEntry(CommandEntry):
    """A playable, scorable object. Modes subclass this with positional data."""
