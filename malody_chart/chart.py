"""Chart document model.

:class:`Chart` is the abstract aggregate for one Malody beatmap: metadata,
song information, and three sorted entry collections. Each game mode
provides a concrete subclass declaring its mode identifier and the effect
and note types it builds (see :mod:`malody_chart.key`).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from malody_chart.abstract import Abstract
from malody_chart.entries import (
    CommandEntry,
    EffectEntry,
    NoteEntry,
    TimeMarkedEntry,
    TimingEntry,
    classify_object,
)
from malody_chart.errors import (
    AbstractInstantiation,
    FieldTypeMismatch,
    MissingField,
    ModeMismatch,
)
from malody_chart.paths import freeze, thaw

if TYPE_CHECKING:
    from malody_chart.registry import Mode

logger = logging.getLogger(__name__)

_C = TypeVar("_C", bound="Chart")

# Required metadata keys of the normalized bag, grouped by expected type
REQUIRED_META: tuple[tuple[type, tuple[str, ...]], ...] = (
    (int, ("version", "preview", "set_id", "chart_id", "time")),
    (str, ("creator", "bg", "name")),
)

# Typed Chart attributes, checked however the document is constructed
FIELD_TYPES: tuple[tuple[type, tuple[str, ...]], ...] = (
    (int, ("version", "preview", "set_id", "chart_id")),
    (str, ("creator", "background", "name")),
    (datetime, ("created_at",)),
)


def _matches(expected: type, value: object) -> bool:
    if expected is int and isinstance(value, bool):
        return False
    return isinstance(value, expected)


def validate_meta(meta: Mapping[str, Any]) -> None:
    """Check that every required metadata key is present with the right type.

    Parameters
    ----------
    meta : Mapping[str, Any]
        The ``meta`` group of a normalized chart bag.

    Raises
    ------
    MissingField
        If any required key is absent. Reported before any type fault.
    FieldTypeMismatch
        If any required key holds a value of the wrong type.
    """
    missing: list[str] = []
    mismatches: dict[str, list[tuple[str, str]]] = {}
    for expected, keys in REQUIRED_META:
        for key in keys:
            if key not in meta:
                missing.append(key)
                continue
            value = meta[key]
            if not _matches(expected, value):
                mismatches.setdefault(expected.__name__, []).append((key, type(value).__name__))

    if missing:
        raise MissingField(tuple(missing))
    if mismatches:
        raise FieldTypeMismatch(mismatches)


@dataclass(frozen=True)
class SongMetadata:
    """Artist and title of the charted song.

    Parameters
    ----------
    artist : str | None
        Romanized artist name.
    title : str | None
        Romanized title.
    artist_unicode : str | None
        Artist in its original script.
    title_unicode : str | None
        Title in its original script.
    """

    artist: str | None = None
    title: str | None = None
    artist_unicode: str | None = None
    title_unicode: str | None = None

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> SongMetadata:
        """Build from the normalized ``meta.song`` group."""
        return cls(
            artist=data.get("artist"),
            title=data.get("title"),
            artist_unicode=data.get("artist_unicode"),
            title_unicode=data.get("title_unicode"),
        )

    def to_dict(self, set_id: int | None = None) -> dict[str, Any]:
        """Convert to the chart JSON ``meta.song`` block."""
        data: dict[str, Any] = {}
        if set_id is not None:
            data["id"] = set_id
        for key in ("artist", "title", "artist_unicode", "title_unicode"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


def _time_key(entry: TimeMarkedEntry) -> Any:
    return entry.time


@dataclass(frozen=True, kw_only=True)
class Chart(Abstract):
    """Abstract chart document shared by every game mode.

    Concrete subclasses set ``MODE``, ``effect_type`` and ``note_type`` and
    may add extension fields read from the ``mode_ext`` block. Build them
    with :meth:`from_bag` (or :func:`malody_chart.parse`); the entry
    collections are sorted by time whichever way the object is made.

    Parameters
    ----------
    version : int
        Chart format version (``$ver``).
    creator : str
        Chart author.
    background : str
        Background image file.
    name : str
        Difficulty display name.
    preview : int
        Preview start offset.
    set_id : int
        Song (set) identifier.
    chart_id : int
        Chart identifier.
    created_at : datetime
        Last save time, timezone-aware UTC.
    song : SongMetadata
        Artist and title.
    timings : tuple[TimingEntry, ...]
        Tempo changes.
    effects : tuple[EffectEntry, ...]
        Mode effects.
    objects : tuple[CommandEntry, ...]
        Notes and commands.
    passthrough : Any
        The top-level ``extra`` block, stored as a read-only copy (mappings
        become ``MappingProxyType``, lists become tuples).

    Raises
    ------
    FieldTypeMismatch
        If a typed metadata attribute holds a value of the wrong type.
    AbstractInstantiation
        If the class is abstract.
    """

    _abstract: ClassVar[bool] = True
    MODE: ClassVar[Mode]
    effect_type: ClassVar[type[EffectEntry]] = EffectEntry
    note_type: ClassVar[type[NoteEntry]] = NoteEntry

    version: int
    creator: str
    background: str
    name: str
    preview: int
    set_id: int
    chart_id: int
    created_at: datetime
    song: SongMetadata = field(default_factory=SongMetadata)
    timings: tuple[TimingEntry, ...] = ()
    effects: tuple[EffectEntry, ...] = ()
    objects: tuple[CommandEntry, ...] = ()
    passthrough: Any = field(default=None, hash=False)

    def __post_init__(self) -> None:
        self._check_field_types()
        object.__setattr__(self, "passthrough", freeze(self.passthrough))
        for name in ("timings", "effects", "objects"):
            # sorted() is stable, so time-equal entries keep their input order
            object.__setattr__(self, name, tuple(sorted(getattr(self, name), key=_time_key)))

    def _check_field_types(self) -> None:
        mismatches: dict[str, list[tuple[str, str]]] = {}
        for expected, names in FIELD_TYPES:
            for name in names:
                value = getattr(self, name)
                if not _matches(expected, value):
                    offenders = mismatches.setdefault(expected.__name__, [])
                    offenders.append((name, type(value).__name__))
        if mismatches:
            raise FieldTypeMismatch(mismatches)

    @property
    def mode(self) -> Mode:
        """The numeric mode identifier of this chart type."""
        return self.MODE

    @classmethod
    def from_bag(cls: type[_C], bag: Mapping[str, Any]) -> _C:
        """Validate a normalized chart bag and build the document.

        Parameters
        ----------
        bag : Mapping[str, Any]
            Groups ``meta``, ``timing``, ``effect``, ``object``, ``extra``
            (the ``mode_ext`` block) and ``passthrough``, as produced by
            :func:`malody_chart.loader.build_bag`.

        Returns
        -------
        Chart
            The concrete chart document.

        Raises
        ------
        MissingField, FieldTypeMismatch
            If required metadata is absent or mistyped.
        ModeMismatch
            If ``meta.mode`` is not this class's mode.
        InvalidBeatTime
            If any entry has a malformed beat.
        AbstractInstantiation
            If called on an abstract chart class.
        """
        if cls.__dict__.get("_abstract", False):
            raise AbstractInstantiation(cls)
        meta = bag.get("meta") or {}
        if "mode" in meta and meta["mode"] != cls.MODE:
            msg = f"{cls.__name__} is mode {int(cls.MODE)}, got mode {meta['mode']!r}"
            raise ModeMismatch(msg)
        validate_meta(meta)

        timings = [TimingEntry.from_wire(obj) for obj in bag.get("timing") or ()]
        effects = [cls.effect_type.from_wire(obj) for obj in bag.get("effect") or ()]
        objects: list[CommandEntry] = []
        for obj in bag.get("object") or ():
            if classify_object(obj) == "command":
                objects.append(CommandEntry.from_wire(obj))
            else:
                objects.append(cls.note_type.from_wire(obj))

        chart = cls(
            version=meta["version"],
            creator=meta["creator"],
            background=meta["bg"],
            name=meta["name"],
            preview=meta["preview"],
            set_id=meta["set_id"],
            chart_id=meta["chart_id"],
            created_at=datetime.fromtimestamp(meta["time"], tz=timezone.utc),
            song=SongMetadata.from_wire(meta.get("song") or {}),
            timings=tuple(timings),
            effects=tuple(effects),
            objects=tuple(objects),
            passthrough=bag.get("passthrough"),
            **cls._extension_fields(bag.get("extra") or {}),
        )
        logger.debug(
            "Built %s: %d timings, %d effects, %d objects",
            cls.__name__,
            len(chart.timings),
            len(chart.effects),
            len(chart.objects),
        )
        return chart

    @classmethod
    def _extension_fields(cls, extra: Mapping[str, Any]) -> dict[str, Any]:
        """Map the ``mode_ext`` block to constructor keywords."""
        return {}

    def extension_data(self) -> dict[str, Any]:
        """Return the ``mode_ext`` block for this chart."""
        return {}

    @property
    def notes(self) -> tuple[NoteEntry, ...]:
        """Playable objects only, without commands."""
        return tuple(obj for obj in self.objects if isinstance(obj, NoteEntry))

    def to_dict(self) -> dict[str, Any]:
        """Reassemble the chart JSON structure.

        Returns
        -------
        dict[str, Any]
            Top-level ``meta``, ``time``, ``effect``, ``note`` and, when
            present, ``extra`` keys.
        """
        data: dict[str, Any] = {
            "meta": {
                "$ver": self.version,
                "creator": self.creator,
                "background": self.background,
                "version": self.name,
                "preview": self.preview,
                "id": self.chart_id,
                "mode": int(self.mode),
                "time": int(self.created_at.timestamp()),
                "song": self.song.to_dict(self.set_id),
                "mode_ext": self.extension_data(),
            },
            "time": [entry.to_dict() for entry in self.timings],
            "effect": [entry.to_dict() for entry in self.effects],
            "note": [entry.to_dict() for entry in self.objects],
        }
        if self.passthrough is not None:
            data["extra"] = thaw(self.passthrough)
        return data


@dataclass(frozen=True, kw_only=True)
class BarlineMixin:
    """Extension for modes whose ``mode_ext`` carries a bar-line offset.

    Parameters
    ----------
    bar_begin : int | None
        Offset of the first bar line, from ``mode_ext.bar_begin``.
    """

    bar_begin: int | None = None

    @classmethod
    def _extension_fields(cls, extra: Mapping[str, Any]) -> dict[str, Any]:
        fields = super()._extension_fields(extra)  # type: ignore[misc]
        fields["bar_begin"] = extra.get("bar_begin")
        return fields

    def extension_data(self) -> dict[str, Any]:
        data = super().extension_data()  # type: ignore[misc]
        if self.bar_begin is not None:
            data["bar_begin"] = self.bar_begin
        return data
