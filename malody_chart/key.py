"""Key mode (vertical scrolling lanes) chart types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from malody_chart.beat import BeatTime
from malody_chart.chart import BarlineMixin, Chart
from malody_chart.entries import EffectEntry, NoteEntry
from malody_chart.registry import Mode


@dataclass(frozen=True, eq=False)
class KeyEffect(EffectEntry):
    """Key mode effect, such as a ``scroll`` speed change."""


@dataclass(frozen=True, eq=False)
class KeyNote(NoteEntry):
    """A key mode note.

    Parameters
    ----------
    column : int | None
        Zero-based lane index.
    end : BeatTime | None
        End of a hold note (``endbeat``); None for a tap.
    """

    column: int | None = None
    end: BeatTime | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.end is not None:
            object.__setattr__(self, "end", BeatTime.from_wire(self.end))

    @classmethod
    def _wire_fields(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        fields = super()._wire_fields(data)
        fields["column"] = data.get("column")
        if data.get("endbeat") is not None:
            fields["end"] = BeatTime.from_wire(data["endbeat"])
        return fields

    @property
    def is_hold(self) -> bool:
        return self.end is not None

    def _payload(self) -> tuple[Any, ...]:
        return (*super()._payload(), self.column, self.end)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.column is not None:
            data["column"] = self.column
        if self.end is not None:
            data["endbeat"] = list(self.end.as_tuple())
        return data


@dataclass(frozen=True, kw_only=True)
class KeyChart(BarlineMixin, Chart):
    """Key mode chart.

    Parameters
    ----------
    columns : int | None
        Number of lanes, from ``mode_ext.column``.
    """

    MODE: ClassVar[Mode] = Mode.KEY
    effect_type: ClassVar[type[EffectEntry]] = KeyEffect
    note_type: ClassVar[type[NoteEntry]] = KeyNote

    columns: int | None = None

    @classmethod
    def _extension_fields(cls, extra: Mapping[str, Any]) -> dict[str, Any]:
        fields = super()._extension_fields(extra)
        fields["columns"] = extra.get("column")
        return fields

    def extension_data(self) -> dict[str, Any]:
        data = super().extension_data()
        if self.columns is not None:
            data["column"] = self.columns
        return data
