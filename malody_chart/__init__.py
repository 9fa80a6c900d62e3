"""Malody chart parser.

This library reads Malody chart files (``.mc`` JSON) into typed,
comparable chart documents built on exact rational beat positions, and
converts them back to the chart JSON layout.

Examples
--------
>>> from malody_chart import BeatTime, TimingEntry, load

>>> # Beat positions compare exactly, whatever the divisor
>>> BeatTime(1, 1, 2) == BeatTime(1, 2, 4)
True

>>> TimingEntry((0, 0, 1), 120).sec_per_beat
0.5

>>> # Mode bit fields
>>> from malody_chart import DEFAULT_REGISTRY
>>> DEFAULT_REGISTRY.combined_bits("key", "pad")
17
"""

import logging

from malody_chart.beat import BeatTime, Ordering
from malody_chart.chart import BarlineMixin, Chart, SongMetadata, validate_meta
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
    ChartError,
    FieldTypeMismatch,
    InvalidBeatTime,
    InvalidDenominator,
    MissingField,
    ModeMismatch,
    ModeNotImplemented,
    UnsupportedMode,
)
from malody_chart.key import KeyChart, KeyEffect, KeyNote
from malody_chart.loader import DEFAULT_REGISTRY, FIELD_MAP, build_bag, load, parse
from malody_chart.registry import Mode, ModeNamespace, ModeRegistry

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_REGISTRY",
    "FIELD_MAP",
    "AbstractInstantiation",
    "BarlineMixin",
    "BeatTime",
    "Chart",
    "ChartError",
    "CommandEntry",
    "EffectEntry",
    "FieldTypeMismatch",
    "InvalidBeatTime",
    "InvalidDenominator",
    "KeyChart",
    "KeyEffect",
    "KeyNote",
    "MissingField",
    "Mode",
    "ModeMismatch",
    "ModeNamespace",
    "ModeNotImplemented",
    "ModeRegistry",
    "NoteEntry",
    "Ordering",
    "SongMetadata",
    "TimeMarkedEntry",
    "TimingEntry",
    "UnsupportedMode",
    "build_bag",
    "classify_object",
    "load",
    "parse",
    "validate_meta",
]
