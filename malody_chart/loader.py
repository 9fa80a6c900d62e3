"""Chart JSON loading.

This module translates the Malody chart JSON layout into the normalized
bag consumed by :meth:`malody_chart.chart.Chart.from_bag`, choosing the
concrete chart class from the document's mode.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import IO, Any

from malody_chart.chart import Chart
from malody_chart.errors import ModeNotImplemented, UnsupportedMode
from malody_chart.key import KeyChart
from malody_chart.paths import get_path, remap
from malody_chart.registry import ModeNamespace, ModeRegistry

logger = logging.getLogger(__name__)

# Chart JSON path -> normalized bag path
FIELD_MAP: tuple[tuple[str, str], ...] = (
    ("meta.$ver", "meta.version"),
    ("meta.creator", "meta.creator"),
    ("meta.background", "meta.bg"),
    ("meta.version", "meta.name"),
    ("meta.preview", "meta.preview"),
    ("meta.id", "meta.chart_id"),
    ("meta.mode", "meta.mode"),
    ("meta.time", "meta.time"),
    ("meta.song.id", "meta.set_id"),
    ("meta.song.artist", "meta.song.artist"),
    ("meta.song.title", "meta.song.title"),
    # The client writes artistorg/titleorg; the explicit names win if both exist
    ("meta.song.artistorg", "meta.song.artist_unicode"),
    ("meta.song.titleorg", "meta.song.title_unicode"),
    ("meta.song.artist_unicode", "meta.song.artist_unicode"),
    ("meta.song.title_unicode", "meta.song.title_unicode"),
    ("meta.mode_ext", "extra"),
    ("time", "timing"),
    ("effect", "effect"),
    ("note", "object"),
    ("extra", "passthrough"),
)

DEFAULT_REGISTRY = ModeRegistry.from_enum([ModeNamespace.of(KeyChart)])


def resolve_namespace(document: Mapping[str, Any], registry: ModeRegistry) -> ModeNamespace:
    """Find the chart types for a document's ``meta.mode``.

    Raises
    ------
    UnsupportedMode
        If the mode identifier has no registered name.
    ModeNotImplemented
        If the mode is named but has no implemented types.
    """
    mode_id = get_path(document, "meta.mode", None)
    name = registry.name_for(mode_id)
    if name is None:
        raise UnsupportedMode(mode_id)
    namespace = registry.namespace_for(mode_id)
    if namespace is None:
        raise ModeNotImplemented(mode_id, name)
    logger.debug("Resolved mode %d (%s) to %s", mode_id, name, namespace.chart.__name__)
    return namespace


def build_bag(document: Mapping[str, Any]) -> dict[str, Any]:
    """Translate chart JSON into the normalized construction bag.

    Parameters
    ----------
    document : Mapping[str, Any]
        Parsed chart JSON.

    Returns
    -------
    dict[str, Any]
        Groups ``meta``, ``timing``, ``effect``, ``object``, ``extra`` and
        ``passthrough``. Entry arrays are passed through untouched.
    """
    bag = remap(document, FIELD_MAP)
    bag.setdefault("meta", {})
    for group in ("timing", "effect", "object"):
        if bag.get(group) is None:
            bag[group] = []
    bag.setdefault("extra", {})
    bag.setdefault("passthrough", None)
    return bag


def parse(document: Mapping[str, Any], *, registry: ModeRegistry = DEFAULT_REGISTRY) -> Chart:
    """Parse a chart JSON object into a chart document.

    Parameters
    ----------
    document : Mapping[str, Any]
        Parsed chart JSON.
    registry : ModeRegistry, optional
        Mode table used to pick the chart types.

    Returns
    -------
    Chart
        The concrete chart for the document's mode.

    Raises
    ------
    UnsupportedMode, ModeNotImplemented
        If the mode cannot be resolved to chart types.
    MissingField, FieldTypeMismatch
        If required metadata is absent or mistyped.
    InvalidBeatTime
        If any entry has a malformed beat.

    Examples
    --------
    >>> chart = parse({
    ...     "meta": {"$ver": 0, "creator": "me", "background": "bg.jpg",
    ...              "version": "4K Easy", "preview": 0, "id": 1, "mode": 0,
    ...              "time": 0, "song": {"id": 2, "title": "Song"},
    ...              "mode_ext": {"column": 4}},
    ...     "time": [{"beat": [0, 0, 1], "bpm": 120}],
    ...     "note": [{"beat": [0, 0, 1], "column": 2}],
    ... })
    >>> chart.columns, len(chart.objects)
    (4, 1)
    """
    namespace = resolve_namespace(document, registry)
    return namespace.chart.from_bag(build_bag(document))


def load(
    source: IO[str] | IO[bytes] | str | bytes | Mapping[str, Any],
    *,
    registry: ModeRegistry = DEFAULT_REGISTRY,
) -> Chart:
    """Load a chart from a stream, JSON text, or an already parsed object.

    Parameters
    ----------
    source : IO[str] | IO[bytes] | str | bytes | Mapping[str, Any]
        A readable stream of JSON, a JSON string or bytes blob, or a parsed
        JSON object.
    registry : ModeRegistry, optional
        Mode table used to pick the chart types.

    Returns
    -------
    Chart
        The concrete chart for the document's mode.

    Raises
    ------
    TypeError
        If ``source`` is none of the accepted shapes.
    json.JSONDecodeError
        If text input is not valid JSON.
    """
    if hasattr(source, "read"):
        return parse(json.loads(source.read()), registry=registry)
    if isinstance(source, (str, bytes, bytearray)):
        return parse(json.loads(source), registry=registry)
    if isinstance(source, Mapping):
        return parse(source, registry=registry)
    msg = f"Cannot load chart from {type(source).__name__}"
    raise TypeError(msg)
