"""Dotted-path access to nested mappings.

Paths such as ``"meta.song.artist"`` address one value inside a tree of
dicts, one segment per level. The helpers here never mutate their inputs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

# Sentinel for "no value at this path", distinct from a stored None
MISSING: Any = object()


def split_path(path: str) -> list[str]:
    """Split a dotted path into its segments.

    Examples
    --------
    >>> split_path("meta.song.artist")
    ['meta', 'song', 'artist']
    """
    return path.split(".")


def get_path(tree: Any, path: str, default: Any = MISSING) -> Any:
    """Read the value at a dotted path.

    Parameters
    ----------
    tree : Any
        Root mapping to read from.
    path : str
        Dot-delimited key path.
    default : Any
        Returned when any segment is absent or lands on a non-mapping.

    Examples
    --------
    >>> get_path({"meta": {"song": {"id": 7}}}, "meta.song.id")
    7
    >>> get_path({"meta": {}}, "meta.song.id", None) is None
    True
    """
    node = tree
    for segment in split_path(path):
        if not isinstance(node, Mapping) or segment not in node:
            return default
        node = node[segment]
    return node


def set_path(tree: Mapping[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Return a copy of ``tree`` with ``value`` stored at a dotted path.

    Intermediate groups are created as empty dicts when missing; a non-mapping
    found along the way is replaced. Only the dicts along the path are
    copied.

    Examples
    --------
    >>> set_path({}, "meta.song.artist", "A")
    {'meta': {'song': {'artist': 'A'}}}
    """
    head, _, rest = path.partition(".")
    node = dict(tree)
    if not rest:
        node[head] = value
        return node
    child = node.get(head)
    if not isinstance(child, Mapping):
        child = {}
    node[head] = set_path(child, rest, value)
    return node


def remap(source: Any, table: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Build a new tree by copying values between dotted paths.

    Parameters
    ----------
    source : Any
        The tree to read from.
    table : Iterable[tuple[str, str]]
        ``(source path, destination path)`` pairs, applied in order. Pairs
        whose source is absent are skipped, so a later pair for the same
        destination overrides an earlier one only when its source exists.

    Returns
    -------
    dict[str, Any]
        The destination tree.

    Examples
    --------
    >>> remap({"meta": {"$ver": 1}}, [("meta.$ver", "meta.version"), ("meta.id", "meta.chart_id")])
    {'meta': {'version': 1}}
    """
    result: dict[str, Any] = {}
    for source_path, dest_path in table:
        value = get_path(source, source_path)
        if value is MISSING:
            continue
        result = set_path(result, dest_path, value)
    return result


def freeze(value: Any) -> Any:
    """Return a read-only copy of a JSON-like tree.

    Mappings become :class:`types.MappingProxyType` views over fresh dicts
    and lists become tuples, recursively.

    Examples
    --------
    >>> frozen = freeze({"a": [1, {"b": 2}]})
    >>> frozen["a"]
    (1, mappingproxy({'b': 2}))
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Return a mutable JSON-like copy of a tree made by :func:`freeze`.

    Examples
    --------
    >>> thaw(freeze({"a": [1, {"b": 2}]}))
    {'a': [1, {'b': 2}]}
    """
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value
