"""Helpers for string-keyed records (plain dicts preserving insertion order)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

K = TypeVar("K")
V = TypeVar("V")
W = TypeVar("W")


@dataclass(slots=True)
class RecordPatch:
    """Changes to apply to a remote record: keys to write and keys to delete."""

    updates: dict[str, Any] = field(default_factory=dict)
    deletions: set[str] = field(default_factory=set)

    def to_wire(self) -> dict[str, Any]:
        # The platform API deletes a key when it is sent as null.
        body = dict(self.updates)
        for key in sorted(self.deletions):
            body[key] = None
        return body


def map_values(record: Mapping[K, V], fn: Callable[[V], W]) -> dict[K, W]:
    return {key: fn(value) for key, value in record.items()}


def zip_records(
    left: Mapping[str, V] | None, right: Mapping[str, W] | None
) -> dict[str, tuple[V | None, W | None]]:
    """Pair values by key; left keys first, then keys only found on the right."""
    left = left or {}
    right = right or {}
    zipped: dict[str, tuple[V | None, W | None]] = {}
    for key in [*left, *(k for k in right if k not in left)]:
        zipped[key] = (left.get(key), right.get(key))
    return zipped


def diff_records(local: Mapping[str, Any] | None, remote: Mapping[str, Any] | None) -> RecordPatch:
    local = local or {}
    remote = remote or {}
    return RecordPatch(
        updates=dict(local),
        deletions={key for key in remote if key not in local},
    )


def set_null_on_missing_values(
    local: Mapping[str, Any] | None, remote: Mapping[str, Any] | None
) -> dict[str, Any]:
    return diff_records(local, remote).to_wire()
