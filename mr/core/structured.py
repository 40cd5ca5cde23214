"""Helpers for reading untyped JSON/TOML payloads.

Release service responses and settings files arrive as plain dicts and lists;
these helpers validate shapes at runtime and narrow types statically.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, stripping whitespace.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_int(table: Mapping[str, object], key: str) -> int | None:
    """Get an int value; bools are rejected."""
    value = table.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> ObjList | None:
    return as_obj_list(table.get(key))


def iter_tables(items: ObjList | None) -> list[StrDict]:
    """Return the dict entries of a list, skipping anything else."""
    if items is None:
        return []
    return [d for d in (as_str_dict(item) for item in items) if d is not None]
