#!/usr/bin/env python3
"""
Core Data Model Helpers for Finance Tracker

Records are Python dataclasses with snake_case attributes, persisted as JSON
objects with camelCase keys. ``JsonRecord`` provides the mapping in both
directions and carries keys it does not recognize through unchanged, so a
document written by a newer version is not silently stripped on rewrite.
"""

import random
import string
import time
from dataclasses import MISSING, dataclass, field, fields
from typing import Any, TypeVar

R = TypeVar("R", bound="JsonRecord")

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_id() -> str:
    """
    Generate a record id: epoch milliseconds followed by 9 random base36 chars.

    Example:
        generate_id() -> "1718035200123k3j9x0q2a"
    """
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{int(time.time() * 1000)}{suffix}"


def to_camel(name: str) -> str:
    """Convert a snake_case attribute name to its camelCase JSON key."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


@dataclass
class JsonRecord:
    """
    Base for persisted records.

    Subclasses may set ``_json_keys`` to override the camelCase key of an
    attribute when the stored name is not a mechanical conversion
    (e.g. ``gold_etfs`` stored as ``goldETFs``).
    """

    extra: dict[str, Any] = field(default_factory=dict, repr=False, compare=False, kw_only=True)

    _json_keys = {}

    @classmethod
    def _key_for(cls, name: str) -> str:
        return cls._json_keys.get(name, to_camel(name))

    @classmethod
    def _record_fields(cls):
        return [f for f in fields(cls) if f.name != "extra"]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dict; attributes set to None are omitted."""
        result: dict[str, Any] = {}
        for f in self._record_fields():
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, JsonRecord):
                value = value.to_dict()
            elif isinstance(value, list):
                value = [v.to_dict() if isinstance(v, JsonRecord) else v for v in value]
            result[self._key_for(f.name)] = value
        for key, value in self.extra.items():
            result.setdefault(key, value)
        return result

    @classmethod
    def from_dict(cls: type[R], data: dict[str, Any]) -> R:
        """
        Create a record from its stored dict.

        Missing required attributes fall back to the type's zero value so a
        partially written legacy record still loads.
        """
        kwargs: dict[str, Any] = {}
        known = set()
        for f in cls._record_fields():
            key = cls._key_for(f.name)
            known.add(key)
            if key in data:
                kwargs[f.name] = data[key]
            elif f.default is MISSING and f.default_factory is MISSING:
                kwargs[f.name] = _zero_for(f.type)
        extra = {k: v for k, v in data.items() if k not in known}
        return cls(**kwargs, extra=extra)

    @classmethod
    def json_keys(cls) -> list[str]:
        """All JSON keys this record type knows about."""
        return [cls._key_for(f.name) for f in cls._record_fields()]


def _zero_for(type_hint: Any) -> Any:
    hint = type_hint if isinstance(type_hint, str) else getattr(type_hint, "__name__", str(type_hint))
    if hint.startswith("float"):
        return 0.0
    if hint.startswith("int"):
        return 0
    if hint.startswith("bool"):
        return False
    if hint.startswith("list"):
        return []
    if hint.startswith("dict"):
        return {}
    return ""
