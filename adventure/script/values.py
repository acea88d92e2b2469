"""Typed node properties.

Authored node properties arrive as loosely typed JSON values. They are wrapped
in a small tagged union (:class:`PropertyValue`) and collected in a
:class:`PropertyBag` whose accessors never fail: a missing key or a value that
cannot be converted resolves to the type-appropriate default (``""``, ``0``,
``False``).
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional

__all__ = [
    "ValueKind",
    "PropertyValue",
    "PropertyBag",
]

_TRUE_WORDS = {"1", "true", "yes", "on"}


class ValueKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    REF = "ref"


@dataclass(frozen=True)
class PropertyValue:
    kind: ValueKind
    raw: Any

    @classmethod
    def from_raw(cls, raw: Any, key: str = "") -> "PropertyValue":
        """Wrap a JSON value. Strings under ``*Id`` keys become id references."""
        if isinstance(raw, bool):
            return cls(ValueKind.BOOLEAN, raw)
        if isinstance(raw, (int, float)):
            return cls(ValueKind.NUMBER, raw)
        text = "" if raw is None else str(raw)
        if key.endswith("Id"):
            return cls(ValueKind.REF, text)
        return cls(ValueKind.TEXT, text)

    def as_text(self, default: str = "") -> str:
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.raw else "false"
        if self.kind is ValueKind.NUMBER:
            if isinstance(self.raw, float) and self.raw.is_integer():
                return str(int(self.raw))
            return str(self.raw)
        return self.raw if self.raw else default

    def as_number(self, default: float = 0) -> float:
        if self.kind is ValueKind.NUMBER:
            return self.raw
        if self.kind is ValueKind.BOOLEAN:
            return 1 if self.raw else 0
        try:
            return float(str(self.raw).strip())
        except ValueError:
            return default

    def as_int(self, default: int = 0) -> int:
        value = self.as_number(default)
        try:
            return int(value)
        except (ValueError, OverflowError):
            return default

    def as_bool(self, default: bool = False) -> bool:
        if self.kind is ValueKind.BOOLEAN:
            return self.raw
        if self.kind is ValueKind.NUMBER:
            return self.raw != 0
        text = str(self.raw).strip().lower()
        if not text:
            return default
        return text in _TRUE_WORDS

    def to_json(self) -> Any:
        return self.raw


class PropertyBag(Mapping[str, PropertyValue]):
    """Read-only, case-insensitive property map with safe-default accessors."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, PropertyValue] = {}
        self._names: Dict[str, str] = {}
        for key, raw in (values or {}).items():
            value = raw if isinstance(raw, PropertyValue) else PropertyValue.from_raw(raw, key)
            self._values[key.lower()] = value
            self._names[key.lower()] = key

    def __getitem__(self, key: str) -> PropertyValue:
        return self._values[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyBag):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._values.items(), key=lambda kv: kv[0])))

    def __repr__(self) -> str:
        return f"PropertyBag({self.to_dict()!r})"

    # --- Safe accessors ---
    def get_text(self, key: str, default: str = "") -> str:
        value = self._values.get(key.lower())
        return default if value is None else value.as_text(default)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self._values.get(key.lower())
        return default if value is None else value.as_int(default)

    def get_number(self, key: str, default: float = 0) -> float:
        value = self._values.get(key.lower())
        return default if value is None else value.as_number(default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._values.get(key.lower())
        return default if value is None else value.as_bool(default)

    def to_dict(self) -> Dict[str, Any]:
        return {self._names[k]: v.to_json() for k, v in self._values.items()}
