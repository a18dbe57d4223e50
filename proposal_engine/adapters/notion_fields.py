"""Decoder for Notion page properties.

Every raw property is decoded into exactly one of a closed set of value
shapes. Shapes the app does not read (numbers, people, formulas, ...) and
missing properties both decode to :class:`Unsupported`, which every accessor
turns into an empty result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class TitleValue:
    text: str


@dataclass(frozen=True)
class RichTextValue:
    text: str


@dataclass(frozen=True)
class SelectValue:
    name: Optional[str]


@dataclass(frozen=True)
class MultiSelectValue:
    names: tuple[str, ...]


@dataclass(frozen=True)
class DateValue:
    start: Optional[str]


@dataclass(frozen=True)
class Unsupported:
    type: Optional[str]


PropertyValue = Union[TitleValue, RichTextValue, SelectValue, MultiSelectValue, DateValue, Unsupported]


def _plain_text(fragments) -> str:
    return "".join(fragment.get("plain_text", "") for fragment in fragments or []).strip()


def decode_property(properties: dict, name: str) -> PropertyValue:
    """Decode ``properties[name]`` into one of the known value shapes."""

    prop = properties.get(name)
    if not isinstance(prop, dict):
        return Unsupported(type=None)

    kind = prop.get("type")
    if kind == "title":
        return TitleValue(text=_plain_text(prop.get("title")))
    if kind == "rich_text":
        return RichTextValue(text=_plain_text(prop.get("rich_text")))
    if kind == "select":
        select = prop.get("select") or {}
        return SelectValue(name=select.get("name"))
    if kind == "multi_select":
        return MultiSelectValue(names=tuple(option.get("name", "") for option in prop.get("multi_select") or []))
    if kind == "date":
        date = prop.get("date") or {}
        return DateValue(start=date.get("start"))
    return Unsupported(type=kind)


def split_csv_text(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def as_title(value: PropertyValue) -> str:
    if isinstance(value, TitleValue):
        return value.text
    return ""


def as_text(value: PropertyValue) -> str:
    """Text from rich text or a single select; empty for other shapes."""

    if isinstance(value, RichTextValue):
        return value.text
    if isinstance(value, SelectValue):
        return (value.name or "").strip()
    return ""


def as_date(value: PropertyValue) -> Optional[str]:
    if isinstance(value, DateValue):
        return value.start
    return None


def as_categories(value: PropertyValue) -> list[str]:
    """Trimmed, non-empty category labels from select, multi-select or comma text."""

    if isinstance(value, MultiSelectValue):
        return [name.strip() for name in value.names if name.strip()]
    if isinstance(value, SelectValue):
        name = (value.name or "").strip()
        return [name] if name else []
    if isinstance(value, RichTextValue):
        return split_csv_text(value.text)
    return []
