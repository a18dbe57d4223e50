"""Parser for free-text final due descriptions such as ``3일 전``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from proposal_engine.schema import SOURCE_TEXT_PARSER

_DAYS_BEFORE = re.compile(r"(\d+)\s*일\s*전")
_WEEKS_BEFORE = re.compile(r"(\d+)\s*주\s*전")
_SAME_DAY = "당일"


@dataclass(frozen=True)
class ParsedDueText:
    offset_days: int
    source: str = SOURCE_TEXT_PARSER


def parse_final_due_text(text: Optional[str]) -> Optional[ParsedDueText]:
    """Extract a signed day offset, or ``None`` when no pattern is recognized.

    Patterns are tried in order: days before, weeks before, same day.
    ``None`` means no inference is possible and is distinct from an offset of 0.
    """

    stripped = (text or "").strip()
    if not stripped:
        return None

    days = _DAYS_BEFORE.search(stripped)
    if days:
        return ParsedDueText(offset_days=-int(days.group(1)))

    weeks = _WEEKS_BEFORE.search(stripped)
    if weeks:
        return ParsedDueText(offset_days=-int(weeks.group(1)) * 7)

    if _SAME_DAY in stripped:
        return ParsedDueText(offset_days=0)

    return None
