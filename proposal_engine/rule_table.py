"""Keyword to day-offset rules for work categories."""

from __future__ import annotations

DEFAULT_OFFSET_DAYS = -7

# Order matters: the first keyword found wins, so more urgent keywords go first.
RULE_TABLE: tuple[tuple[str, int], ...] = (
    ("메인", -21),
    ("핵심", -21),
    ("디자인", -14),
    ("홍보", -14),
    ("운영", -7),
)


def resolve_offset(work_category: str, rules: tuple[tuple[str, int], ...] = RULE_TABLE) -> int:
    """Return the offset of the first rule keyword contained in ``work_category``."""

    for keyword, offset_days in rules:
        if keyword in work_category:
            return offset_days
    return DEFAULT_OFFSET_DAYS
