"""Proposal generation for newly seen projects."""

from __future__ import annotations

from proposal_engine.dates import add_offset
from proposal_engine.due_text import parse_final_due_text
from proposal_engine.rule_table import resolve_offset
from proposal_engine.schema import ChecklistItem, DeadlineSuggestion, Project, Proposal


def applies_to(project: Project, item: ChecklistItem) -> bool:
    """Category metadata is advisory: empty on either side means "applies"."""

    if not project.categories or not item.event_categories:
        return True
    return bool(set(project.categories) & set(item.event_categories))


def build_proposal(project: Project, item: ChecklistItem) -> Proposal:
    offset_days = resolve_offset(item.work_category)
    parsed = parse_final_due_text(item.final_due_text)
    return Proposal(
        project_id=project.id,
        project_name=project.name,
        checklist_item_id=item.id,
        task_name=item.product_name,
        work_category=item.work_category,
        final_due_text=item.final_due_text,
        due_date=add_offset(project.event_date, offset_days),
        offset_days=offset_days,
        ai_deadline_suggestion=DeadlineSuggestion(offset_days=parsed.offset_days) if parsed else None,
    )


def build_proposals(project: Project, checklist: list[ChecklistItem]) -> list[Proposal]:
    """Return one pending proposal per checklist item applicable to ``project``."""

    return [build_proposal(project, item) for item in checklist if applies_to(project, item)]
