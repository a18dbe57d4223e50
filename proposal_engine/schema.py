"""Core data schema for projects, checklist items and task proposals."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_DELETED = "deleted"

BASIS_EVENT_DATE = "event_date"
SOURCE_RULE_TABLE = "rule_table"
SOURCE_TEXT_PARSER = "text_parser"

EDITABLE_FIELDS = ("task_name", "work_category", "due_date")

DEFAULT_TASK_STATUS = "진행 전"


@dataclass
class Project:
    """Project record read from the project database."""

    id: str
    name: str
    event_date: Optional[str] = None
    categories: list[str] = field(default_factory=list)


@dataclass
class ChecklistItem:
    """Deliverable template applied to new projects."""

    id: str
    product_name: str
    work_category: str = ""
    final_due_text: str = ""
    event_categories: list[str] = field(default_factory=list)


@dataclass
class DeadlineSuggestion:
    """Advisory offset from the due-text parser, shown next to the real due date."""

    offset_days: int
    deadline_basis: str = BASIS_EVENT_DATE

    def to_record(self) -> dict:
        return {"deadline_basis": self.deadline_basis, "offset_days": self.offset_days}


@dataclass
class Proposal:
    """Draft task awaiting review.

    ``due_date`` and ``offset_days`` always come from the rule table.
    ``ai_deadline_suggestion`` is informational and is never copied into
    ``due_date``.
    """

    project_id: str
    project_name: str
    checklist_item_id: str
    task_name: str
    work_category: str
    offset_days: int
    due_date: Optional[str] = None
    final_due_text: str = ""
    ai_deadline_suggestion: Optional[DeadlineSuggestion] = None
    status: str = STATUS_PENDING
    deadline_basis: str = BASIS_EVENT_DATE
    due_date_source: str = SOURCE_RULE_TABLE
    id: Optional[str] = None
    notion_task_page_id: Optional[str] = None
    notion_task_page_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    approved_at: Optional[str] = None

    def to_record(self) -> dict:
        """Flatten into a plain dict suitable for storage or JSON."""

        return {
            "id": self.id,
            "status": self.status,
            "project_id": self.project_id,
            "project_name": self.project_name,
            "checklist_item_id": self.checklist_item_id,
            "task_name": self.task_name,
            "work_category": self.work_category,
            "final_due_text": self.final_due_text,
            "due_date": self.due_date,
            "deadline_basis": self.deadline_basis,
            "offset_days": self.offset_days,
            "due_date_source": self.due_date_source,
            "ai_deadline_suggestion": (
                self.ai_deadline_suggestion.to_record() if self.ai_deadline_suggestion else None
            ),
            "notion_task_page_id": self.notion_task_page_id,
            "notion_task_page_url": self.notion_task_page_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "approved_at": self.approved_at,
        }

    @classmethod
    def from_record(cls, record: dict) -> "Proposal":
        suggestion_raw = record.get("ai_deadline_suggestion")
        suggestion = None
        if suggestion_raw:
            suggestion = DeadlineSuggestion(
                offset_days=int(suggestion_raw["offset_days"]),
                deadline_basis=suggestion_raw.get("deadline_basis", BASIS_EVENT_DATE),
            )
        return cls(
            id=record.get("id"),
            status=record.get("status", STATUS_PENDING),
            project_id=record["project_id"],
            project_name=record.get("project_name", ""),
            checklist_item_id=record["checklist_item_id"],
            task_name=record.get("task_name", ""),
            work_category=record.get("work_category", ""),
            final_due_text=record.get("final_due_text") or "",
            due_date=record.get("due_date"),
            deadline_basis=record.get("deadline_basis", BASIS_EVENT_DATE),
            offset_days=int(record["offset_days"]),
            due_date_source=record.get("due_date_source", SOURCE_RULE_TABLE),
            ai_deadline_suggestion=suggestion,
            notion_task_page_id=record.get("notion_task_page_id"),
            notion_task_page_url=record.get("notion_task_page_url"),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
            approved_at=record.get("approved_at"),
        )


@dataclass
class SyncState:
    """Baseline of project ids seen by the last sync."""

    known_project_ids: set[str]
    updated_at: Optional[str] = None


@dataclass
class TaskRef:
    """Reference to a task page created in the task database."""

    id: str
    url: str


@dataclass
class ApprovalResult:
    proposal_id: str
    task_id: str
    task_url: str
