"""Notion adapter: project/checklist source and task sink."""

from __future__ import annotations

import logging
from typing import Optional

from notion_client import Client

from proposal_engine.adapters.notion_fields import as_categories, as_date, as_text, as_title, decode_property
from proposal_engine.config import Settings
from proposal_engine.schema import DEFAULT_TASK_STATUS, ChecklistItem, Project, TaskRef

logger = logging.getLogger(__name__)

PROJECT_PROP = {
    "name": "프로젝트명",
    "event_date": "행사 진행일",
    "event_category": "행사 분류",
}

CHECKLIST_PROP = {
    "product_name": "제작물",
    "work_category": "작업 분류",
    "final_due_text": "최종 완료 시점",
    "event_category": "행사 분류",
}

TASK_PROP = {
    "task_name": "업무",
    "relation_project": "귀속 프로젝트",
    "due_date": "마감일",
    "status": "상태",
    "work_type": "업무구분",
}

UNTITLED_PROJECT = "제목 없음 프로젝트"
UNTITLED_PRODUCT = "제작물"
FALLBACK_WORK_TYPE = "기타"

_PAGE_SIZE = 100


def parse_project(page: dict) -> Project:
    props = page.get("properties") or {}
    return Project(
        id=page["id"],
        name=as_title(decode_property(props, PROJECT_PROP["name"])) or UNTITLED_PROJECT,
        event_date=as_date(decode_property(props, PROJECT_PROP["event_date"])),
        categories=as_categories(decode_property(props, PROJECT_PROP["event_category"])),
    )


def parse_checklist_item(page: dict) -> ChecklistItem:
    props = page.get("properties") or {}
    return ChecklistItem(
        id=page["id"],
        product_name=as_title(decode_property(props, CHECKLIST_PROP["product_name"])) or UNTITLED_PRODUCT,
        work_category=as_text(decode_property(props, CHECKLIST_PROP["work_category"])),
        final_due_text=as_text(decode_property(props, CHECKLIST_PROP["final_due_text"])),
        event_categories=as_categories(decode_property(props, CHECKLIST_PROP["event_category"])),
    )


def build_task_properties(
    property_types: dict[str, str],
    task_name: str,
    work_category: str,
    project_ref: str,
    due_date: Optional[str],
    status_label: Optional[str],
) -> dict:
    """Build page properties, writing only those whose type in the task database matches."""

    properties: dict = {}

    if property_types.get(TASK_PROP["task_name"]) == "title":
        properties[TASK_PROP["task_name"]] = {"title": [{"text": {"content": task_name}}]}

    work_type = property_types.get(TASK_PROP["work_type"])
    if work_type == "select":
        properties[TASK_PROP["work_type"]] = {"select": {"name": work_category or FALLBACK_WORK_TYPE}}
    elif work_type == "rich_text":
        properties[TASK_PROP["work_type"]] = {"rich_text": [{"text": {"content": work_category}}]}

    if property_types.get(TASK_PROP["relation_project"]) == "relation":
        properties[TASK_PROP["relation_project"]] = {"relation": [{"id": project_ref}]}

    if due_date and property_types.get(TASK_PROP["due_date"]) == "date":
        properties[TASK_PROP["due_date"]] = {"date": {"start": due_date}}

    status_name = status_label or DEFAULT_TASK_STATUS
    status_type = property_types.get(TASK_PROP["status"])
    if status_type == "status":
        properties[TASK_PROP["status"]] = {"status": {"name": status_name}}
    elif status_type == "select":
        properties[TASK_PROP["status"]] = {"select": {"name": status_name}}

    return properties


class NotionGateway:
    """Reads projects and checklist items, and writes approved tasks.

    The Notion client is passed in so tests can hand over a stand-in object.
    """

    def __init__(self, client, project_db_id: str, checklist_db_id: str, task_db_id: str):
        self.client = client
        self.project_db_id = project_db_id
        self.checklist_db_id = checklist_db_id
        self.task_db_id = task_db_id

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotionGateway":
        return cls(
            client=Client(auth=settings.notion_token),
            project_db_id=settings.project_db_id,
            checklist_db_id=settings.checklist_db_id,
            task_db_id=settings.task_db_id,
        )

    def _query_all(self, database_id: str) -> list[dict]:
        pages: list[dict] = []
        cursor = None
        while True:
            query = {"database_id": database_id, "page_size": _PAGE_SIZE}
            if cursor:
                query["start_cursor"] = cursor
            response = self.client.databases.query(**query)
            pages.extend(response.get("results", []))
            cursor = response.get("next_cursor")
            if not response.get("has_more") or not cursor:
                break
        logger.debug("Fetched %d page(s) from database %s", len(pages), database_id)
        return pages

    def list_projects(self) -> list[Project]:
        return [parse_project(page) for page in self._query_all(self.project_db_id)]

    def list_checklist_items(self) -> list[ChecklistItem]:
        return [parse_checklist_item(page) for page in self._query_all(self.checklist_db_id)]

    def _task_property_types(self) -> dict[str, str]:
        database = self.client.databases.retrieve(database_id=self.task_db_id)
        return {name: value.get("type") for name, value in (database.get("properties") or {}).items()}

    def create_task(
        self,
        task_name: str,
        work_category: str,
        project_ref: str,
        due_date: Optional[str] = None,
        status_label: Optional[str] = None,
    ) -> TaskRef:
        properties = build_task_properties(
            self._task_property_types(),
            task_name=task_name,
            work_category=work_category,
            project_ref=project_ref,
            due_date=due_date,
            status_label=status_label,
        )
        created = self.client.pages.create(parent={"database_id": self.task_db_id}, properties=properties)
        return TaskRef(id=created["id"], url=created.get("url", ""))
