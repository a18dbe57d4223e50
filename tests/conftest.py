from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from proposal_engine.schema import ChecklistItem, Project, TaskRef
from proposal_engine.store import ProposalStore


class FakeSource:
    def __init__(self, projects=None, checklist=None):
        self.projects = list(projects or [])
        self.checklist = list(checklist or [])
        self.checklist_calls = 0

    def list_projects(self):
        return list(self.projects)

    def list_checklist_items(self):
        self.checklist_calls += 1
        return list(self.checklist)


class FakeSink:
    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    def create_task(self, task_name, work_category, project_ref, due_date=None, status_label=None):
        if task_name == self.fail_on:
            raise RuntimeError("task database rejected the write")
        self.calls.append(
            {
                "task_name": task_name,
                "work_category": work_category,
                "project_ref": project_ref,
                "due_date": due_date,
                "status_label": status_label,
            }
        )
        task_id = f"task-{len(self.calls)}"
        return TaskRef(id=task_id, url=f"https://notion.so/{task_id}")


def ticking_clock():
    ticks = count()
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    return lambda: start + timedelta(seconds=next(ticks))


@pytest.fixture
def store(tmp_path):
    with ProposalStore(str(tmp_path / "proposals.db"), clock=ticking_clock()) as opened:
        yield opened


@pytest.fixture
def checklist():
    return [
        ChecklistItem("c1", "메인 포스터", "디자인", "3주 전", []),
        ChecklistItem("c2", "SNS 홍보물", "홍보", "10일 전", ["컨퍼런스"]),
        ChecklistItem("c3", "현장 운영 매뉴얼", "운영", "당일", ["컨퍼런스", "워크숍"]),
        ChecklistItem("c4", "세미나 자료집", "편집", "미정", ["세미나"]),
    ]


@pytest.fixture
def conference():
    return Project("p-new", "봄 컨퍼런스", "2025-05-10", ["컨퍼런스"])
