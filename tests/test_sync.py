import pytest

from conftest import FakeSource
from proposal_engine.schema import Project
from proposal_engine.sync import run_sync


def existing_projects():
    return [
        Project("p1", "겨울 워크숍", "2025-01-20", ["워크숍"]),
        Project("p2", "세미나", None, ["세미나"]),
    ]


def test_first_run_records_baseline_only(store, checklist):
    source = FakeSource(existing_projects(), checklist)
    result = run_sync(source, store)

    assert result.baseline_created
    assert result.proposals == []
    assert store.get_state().known_project_ids == {"p1", "p2"}
    assert store.list_by_status("pending") == []
    assert source.checklist_calls == 0


def test_new_project_gets_one_proposal_per_applicable_item(store, checklist, conference):
    source = FakeSource(existing_projects(), checklist)
    run_sync(source, store)

    source.projects.append(conference)
    result = run_sync(source, store)

    assert result.new_project_ids == ["p-new"]
    assert len(result.proposals) == 3
    pending = store.list_by_status("pending")
    assert len(pending) == 3
    assert {p.project_id for p in pending} == {"p-new"}
    assert all(p.id for p in pending)
    assert store.get_state().known_project_ids == {"p1", "p2", "p-new"}


def test_rerun_without_new_projects_is_idempotent(store, checklist, conference):
    source = FakeSource(existing_projects(), checklist)
    run_sync(source, store)
    source.projects.append(conference)
    run_sync(source, store)

    before = store.get_state()
    result = run_sync(source, store)
    after = store.get_state()

    assert result.proposals == []
    assert len(store.list_by_status("pending")) == 3
    assert after.known_project_ids == before.known_project_ids
    assert after.updated_at > before.updated_at


def test_removed_projects_drop_out_of_baseline(store, checklist):
    source = FakeSource(existing_projects(), checklist)
    run_sync(source, store)
    source.projects = source.projects[:1]
    run_sync(source, store)
    assert store.get_state().known_project_ids == {"p1"}


def test_failed_commit_leaves_baseline_for_retry(store, checklist, conference, monkeypatch):
    source = FakeSource(existing_projects(), checklist)
    run_sync(source, store)
    source.projects.append(conference)

    def broken_write(conn, project_ids):
        raise RuntimeError("disk full")

    monkeypatch.setattr(store, "_write_state", broken_write)
    with pytest.raises(RuntimeError):
        run_sync(source, store)

    assert store.list_by_status("pending") == []
    assert store.get_state().known_project_ids == {"p1", "p2"}

    monkeypatch.undo()
    result = run_sync(source, store)
    assert len(result.proposals) == 3
