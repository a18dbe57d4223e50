import pytest

from proposal_engine.schema import DeadlineSuggestion, Proposal
from proposal_engine.store import ProposalNotFoundError, ProposalStore


def make_proposal(item_id="c1", suggestion=True):
    return Proposal(
        project_id="p1",
        project_name="봄 컨퍼런스",
        checklist_item_id=item_id,
        task_name="포스터",
        work_category="디자인",
        offset_days=-14,
        due_date="2025-04-26",
        final_due_text="3주 전",
        ai_deadline_suggestion=DeadlineSuggestion(offset_days=-21) if suggestion else None,
    )


def test_state_is_absent_until_written(store):
    assert store.get_state() is None
    store.set_state(["b", "a", "a"])
    assert store.get_state().known_project_ids == {"a", "b"}


def test_create_and_get_round_trip(store):
    (created,) = store.create_many([make_proposal()])
    loaded = store.get(created.id)

    assert loaded == created
    assert loaded.ai_deadline_suggestion == DeadlineSuggestion(offset_days=-21)
    assert loaded.created_at == loaded.updated_at
    assert store.get("missing") is None


def test_update_is_partial_merge(store):
    (created,) = store.create_many([make_proposal()])
    updated = store.update(created.id, {"task_name": "대형 포스터"})

    assert updated.task_name == "대형 포스터"
    assert updated.work_category == "디자인"
    assert updated.due_date == "2025-04-26"
    assert updated.ai_deadline_suggestion.offset_days == -21
    assert updated.updated_at > created.updated_at


def test_update_rejects_unknown_and_immutable_fields(store):
    (created,) = store.create_many([make_proposal()])
    with pytest.raises(ValueError):
        store.update(created.id, {"colour": "red"})
    with pytest.raises(ValueError):
        store.update(created.id, {"created_at": "2020-01-01"})


def test_update_missing_id(store):
    with pytest.raises(ProposalNotFoundError):
        store.update("missing", {"task_name": "x"})


def test_list_by_status_orders_by_creation(store):
    first, second, third = store.create_many(
        [make_proposal("c1"), make_proposal("c2", suggestion=False), make_proposal("c3")]
    )
    store.update(second.id, {"status": "deleted"})

    pending = store.list_by_status("pending")
    assert [p.id for p in pending] == [first.id, third.id]
    assert [p.checklist_item_id for p in store.list_by_status("deleted")] == ["c2"]


def test_data_survives_reopen(tmp_path):
    path = str(tmp_path / "store.db")
    with ProposalStore(path) as first:
        first.commit_sync([make_proposal()], ["p1"])
    with ProposalStore(path) as second:
        assert second.get_state().known_project_ids == {"p1"}
        assert len(second.list_by_status("pending")) == 1


def test_sync_doc_ids_are_independent(tmp_path):
    path = str(tmp_path / "store.db")
    with ProposalStore(path, sync_doc_id="a") as store_a:
        store_a.set_state(["p1"])
    with ProposalStore(path, sync_doc_id="b") as store_b:
        assert store_b.get_state() is None
