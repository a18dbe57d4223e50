"""Reviewer operations: list, edit, delete and approve proposals."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from proposal_engine.schema import (
    DEFAULT_TASK_STATUS,
    EDITABLE_FIELDS,
    STATUS_APPROVED,
    STATUS_DELETED,
    STATUS_PENDING,
    ApprovalResult,
    Proposal,
)
from proposal_engine.store import ProposalNotFoundError, ProposalStore

logger = logging.getLogger(__name__)


class InvalidTransitionError(ValueError):
    """Raised when a proposal in a terminal status is asked to change status."""


def _check_due_date(value) -> None:
    if value is None:
        return
    try:
        parsed = date.fromisoformat(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None
    if parsed is None or parsed.isoformat() != value:
        raise ValueError(f"due_date must be a YYYY-MM-DD date or None, got {value!r}")


def _check_editable(patch: dict) -> None:
    unknown = [key for key in patch if key not in EDITABLE_FIELDS]
    if unknown:
        raise ValueError(f"Fields {unknown} are not editable; allowed: {list(EDITABLE_FIELDS)}")
    if "due_date" in patch:
        _check_due_date(patch["due_date"])


def list_pending(store: ProposalStore) -> list[Proposal]:
    """Pending proposals, oldest first."""

    return store.list_by_status(STATUS_PENDING)


def update_proposal(store: ProposalStore, proposal_id: str, patch: dict) -> Optional[Proposal]:
    """Apply a partial edit; fields not present in ``patch`` are left as they are."""

    if not patch:
        raise ValueError("patch must name at least one field")
    _check_editable(patch)
    return store.update(proposal_id, patch)


def delete_proposal(store: ProposalStore, proposal_id: str) -> Optional[Proposal]:
    """Soft delete: the record stays, its status becomes ``deleted``."""

    proposal = store.get(proposal_id)
    if proposal is None:
        raise ProposalNotFoundError(proposal_id)
    if proposal.status != STATUS_PENDING:
        raise InvalidTransitionError(f"Proposal {proposal_id} is {proposal.status}, not pending")
    return store.update(proposal_id, {"status": STATUS_DELETED})


def approve_proposals(
    store: ProposalStore,
    sink,
    proposal_ids: list[str],
    overrides: Optional[dict[str, dict]] = None,
    status_label: str = DEFAULT_TASK_STATUS,
) -> list[ApprovalResult]:
    """Create a task for each pending proposal and mark it approved.

    Ids that are missing or no longer pending are skipped and left out of the
    result. Overrides (``task_name``, ``work_category``, ``due_date``) are
    applied before the task is created and persisted on the proposal. A sink
    failure propagates; proposals approved earlier in the batch stay approved.
    """

    if not proposal_ids:
        raise ValueError("proposal_ids must not be empty")
    overrides = overrides or {}
    for override in overrides.values():
        _check_editable(override)

    results: list[ApprovalResult] = []
    for proposal_id in proposal_ids:
        proposal = store.get(proposal_id)
        if proposal is None or proposal.status != STATUS_PENDING:
            logger.debug("Skipping proposal %s: not found or not pending", proposal_id)
            continue

        override = overrides.get(proposal_id, {})
        task_name = override.get("task_name", proposal.task_name)
        work_category = override.get("work_category", proposal.work_category)
        due_date = override.get("due_date", proposal.due_date)

        created = sink.create_task(
            task_name=task_name,
            work_category=work_category,
            project_ref=proposal.project_id,
            due_date=due_date,
            status_label=status_label,
        )

        now = store.clock_now()
        store.update(
            proposal_id,
            {
                **override,
                "status": STATUS_APPROVED,
                "notion_task_page_id": created.id,
                "notion_task_page_url": created.url,
                "approved_at": now,
            },
        )
        logger.info("Approved proposal %s as task %s", proposal_id, created.id)
        results.append(ApprovalResult(proposal_id=proposal_id, task_id=created.id, task_url=created.url))

    return results
