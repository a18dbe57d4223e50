"""Incremental project sync: detect new projects and emit proposals."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from proposal_engine.schema import Proposal
from proposal_engine.store import ProposalStore
from proposal_engine.synthesizer import build_proposals

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one sync pass."""

    baseline_created: bool = False
    new_project_ids: list[str] = field(default_factory=list)
    proposals: list[Proposal] = field(default_factory=list)


def run_sync(source, store: ProposalStore) -> SyncResult:
    """Run one sync pass against ``source`` and persist the outcome in ``store``.

    ``source`` provides ``list_projects()`` and ``list_checklist_items()``.
    The first pass only records a baseline. Later passes create proposals for
    projects missing from the baseline and refresh the baseline in the same
    transaction, so a failure leaves the next pass to retry the same projects.
    """

    projects = source.list_projects()
    current_ids = [project.id for project in projects]

    state = store.get_state()
    if state is None:
        store.set_state(current_ids)
        logger.info(
            "Initial sync state created with %d project(s); skipping proposal generation for baseline.",
            len(current_ids),
        )
        return SyncResult(baseline_created=True)

    new_projects = [project for project in projects if project.id not in state.known_project_ids]
    if not new_projects:
        store.set_state(current_ids)
        logger.info("No new projects detected.")
        return SyncResult()

    checklist = source.list_checklist_items()
    proposals: list[Proposal] = []
    for project in new_projects:
        proposals.extend(build_proposals(project, checklist))

    created = store.commit_sync(proposals, current_ids)
    logger.info("Created %d proposal(s) for %d new project(s).", len(created), len(new_projects))
    return SyncResult(
        new_project_ids=[project.id for project in new_projects],
        proposals=created,
    )
