"""SQLite-backed sync state and proposal store."""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterable, Iterator, Optional

from proposal_engine.schema import Proposal, SyncState

logger = logging.getLogger(__name__)

DEFAULT_SYNC_DOC_ID = "notion_project_sync"

_PROPOSAL_COLUMNS = (
    "id",
    "status",
    "project_id",
    "project_name",
    "checklist_item_id",
    "task_name",
    "work_category",
    "final_due_text",
    "due_date",
    "deadline_basis",
    "offset_days",
    "due_date_source",
    "ai_deadline_suggestion",
    "notion_task_page_id",
    "notion_task_page_url",
    "created_at",
    "updated_at",
    "approved_at",
)
_JSON_COLUMNS = {"ai_deadline_suggestion"}
_IMMUTABLE_COLUMNS = {"id", "created_at"}

_SCHEMA = """
CREATE TABLE IF NOT EXISTS proposals (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    status TEXT NOT NULL,
    project_id TEXT NOT NULL,
    project_name TEXT NOT NULL DEFAULT '',
    checklist_item_id TEXT NOT NULL,
    task_name TEXT NOT NULL DEFAULT '',
    work_category TEXT NOT NULL DEFAULT '',
    final_due_text TEXT DEFAULT '',
    due_date TEXT,
    deadline_basis TEXT NOT NULL,
    offset_days INTEGER NOT NULL,
    due_date_source TEXT NOT NULL,
    ai_deadline_suggestion TEXT,
    notion_task_page_id TEXT,
    notion_task_page_url TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    approved_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_proposals_status_created
    ON proposals(status, created_at, seq);

CREATE TABLE IF NOT EXISTS sync_state (
    doc_id TEXT PRIMARY KEY,
    last_seen_project_ids TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class ProposalNotFoundError(KeyError):
    """Raised when a proposal id does not exist in the store."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProposalStore:
    """Single-file store holding proposals and the sync baseline.

    Every write happens inside one SQLite transaction, so a failed sync batch
    leaves neither proposals nor an advanced baseline behind.
    """

    def __init__(
        self,
        path: str = ":memory:",
        sync_doc_id: str = DEFAULT_SYNC_DOC_ID,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.path = path
        self.sync_doc_id = sync_doc_id
        self._clock = clock
        self._conn = sqlite3.connect(path, timeout=10, isolation_level=None, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA busy_timeout=5000")
        self._conn.executescript(_SCHEMA)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "ProposalStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def clock_now(self) -> str:
        return self._clock().isoformat(timespec="microseconds")

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        self._conn.execute("BEGIN IMMEDIATE")
        try:
            yield self._conn
        except BaseException:
            self._conn.execute("ROLLBACK")
            raise
        self._conn.execute("COMMIT")

    # -- sync state -------------------------------------------------------

    def get_state(self) -> Optional[SyncState]:
        row = self._conn.execute(
            "SELECT last_seen_project_ids, updated_at FROM sync_state WHERE doc_id = ?",
            (self.sync_doc_id,),
        ).fetchone()
        if row is None:
            return None
        return SyncState(
            known_project_ids=set(json.loads(row["last_seen_project_ids"])),
            updated_at=row["updated_at"],
        )

    def _write_state(self, conn: sqlite3.Connection, project_ids: Iterable[str]) -> None:
        conn.execute(
            "INSERT INTO sync_state (doc_id, last_seen_project_ids, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(doc_id) DO UPDATE SET "
            "last_seen_project_ids = excluded.last_seen_project_ids, updated_at = excluded.updated_at",
            (self.sync_doc_id, json.dumps(sorted(set(project_ids))), self.clock_now()),
        )

    def set_state(self, project_ids: Iterable[str]) -> None:
        """Create or refresh the baseline without touching proposals."""

        with self._transaction() as conn:
            self._write_state(conn, project_ids)

    # -- proposals --------------------------------------------------------

    def _insert(self, conn: sqlite3.Connection, proposal: Proposal) -> Proposal:
        now = self.clock_now()
        proposal.id = proposal.id or uuid.uuid4().hex
        proposal.created_at = now
        proposal.updated_at = now
        record = proposal.to_record()
        values = [_encode(column, record[column]) for column in _PROPOSAL_COLUMNS]
        conn.execute(
            f"INSERT INTO proposals ({', '.join(_PROPOSAL_COLUMNS)}) "
            f"VALUES ({', '.join('?' for _ in _PROPOSAL_COLUMNS)})",
            values,
        )
        return proposal

    def create_many(self, proposals: list[Proposal]) -> list[Proposal]:
        with self._transaction() as conn:
            return [self._insert(conn, proposal) for proposal in proposals]

    def commit_sync(self, proposals: list[Proposal], project_ids: Iterable[str]) -> list[Proposal]:
        """Write proposals and refresh the baseline as one unit."""

        with self._transaction() as conn:
            created = [self._insert(conn, proposal) for proposal in proposals]
            self._write_state(conn, project_ids)
        logger.debug("Committed %d proposal(s) with baseline %s", len(created), self.sync_doc_id)
        return created

    def get(self, proposal_id: str) -> Optional[Proposal]:
        row = self._conn.execute("SELECT * FROM proposals WHERE id = ?", (proposal_id,)).fetchone()
        return _row_to_proposal(row) if row else None

    def update(self, proposal_id: str, patch: dict) -> Optional[Proposal]:
        """Merge ``patch`` into the stored proposal; fields not named are kept."""

        unknown = [key for key in patch if key not in _PROPOSAL_COLUMNS or key in _IMMUTABLE_COLUMNS]
        if unknown:
            raise ValueError(f"Cannot update proposal fields {unknown}")

        fields = dict(patch)
        fields["updated_at"] = self.clock_now()
        assignments = ", ".join(f"{key} = ?" for key in fields)
        values = [_encode(key, value) for key, value in fields.items()]
        with self._transaction() as conn:
            cursor = conn.execute(f"UPDATE proposals SET {assignments} WHERE id = ?", (*values, proposal_id))
            if cursor.rowcount == 0:
                raise ProposalNotFoundError(proposal_id)
        return self.get(proposal_id)

    def list_by_status(self, status: str) -> list[Proposal]:
        rows = self._conn.execute(
            "SELECT * FROM proposals WHERE status = ? ORDER BY created_at ASC, seq ASC",
            (status,),
        ).fetchall()
        return [_row_to_proposal(row) for row in rows]


def _encode(column: str, value):
    if column in _JSON_COLUMNS and value is not None:
        return json.dumps(value, ensure_ascii=False)
    return value


def _row_to_proposal(row: sqlite3.Row) -> Proposal:
    record = {column: row[column] for column in _PROPOSAL_COLUMNS}
    for column in _JSON_COLUMNS:
        if record[column]:
            record[column] = json.loads(record[column])
    return Proposal.from_record(record)
