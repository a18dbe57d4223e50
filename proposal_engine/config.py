"""Runtime settings read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from proposal_engine.store import DEFAULT_SYNC_DOC_ID


class ConfigError(RuntimeError):
    """Raised when a required setting is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    notion_token: str
    project_db_id: str
    checklist_db_id: str
    task_db_id: str
    sync_doc_id: str = DEFAULT_SYNC_DOC_ID
    proposal_db_path: str = "proposals.db"
    sync_interval_minutes: int = 10


def _required(env: Mapping[str, str], name: str) -> str:
    value = env.get(name, "").strip()
    if not value:
        raise ConfigError(f"Missing required env: {name}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build :class:`Settings` from ``env`` (defaults to ``os.environ``)."""

    env = os.environ if env is None else env

    interval_raw = env.get("SYNC_INTERVAL_MINUTES", "").strip() or "10"
    try:
        interval = int(interval_raw)
    except ValueError as exc:
        raise ConfigError(f"SYNC_INTERVAL_MINUTES must be an integer, got {interval_raw!r}") from exc
    if interval <= 0:
        raise ConfigError("SYNC_INTERVAL_MINUTES must be positive")

    return Settings(
        notion_token=_required(env, "NOTION_TOKEN"),
        project_db_id=_required(env, "NOTION_PROJECT_DB_ID"),
        checklist_db_id=_required(env, "NOTION_CHECKLIST_DB_ID"),
        task_db_id=_required(env, "NOTION_TASK_DB_ID"),
        sync_doc_id=env.get("SYNC_DOC_ID", "").strip() or DEFAULT_SYNC_DOC_ID,
        proposal_db_path=env.get("PROPOSAL_DB_PATH", "").strip() or "proposals.db",
        sync_interval_minutes=interval,
    )
