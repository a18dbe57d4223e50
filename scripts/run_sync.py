"""Run the Notion project sync once, or repeatedly on an interval."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from proposal_engine.adapters.notion_adapter import NotionGateway
from proposal_engine.config import load_settings
from proposal_engine.store import ProposalStore
from proposal_engine.sync import run_sync

logger = logging.getLogger("run_sync")


def main() -> None:
    parser = argparse.ArgumentParser(description="Sync new Notion projects into task proposals")
    parser.add_argument("--loop", action="store_true", help="Keep running every SYNC_INTERVAL_MINUTES")
    parser.add_argument("--db", help="Proposal database path (overrides PROPOSAL_DB_PATH)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings()
    gateway = NotionGateway.from_settings(settings)
    with ProposalStore(args.db or settings.proposal_db_path, sync_doc_id=settings.sync_doc_id) as store:
        if not args.loop:
            result = run_sync(gateway, store)
            print(f"Created {len(result.proposals)} proposal(s) for {len(result.new_project_ids)} new project(s).")
            return

        interval = settings.sync_interval_minutes * 60
        while True:
            try:
                run_sync(gateway, store)
            except Exception:  # noqa: BLE001
                logger.exception("Sync pass failed; baseline left unchanged for retry")
            time.sleep(interval)


if __name__ == "__main__":
    main()
