"""Demo script for proposal-engine: two sync passes against an in-memory source."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from proposal_engine.schema import ChecklistItem, Project
from proposal_engine.store import ProposalStore
from proposal_engine.sync import run_sync


class StaticSource:
    def __init__(self, projects, checklist):
        self.projects = projects
        self.checklist = checklist

    def list_projects(self):
        return list(self.projects)

    def list_checklist_items(self):
        return list(self.checklist)


def main() -> None:
    checklist = [
        ChecklistItem("c1", "메인 포스터", "디자인/메인", "3주 전", []),
        ChecklistItem("c2", "SNS 홍보물", "홍보", "2주 전", ["컨퍼런스"]),
        ChecklistItem("c3", "현장 운영 매뉴얼", "운영", "당일", ["워크숍"]),
    ]
    source = StaticSource([Project("p1", "기존 행사", "2025-04-01", [])], checklist)

    with ProposalStore() as store:
        run_sync(source, store)
        source.projects.append(Project("p2", "봄 컨퍼런스", "2025-05-10", ["컨퍼런스"]))
        result = run_sync(source, store)
        for proposal in result.proposals:
            print(proposal.to_record())


if __name__ == "__main__":
    main()
