"""Streamlit review UI for task proposals."""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Any, Optional

import httpx
from notion_client.errors import HTTPResponseError, RequestTimeoutError

from proposal_engine.adapters.notion_adapter import NotionGateway
from proposal_engine.config import ConfigError, Settings, load_settings
from proposal_engine.review import (
    InvalidTransitionError,
    approve_proposals,
    delete_proposal,
    list_pending,
    update_proposal,
)
from proposal_engine.schema import Proposal
from proposal_engine.store import ProposalNotFoundError, ProposalStore

# Errors shown to the reviewer as messages.
HANDLED_ERRORS = (
    ConfigError,
    RequestTimeoutError,
    HTTPResponseError,
    httpx.HTTPError,
    sqlite3.Error,
    ProposalNotFoundError,
    ValueError,
)


def describe_offset(offset_days: int) -> str:
    if offset_days == 0:
        return "행사 당일"
    if offset_days < 0:
        return f"행사 {-offset_days}일 전"
    return f"행사 {offset_days}일 후"


def describe_suggestion(proposal: Proposal) -> Optional[str]:
    """Advisory text for the parser suggestion, or ``None`` when there is none."""

    suggestion = proposal.ai_deadline_suggestion
    if suggestion is None:
        return None
    text = f"참고용 추천: {describe_offset(suggestion.offset_days)}"
    if suggestion.offset_days != proposal.offset_days:
        text += f" (적용된 규칙: {describe_offset(proposal.offset_days)})"
    return text


def proposal_row(proposal: Proposal) -> dict[str, Any]:
    """Summary row for the pending table; the applied due date and the advisory hint stay in separate columns."""

    return {
        "ID": proposal.id,
        "프로젝트": proposal.project_name,
        "업무": proposal.task_name,
        "업무구분": proposal.work_category,
        "마감일": proposal.due_date or "미정",
        "규칙 기준": describe_offset(proposal.offset_days),
        "최종 완료 시점": proposal.final_due_text,
        "참고용 추천": describe_suggestion(proposal) or "",
    }


def parse_due_date(value: Optional[str]) -> Optional[date]:
    """Stored due date as a ``date`` for the picker; unreadable values show as empty."""

    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def collect_patch(
    proposal: Proposal, task_name: str, work_category: str, due_date: Optional[date]
) -> dict[str, Any]:
    """Only fields that differ from the stored proposal end up in the patch."""

    patch: dict[str, Any] = {}
    if task_name != proposal.task_name:
        patch["task_name"] = task_name
    if work_category != proposal.work_category:
        patch["work_category"] = work_category
    normalized_due = due_date.isoformat() if due_date else None
    if normalized_due != proposal.due_date:
        patch["due_date"] = normalized_due
    return patch


def error_message(exc: Exception) -> str:
    if isinstance(exc, ConfigError):
        return f"설정 오류: {exc}"
    if isinstance(exc, RequestTimeoutError):
        return "Notion API 응답 시간이 초과되었습니다. 다시 시도해 주세요."
    if isinstance(exc, HTTPResponseError):
        return f"Notion API 오류 ({exc.status}): {exc}"
    if isinstance(exc, httpx.HTTPError):
        return f"Notion에 연결할 수 없습니다: {exc}"
    if isinstance(exc, sqlite3.Error):
        return f"제안 저장소 오류: {exc}"
    if isinstance(exc, ProposalNotFoundError):
        return f"제안을 찾을 수 없습니다: {exc.args[0] if exc.args else ''}"
    if isinstance(exc, InvalidTransitionError):
        return f"이미 처리된 제안입니다: {exc}"
    if isinstance(exc, ValueError):
        return f"입력 오류: {exc}"
    return f"알 수 없는 오류: {exc}"


def open_store(settings: Settings) -> ProposalStore:
    return ProposalStore(settings.proposal_db_path, sync_doc_id=settings.sync_doc_id)


def open_gateway(settings: Settings) -> NotionGateway:
    return NotionGateway.from_settings(settings)


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="업무 제안 승인", layout="wide")
    st.title("업무 제안 승인")
    st.caption("새 프로젝트에서 생성된 제안을 확인하고 수정/삭제 후 승인합니다.")

    try:
        settings = load_settings()
    except ConfigError as exc:
        st.error(error_message(exc))
        return

    # One store and one Notion client per process, shared across reruns.
    store = st.cache_resource(open_store)(settings)
    gateway = st.cache_resource(open_gateway)(settings)

    try:
        proposals = list_pending(store)
    except HANDLED_ERRORS as exc:
        st.error(error_message(exc))
        return
    if not proposals:
        st.info("대기 중인 제안이 없습니다.")
        return

    st.caption(
        "마감일은 업무구분 규칙표로 계산됩니다. "
        "최종 완료 시점에서 읽은 추천은 참고용이며 마감일에 반영되지 않습니다."
    )
    st.table([proposal_row(proposal) for proposal in proposals])

    selected: list[str] = []
    overrides: dict[str, dict] = {}
    for proposal in proposals:
        with st.expander(f"{proposal.project_name} · {proposal.task_name}"):
            task_name = st.text_input("업무", value=proposal.task_name, key=f"name-{proposal.id}")
            work_category = st.text_input("업무구분", value=proposal.work_category, key=f"category-{proposal.id}")
            due_date = st.date_input(
                "마감일", value=parse_due_date(proposal.due_date), format="YYYY-MM-DD", key=f"due-{proposal.id}"
            )
            advisory = describe_suggestion(proposal)
            if advisory:
                st.info(advisory)
            if proposal.final_due_text:
                st.caption(f"최종 완료 시점: {proposal.final_due_text}")

            patch = collect_patch(proposal, task_name, work_category, due_date)
            c1, c2, c3 = st.columns(3)
            if c1.checkbox("선택", key=f"select-{proposal.id}"):
                selected.append(proposal.id)
                if patch:
                    overrides[proposal.id] = patch
            if c2.button("저장", key=f"save-{proposal.id}", disabled=not patch):
                try:
                    update_proposal(store, proposal.id, patch)
                except HANDLED_ERRORS as exc:
                    st.error(error_message(exc))
                else:
                    st.rerun()
            if c3.button("삭제", key=f"delete-{proposal.id}"):
                try:
                    delete_proposal(store, proposal.id)
                except HANDLED_ERRORS as exc:
                    st.error(error_message(exc))
                else:
                    st.rerun()

    if st.button(f"선택 승인 ({len(selected)})", type="primary", disabled=not selected):
        try:
            results = approve_proposals(store, gateway, selected, overrides)
        except HANDLED_ERRORS as exc:
            st.error(error_message(exc))
            return
        st.success(f"업무 {len(results)}건을 생성했습니다.")
        for result in results:
            st.write(f"[{result.task_id}]({result.task_url})")


if __name__ == "__main__":
    main()
