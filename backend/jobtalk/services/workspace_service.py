"""
Workspace Service — in-process store of counseling workspaces.

A workspace groups one counseling session: its saved chat turns, the chat
topic and interest category, and at most one roadmap. Its uuid is what the
roadmap viewer sends back when asking for node details.
"""

from __future__ import annotations

import itertools
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Optional

from jobtalk.models.roadmap_models import StoredRoadmap
from jobtalk.models.workspace_models import Workspace, WorkspaceChat, WorkspaceStatus
from jobtalk.services.exceptions import InvalidQuery

logger = logging.getLogger(__name__)

WORKSPACE_NAMES = [
    "안녕하세요! 진로 상담이 궁금해요 💬",
    "새로운 꿈을 찾고 있어요 ✨",
    "나만의 로드맵을 만들어볼까요? 🗺️",
    "나의 숨겨진 잠재력 찾기, 지금 시작해요! 🔍",
    "나를 알아가는 시간, 오늘부터 1일! 🗓️",
    "꿈까지 가는 길, 이젠 헤매지 마세요! 🛤️",
    "오늘의 작은 시작이 미래를 바꿔요! ➡️",
    "나만의 강점, 제대로 발견하고 활용해요 💪",
]

# In-memory store keyed by workspace uuid
_workspaces: dict[str, Workspace] = {}
_chat_ids = itertools.count(1)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ── CRUD ─────────────────────────────────────────────────────────────────────


def create_workspace(name: str | None = None) -> Workspace:
    """Open a new waiting workspace with a random greeting as its name."""
    now = _now()
    workspace = Workspace(
        uuid=str(uuid.uuid4()),
        name=name or random.choice(WORKSPACE_NAMES),
        created_at=now,
        updated_at=now,
    )
    _workspaces[workspace.uuid] = workspace
    logger.info(f"Created workspace {workspace.uuid}")
    return workspace


def list_workspaces() -> list[Workspace]:
    """All workspaces, oldest first."""
    return sorted(_workspaces.values(), key=lambda w: w.created_at)


def get_workspace(workspace_uuid: str) -> Optional[Workspace]:
    return _workspaces.get(workspace_uuid)


def delete_workspace(workspace_uuid: str) -> Optional[Workspace]:
    """
    Delete a workspace and open a fresh one in its place.

    Returns the replacement, or None when the workspace does not exist.

    Raises:
        InvalidQuery: the workspace is still waiting (no conversation yet)
    """
    workspace = _workspaces.get(workspace_uuid)
    if workspace is None:
        return None
    if workspace.status == WorkspaceStatus.WAITING:
        raise InvalidQuery("A workspace without a conversation cannot be deleted")

    del _workspaces[workspace_uuid]
    logger.info(f"Deleted workspace {workspace_uuid}")
    return create_workspace()


# ── Conversation ─────────────────────────────────────────────────────────────


def list_chats(workspace_uuid: str) -> Optional[list[WorkspaceChat]]:
    workspace = _workspaces.get(workspace_uuid)
    if workspace is None:
        return None
    return sorted(workspace.chats, key=lambda c: c.message_index)


def save_chat(
    workspace_uuid: str,
    *,
    role: str,
    content: str,
    previous_response_id: str | None = None,
) -> Optional[WorkspaceChat]:
    """Append one chat turn; a waiting workspace moves to chatting."""
    workspace = _workspaces.get(workspace_uuid)
    if workspace is None:
        return None

    last_index = max((c.message_index for c in workspace.chats), default=0)
    chat = WorkspaceChat(
        id=next(_chat_ids),
        role=role,
        content=content,
        previous_response_id=previous_response_id,
        message_index=last_index + 1,
        created_at=_now(),
    )
    workspace.chats.append(chat)
    if workspace.status == WorkspaceStatus.WAITING:
        workspace.status = WorkspaceStatus.CHATTING
    workspace.updated_at = chat.created_at
    return chat


def start_chat(workspace_uuid: str, chat_topic: str) -> Optional[Workspace]:
    """Rename the workspace after the chat topic, unless it already has a roadmap."""
    workspace = _workspaces.get(workspace_uuid)
    if workspace is None:
        return None
    if workspace.status == WorkspaceStatus.ROADMAP_GENERATED:
        return workspace

    workspace.name = f"{chat_topic}에 대해 상담 중 💬"
    workspace.status = WorkspaceStatus.CHATTING
    workspace.chat_topic = chat_topic
    workspace.updated_at = _now()
    return workspace


def set_interest(workspace_uuid: str, interest_category: str) -> Optional[Workspace]:
    workspace = _workspaces.get(workspace_uuid)
    if workspace is None:
        return None

    workspace.interest_category = interest_category
    workspace.name = f"{interest_category} 분야 탐색하기 💼"
    workspace.updated_at = _now()
    return workspace


# ── Roadmap ──────────────────────────────────────────────────────────────────


def attach_roadmap(workspace_uuid: str, stored: StoredRoadmap) -> Optional[Workspace]:
    """Make ``stored`` the workspace's roadmap, replacing any earlier one."""
    workspace = _workspaces.get(workspace_uuid)
    if workspace is None:
        logger.warning(f"Roadmap {stored.id} not attached: workspace {workspace_uuid} not found")
        return None

    workspace.stored_roadmap = stored
    workspace.status = WorkspaceStatus.ROADMAP_GENERATED
    workspace.name = f"{stored.job_title} 로드맵 💼"
    workspace.updated_at = _now()
    logger.info(f"Attached roadmap {stored.id} to workspace {workspace_uuid}")
    return workspace


def get_workspace_roadmap(workspace_uuid: str) -> Optional[StoredRoadmap]:
    workspace = _workspaces.get(workspace_uuid)
    return workspace.stored_roadmap if workspace else None
