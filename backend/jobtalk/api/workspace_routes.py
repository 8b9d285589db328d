from fastapi import APIRouter, HTTPException

from jobtalk.models.workspace_models import (
    ChatSaveRequest,
    ChatTopicRequest,
    InterestRequest,
    Workspace,
    WorkspaceChatList,
    WorkspaceChatListResponse,
    WorkspaceChatResponse,
    WorkspaceDetail,
    WorkspaceDetailResponse,
    WorkspaceList,
    WorkspaceListResponse,
    WorkspaceResponse,
    WorkspaceRoadmap,
    WorkspaceRoadmapRequest,
    WorkspaceRoadmapResponse,
)
from jobtalk.services.roadmap_service import save_client_roadmap
from jobtalk.services.workspace_service import (
    create_workspace,
    delete_workspace,
    get_workspace,
    get_workspace_roadmap,
    list_chats,
    list_workspaces,
    save_chat,
    set_interest,
    start_chat,
)

router = APIRouter()


def _require(workspace_uuid: str) -> Workspace:
    workspace = get_workspace(workspace_uuid)
    if not workspace:
        raise HTTPException(status_code=404, detail=f"Workspace '{workspace_uuid}' not found")
    return workspace


# ── CRUD ─────────────────────────────────────────────────────────────────────


@router.get("/all", response_model=WorkspaceListResponse)
async def list_all_workspaces():
    """List every workspace, oldest first."""
    workspaces = list_workspaces()
    return WorkspaceListResponse(total_count=len(workspaces), data=WorkspaceList(workspaces=workspaces))


@router.post("", response_model=WorkspaceResponse, status_code=201)
async def create_new_workspace():
    return WorkspaceResponse(data=create_workspace())


@router.get("/{workspace_uuid}", response_model=WorkspaceDetailResponse)
async def get_single_workspace(workspace_uuid: str):
    """Workspace with its roadmap, if one was generated."""
    workspace = _require(workspace_uuid)
    roadmap = None
    if workspace.stored_roadmap:
        roadmap = WorkspaceRoadmap.from_stored(workspace_uuid, workspace.stored_roadmap)
    return WorkspaceDetailResponse(data=WorkspaceDetail(**workspace.model_dump(), roadmap=roadmap))


@router.delete("/{workspace_uuid}", response_model=WorkspaceResponse)
async def delete_existing_workspace(workspace_uuid: str):
    """Delete a workspace; a fresh one takes its place."""
    replacement = delete_workspace(workspace_uuid)
    if not replacement:
        raise HTTPException(status_code=404, detail=f"Workspace '{workspace_uuid}' not found")
    return WorkspaceResponse(data=replacement)


# ── Conversation ─────────────────────────────────────────────────────────────


@router.get("/{workspace_uuid}/chats", response_model=WorkspaceChatListResponse)
async def get_workspace_chats(workspace_uuid: str):
    _require(workspace_uuid)
    chats = list_chats(workspace_uuid)
    return WorkspaceChatListResponse(total_count=len(chats), data=WorkspaceChatList(chats=chats))


@router.post("/{workspace_uuid}/chats", response_model=WorkspaceChatResponse, status_code=201)
async def save_workspace_chat(workspace_uuid: str, req: ChatSaveRequest):
    """Save one chat turn in message order."""
    _require(workspace_uuid)
    chat = save_chat(
        workspace_uuid,
        role=req.role,
        content=req.content,
        previous_response_id=req.previous_response_id,
    )
    return WorkspaceChatResponse(data=chat)


@router.put("/{workspace_uuid}/chat", response_model=WorkspaceResponse)
async def start_workspace_chat(workspace_uuid: str, req: ChatTopicRequest):
    """Switch the workspace to chatting about ``chatTopic``."""
    _require(workspace_uuid)
    return WorkspaceResponse(data=start_chat(workspace_uuid, req.chat_topic))


@router.put("/{workspace_uuid}/interest", response_model=WorkspaceResponse)
async def set_workspace_interest(workspace_uuid: str, req: InterestRequest):
    _require(workspace_uuid)
    return WorkspaceResponse(data=set_interest(workspace_uuid, req.interest_category))


# ── Roadmap ──────────────────────────────────────────────────────────────────


@router.post("/{workspace_uuid}/roadmap", response_model=WorkspaceRoadmapResponse)
async def save_workspace_roadmap(workspace_uuid: str, req: WorkspaceRoadmapRequest):
    """Save a client-held roadmap into the workspace, replacing any earlier one."""
    _require(workspace_uuid)
    stored = save_client_roadmap(workspace_uuid, req.job_title, req.roadmap_data)
    return WorkspaceRoadmapResponse(data=WorkspaceRoadmap.from_stored(workspace_uuid, stored))


@router.get("/{workspace_uuid}/roadmap", response_model=WorkspaceRoadmapResponse)
async def get_saved_roadmap(workspace_uuid: str):
    _require(workspace_uuid)
    stored = get_workspace_roadmap(workspace_uuid)
    if not stored:
        raise HTTPException(status_code=404, detail=f"Workspace '{workspace_uuid}' has no roadmap")
    return WorkspaceRoadmapResponse(data=WorkspaceRoadmap.from_stored(workspace_uuid, stored))
