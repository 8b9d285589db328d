from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from jobtalk.models.roadmap_models import RoadmapNode, StoredRoadmap


class WorkspaceStatus(str, Enum):
    """Lifecycle of a counseling workspace."""

    WAITING = "waiting"
    CHATTING = "chatting"
    ROADMAP_GENERATED = "roadmap_generated"


class WorkspaceChat(BaseModel):
    """One saved turn of a workspace conversation."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    role: Literal["user", "JobtalkAI"]
    content: str
    previous_response_id: Optional[str] = Field(None, alias="previousResponseId")
    message_index: int = Field(alias="messageIndex")
    created_at: datetime = Field(alias="createdAt")


class Workspace(BaseModel):
    """A counseling session: its chats, interests and at most one roadmap."""

    model_config = ConfigDict(populate_by_name=True)

    uuid: str
    name: str
    status: WorkspaceStatus = WorkspaceStatus.WAITING
    chat_topic: Optional[str] = Field(None, alias="chatTopic")
    interest_category: Optional[str] = Field(None, alias="interestCategory")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    # Held in the store, never serialized with the workspace itself
    chats: list[WorkspaceChat] = Field(default_factory=list, exclude=True)
    stored_roadmap: Optional[StoredRoadmap] = Field(None, exclude=True)


# ── Request Models ──────────────────────────────────────────────────────────


def _required_text(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} cannot be empty")
    return value


class ChatSaveRequest(BaseModel):
    role: Literal["user", "JobtalkAI"]
    content: str
    previous_response_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("previousResponseId", "previous_response_id")
    )

    @field_validator("content")
    @classmethod
    def _content_required(cls, value: str) -> str:
        return _required_text(value, "content")


class ChatTopicRequest(BaseModel):
    chat_topic: str = Field(validation_alias=AliasChoices("chatTopic", "chat_topic"))

    @field_validator("chat_topic")
    @classmethod
    def _topic_required(cls, value: str) -> str:
        return _required_text(value, "chat_topic")


class InterestRequest(BaseModel):
    interest_category: str = Field(validation_alias=AliasChoices("interestCategory", "interest_category"))

    @field_validator("interest_category")
    @classmethod
    def _interest_required(cls, value: str) -> str:
        return _required_text(value, "interest_category")


class WorkspaceRoadmapRequest(BaseModel):
    """A roadmap the client saves into a workspace directly."""

    job_title: str = Field(validation_alias=AliasChoices("jobTitle", "job_title"))
    roadmap_data: list[RoadmapNode] = Field(validation_alias=AliasChoices("roadmapData", "roadmap_data"))

    @field_validator("job_title")
    @classmethod
    def _job_title_required(cls, value: str) -> str:
        return _required_text(value, "job_title")


# ── Response Models ─────────────────────────────────────────────────────────


class WorkspaceRoadmap(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    roadmap_id: str = Field(alias="roadmapId")
    workspace_uuid: str = Field(alias="workspaceUuid")
    job_title: str = Field(alias="jobTitle")
    roadmap_data: list[RoadmapNode] = Field(alias="roadmapData")
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_stored(cls, workspace_uuid: str, stored: StoredRoadmap) -> "WorkspaceRoadmap":
        return cls(
            roadmap_id=stored.id,
            workspace_uuid=workspace_uuid,
            job_title=stored.job_title,
            roadmap_data=stored.nodes,
            created_at=stored.created_at,
        )


class WorkspaceDetail(Workspace):
    roadmap: Optional[WorkspaceRoadmap] = None


class WorkspaceResponse(BaseModel):
    success: bool = True
    data: Workspace


class WorkspaceDetailResponse(BaseModel):
    success: bool = True
    data: WorkspaceDetail


class WorkspaceList(BaseModel):
    workspaces: list[Workspace]


class WorkspaceListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_count: int = Field(alias="totalCount")
    data: WorkspaceList


class WorkspaceChatList(BaseModel):
    chats: list[WorkspaceChat]


class WorkspaceChatListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_count: int = Field(alias="totalCount")
    data: WorkspaceChatList


class WorkspaceChatResponse(BaseModel):
    success: bool = True
    data: WorkspaceChat


class WorkspaceRoadmapResponse(BaseModel):
    success: bool = True
    data: WorkspaceRoadmap
