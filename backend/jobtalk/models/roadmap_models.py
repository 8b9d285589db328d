from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class NodeCategory(str, Enum):
    """Kind of a roadmap node."""

    JOB = "job"
    STAGE = "stage"
    SKILL = "skill"
    CERTIFICATE = "certificate"


class RoadmapNode(BaseModel):
    """One node of the roadmap tree; the root is the single ``job`` node."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    parent_id: Optional[int] = Field(validation_alias=AliasChoices("parent_id", "parentId"))
    is_optional: bool = Field(
        False,
        validation_alias=AliasChoices("isOptional", "is_optional"),
        serialization_alias="isOptional",
    )
    category: NodeCategory
    duration: str = ""


# ── Request Models ──────────────────────────────────────────────────────────


class RoadmapRequest(BaseModel):
    """Input for roadmap generation."""

    job_title: str = Field(validation_alias=AliasChoices("job_title", "jobTitle"))
    interests: Optional[str] = None
    certificates: Optional[str] = None
    workspace_uuid: Optional[str] = Field(None, validation_alias=AliasChoices("workspace_uuid", "workspaceUuid"))
    provider: Optional[str] = None
    model_key: Optional[str] = None

    @field_validator("job_title")
    @classmethod
    def _job_title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("job_title cannot be empty")
        return value


class NodeDetailRequest(BaseModel):
    """Input for single-node detail enrichment."""

    roadmap_id: str = Field(validation_alias=AliasChoices("roadmap_id", "roadmapId", "workspace_uuid"))
    node_id: str
    title: str
    job_title: Optional[str] = None
    provider: Optional[str] = None
    model_key: Optional[str] = None


# ── Response Models ─────────────────────────────────────────────────────────


class StoredRoadmap(BaseModel):
    """A validated roadmap kept for later node-detail lookups."""

    id: str
    job_title: str
    nodes: list[RoadmapNode]
    created_at: datetime


class RoadmapData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    roadmap_id: str = Field(alias="roadmapId")
    job_title: str = Field(alias="jobTitle")
    roadmap: list[RoadmapNode]


class RoadmapResponse(BaseModel):
    success: bool = True
    data: RoadmapData


class NodeResource(BaseModel):
    url: str
    title: str
    type: Optional[str] = None


class ExamInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    organization: Optional[str] = None
    registration_url: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("registrationUrl", "registration_url"),
        serialization_alias="registrationUrl",
    )


class NodeDetail(BaseModel):
    """Free-text enrichment for one skill/certificate node."""

    model_config = ConfigDict(populate_by_name=True)

    overview: Optional[str] = None
    importance: Optional[str] = None
    applications: Optional[str] = None
    resources: list[NodeResource] = []
    exam_info: Optional[ExamInfo] = Field(
        None,
        validation_alias=AliasChoices("examInfo", "exam_info"),
        serialization_alias="examInfo",
    )


class NodeDetailData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    node_detail: NodeDetail = Field(alias="nodeDetail")


class NodeDetailResponse(BaseModel):
    success: bool = True
    data: NodeDetailData
