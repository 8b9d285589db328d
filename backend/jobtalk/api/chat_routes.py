from fastapi import APIRouter, Depends, HTTPException

from jobtalk.config import settings
from jobtalk.models.chat_models import MentorRequest, MentorResponse, SummaryRequest, SummaryResponse
from jobtalk.models.roadmap_models import (
    NodeDetailData,
    NodeDetailRequest,
    NodeDetailResponse,
    RoadmapData,
    RoadmapRequest,
    RoadmapResponse,
    StoredRoadmap,
)
from jobtalk.services.mentor_service import ask_mentor, summarize_conversation
from jobtalk.services.roadmap_service import (
    generate_node_detail,
    generate_roadmap,
    get_cached_roadmap,
)
from jobtalk.services.workspace_service import get_workspace
from jobtalk.utils.dependencies import APIKeys, get_api_keys

router = APIRouter()


def _resolve_llm(api_keys: APIKeys, provider: str | None, model_key: str | None) -> tuple[str, str, str]:
    """Pick provider/model (request value or server default) and its key."""
    provider = provider or settings.llm_provider
    model_key = model_key or settings.llm_model_key
    return provider, model_key, api_keys.resolve(provider)


def _roadmap_response(stored: StoredRoadmap) -> RoadmapResponse:
    return RoadmapResponse(
        data=RoadmapData(roadmap_id=stored.id, job_title=stored.job_title, roadmap=stored.nodes)
    )


@router.post("/career/mentor", response_model=MentorResponse)
async def career_mentor(req: MentorRequest, api_keys: APIKeys = Depends(get_api_keys)):
    """Career counseling chat turn."""
    provider, model_key, key = _resolve_llm(api_keys, req.provider, req.model_key)
    answer = await ask_mentor(
        message=req.message,
        history=req.history,
        provider=provider,
        model_key=model_key,
        api_key=key,
    )
    return MentorResponse(answer=answer)


@router.post("/career/summary", response_model=SummaryResponse)
async def career_summary(req: SummaryRequest, api_keys: APIKeys = Depends(get_api_keys)):
    """Summarize a mentor conversation into a short profile."""
    provider, model_key, key = _resolve_llm(api_keys, req.provider, req.model_key)
    summary = await summarize_conversation(
        conversation=req.conversation,
        provider=provider,
        model_key=model_key,
        api_key=key,
    )
    return SummaryResponse(summary=summary)


@router.post("/career/roadmap", response_model=RoadmapResponse)
async def career_roadmap(req: RoadmapRequest, api_keys: APIKeys = Depends(get_api_keys)):
    """Generate a validated career roadmap tree for the target job."""
    if req.workspace_uuid and not get_workspace(req.workspace_uuid):
        raise HTTPException(status_code=404, detail=f"Workspace '{req.workspace_uuid}' not found")
    provider, model_key, key = _resolve_llm(api_keys, req.provider, req.model_key)
    stored = await generate_roadmap(req, provider=provider, model_key=model_key, api_key=key)
    return _roadmap_response(stored)


@router.get("/career/roadmap/{roadmap_id}", response_model=RoadmapResponse)
async def get_roadmap(roadmap_id: str):
    """Retrieve a generated roadmap by its id or its workspace uuid."""
    stored = get_cached_roadmap(roadmap_id)
    if not stored:
        raise HTTPException(status_code=404, detail=f"Roadmap '{roadmap_id}' not found")
    return _roadmap_response(stored)


@router.post("/roadmap/node/detail", response_model=NodeDetailResponse)
async def roadmap_node_detail(req: NodeDetailRequest, api_keys: APIKeys = Depends(get_api_keys)):
    """Explain one roadmap node (served from cache when already generated)."""
    provider, model_key, key = _resolve_llm(api_keys, req.provider, req.model_key)
    detail = await generate_node_detail(
        roadmap_id=req.roadmap_id,
        node_id=req.node_id,
        node_title=req.title,
        job_title=req.job_title,
        provider=provider,
        model_key=model_key,
        api_key=key,
    )
    return NodeDetailResponse(data=NodeDetailData(node_detail=detail))
