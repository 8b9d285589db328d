from typing import Optional

from fastapi import APIRouter, Query

from jobtalk.models.qualification_models import (
    QualificationList,
    QualificationNames,
    QualificationNamesResponse,
    QualificationSearchResponse,
    SyncResult,
)
from jobtalk.services.qualification_service import (
    list_qualification_names,
    search_qualifications,
    sync_qualifications,
)

router = APIRouter()


@router.get("/search", response_model=QualificationSearchResponse)
async def search_endpoint(keyword: Optional[str] = Query(None)):
    """Search qualifications by name (at least 2 characters)."""
    matches = search_qualifications(keyword)
    return QualificationSearchResponse(
        total_count=len(matches),
        data=QualificationList(qualifications=matches),
    )


@router.get("/all", response_model=QualificationNamesResponse)
async def list_all_endpoint():
    """All qualification names, sorted."""
    names = list_qualification_names()
    return QualificationNamesResponse(
        total_count=len(names),
        data=QualificationNames(qualifications=names),
    )


@router.post("/sync", response_model=SyncResult)
async def sync_endpoint():
    """Refresh the qualification list from Q-Net."""
    return await sync_qualifications()
