from typing import Optional

from fastapi import APIRouter, Query

from jobtalk.models.career_models import (
    CatalogQuery,
    JobListData,
    JobSearchResponse,
    PassthroughResponse,
)
from jobtalk.services.career_service import (
    get_aptitudes,
    get_job_codes,
    get_job_detail,
    get_themes,
    search_jobs,
)

router = APIRouter()


@router.get("/jobs", response_model=JobSearchResponse)
async def search_jobs_endpoint(
    keyword: Optional[str] = Query(None),
    aptitude_codes: Optional[str] = Query(None, alias="aptdCodes"),
    theme_code: Optional[str] = Query(None, alias="themeCode"),
):
    """Search every catalog page for jobs matching at least one filter."""
    query = CatalogQuery(keyword=keyword, aptitude_codes=aptitude_codes, theme_code=theme_code)
    result = await search_jobs(query)
    return JobSearchResponse(
        total_count=result.total_count,
        retrieved_count=result.retrieved_count,
        unique_count=result.unique_count,
        data=JobListData(jobs=result.jobs),
    )


@router.get("/jobs/{job_code}", response_model=PassthroughResponse)
async def job_detail_endpoint(job_code: str):
    """CareerNet detail document for one job code."""
    return PassthroughResponse(data=await get_job_detail(job_code))


@router.get("/themes", response_model=PassthroughResponse)
async def themes_endpoint():
    return PassthroughResponse(data=await get_themes())


@router.get("/aptitudes", response_model=PassthroughResponse)
async def aptitudes_endpoint():
    return PassthroughResponse(data=await get_aptitudes())


@router.get("/jobcodes", response_model=PassthroughResponse)
async def job_codes_endpoint():
    return PassthroughResponse(data=await get_job_codes())
