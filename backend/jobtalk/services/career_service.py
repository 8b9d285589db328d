"""
Career Service — job catalog lookups against the CareerNet open API.

Responsibilities:
  • Search the paginated jobs.json catalog and return every matching job,
    fetching the remaining pages in fixed-size concurrent batches
  • De-duplicate merged results by job code (first occurrence wins)
  • Proxy the single-call endpoints (job detail, themes, aptitudes, job codes)

Any failed page aborts the search; partial results are never returned.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from jobtalk.config import settings
from jobtalk.models.career_models import CatalogPage, CatalogQuery, CatalogSearchResult, JobRecord
from jobtalk.services.exceptions import InvalidQuery, UpstreamRequestFailed
from jobtalk.utils.http_client import client_scope, error_body

logger = logging.getLogger(__name__)


# ── Public API ───────────────────────────────────────────────────────────────


async def search_jobs(
    query: CatalogQuery,
    *,
    client: httpx.AsyncClient | None = None,
    batch_size: int | None = None,
) -> CatalogSearchResult:
    """
    Fetch every catalog page matching ``query`` and merge them.

    Page 1 is fetched alone to learn the total count; pages 2..N follow in
    batches of ``batch_size`` (settings.catalog_batch_size by default), each
    batch fully resolved before the next one starts.
    """
    if query.is_empty():
        raise InvalidQuery("At least one of keyword, aptitude codes or theme code is required")

    batch_size = batch_size or settings.catalog_batch_size
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    logger.info(
        f"Job search: keyword={query.keyword!r} aptitude_codes={query.aptitude_codes!r} "
        f"theme_code={query.theme_code!r}"
    )

    async with client_scope(client) as http:
        first_page = await _fetch_page(http, query, 1)
        total_pages = first_page.total_pages
        logger.info(
            f"Catalog reports count={first_page.count} page_size={first_page.page_size} "
            f"total_pages={total_pages}"
        )

        if first_page.count == 0:
            return CatalogSearchResult(total_count=0, retrieved_count=0, unique_count=0, jobs=[])

        pages = [first_page]
        for start in range(2, total_pages + 1, batch_size):
            end = min(start + batch_size - 1, total_pages)
            logger.info(f"Fetching pages {start} to {end}")
            pages.extend(await _fetch_batch(http, query, range(start, end + 1)))

    all_jobs = [job for page in pages for job in page.jobs]
    unique_jobs = dedupe_by_code(all_jobs)
    logger.info(f"Retrieved {len(all_jobs)} jobs, {len(unique_jobs)} unique by code")

    return CatalogSearchResult(
        total_count=first_page.count,
        retrieved_count=len(all_jobs),
        unique_count=len(unique_jobs),
        jobs=unique_jobs,
    )


async def get_job_detail(job_code: str, *, client: httpx.AsyncClient | None = None) -> Any:
    """Return the raw CareerNet detail document for one job code."""
    if not job_code or not job_code.strip():
        raise InvalidQuery("A job code is required")
    async with client_scope(client) as http:
        return await _get_json(
            http, "job.json", {"seq": job_code.strip()}, "Failed to load job detail"
        )


async def get_themes(*, client: httpx.AsyncClient | None = None) -> Any:
    """Return the CareerNet job theme list."""
    async with client_scope(client) as http:
        return await _get_json(http, "themes.json", {}, "Failed to load job themes")


async def get_aptitudes(*, client: httpx.AsyncClient | None = None) -> Any:
    """Return the CareerNet aptitude classification list."""
    async with client_scope(client) as http:
        return await _get_json(http, "aptds.json", {}, "Failed to load job aptitudes")


async def get_job_codes(*, client: httpx.AsyncClient | None = None) -> Any:
    """Return the full CareerNet job code list."""
    async with client_scope(client) as http:
        return await _get_json(http, "jobcodes.json", {}, "Failed to load job codes")


def dedupe_by_code(jobs: list[JobRecord]) -> list[JobRecord]:
    """Keep the first record seen for each code, preserving first-seen order."""
    unique: dict[int | str, JobRecord] = {}
    for job in jobs:
        if job.code not in unique:
            unique[job.code] = job
    return list(unique.values())


# ── Helpers ──────────────────────────────────────────────────────────────────


async def _fetch_page(http: httpx.AsyncClient, query: CatalogQuery, page_index: int) -> CatalogPage:
    data = await _get_json(
        http, "jobs.json", query.to_params(page_index), "Failed to load job catalog"
    )
    if not isinstance(data, dict):
        raise UpstreamRequestFailed(
            "Failed to load job catalog",
            detail=f"Unexpected response shape for page {page_index}",
        )
    try:
        return CatalogPage.model_validate(data)
    except ValidationError as e:
        raise UpstreamRequestFailed("Failed to load job catalog", detail=str(e)) from e


async def _fetch_batch(
    http: httpx.AsyncClient,
    query: CatalogQuery,
    page_indexes: range,
) -> list[CatalogPage]:
    """Fetch one batch concurrently; wait for all of it, then raise the first failure."""
    results = await asyncio.gather(
        *(_fetch_page(http, query, page_index) for page_index in page_indexes),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


async def _get_json(
    http: httpx.AsyncClient,
    path: str,
    params: dict[str, Any],
    failure_message: str,
) -> Any:
    url = f"{settings.career_api_base_url.rstrip('/')}/{path}"
    try:
        resp = await http.get(url, params={"apiKey": settings.career_net_api_key or "", **params})
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(f"CareerNet {path} returned {e.response.status_code}")
        raise UpstreamRequestFailed(
            failure_message,
            status_code=e.response.status_code,
            detail=error_body(e.response),
        ) from e
    except httpx.RequestError as e:
        logger.error(f"CareerNet {path} request failed: {e}")
        raise UpstreamRequestFailed(failure_message, detail=str(e)) from e

    try:
        return resp.json()
    except ValueError as e:
        raise UpstreamRequestFailed(failure_message, detail=resp.text[:200]) from e

