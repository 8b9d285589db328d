import math
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ── Request Models ──────────────────────────────────────────────────────────


class CatalogQuery(BaseModel):
    """Filters for a job catalog search. At least one must be non-empty."""

    model_config = ConfigDict(frozen=True)

    keyword: Optional[str] = None
    aptitude_codes: Optional[str] = None
    theme_code: Optional[str] = None

    def is_empty(self) -> bool:
        return not any(
            (value or "").strip()
            for value in (self.keyword, self.aptitude_codes, self.theme_code)
        )

    def to_params(self, page_index: int) -> dict[str, Any]:
        """Query-string parameters for one CareerNet jobs.json page."""
        return {
            "searchJobNm": (self.keyword or "").strip(),
            "searchAptdCodes": (self.aptitude_codes or "").strip(),
            "searchThemeCode": (self.theme_code or "").strip(),
            "pageIndex": page_index,
        }


# ── Upstream Envelope ───────────────────────────────────────────────────────


class JobRecord(BaseModel):
    """A single job entry; ``code`` is the uniqueness key."""

    name: Optional[str] = Field(None, validation_alias=AliasChoices("job_nm", "name"))
    code: Union[int, str] = Field(validation_alias=AliasChoices("job_cd", "code"))


class CatalogPage(BaseModel):
    """One page of the CareerNet jobs.json response."""

    count: int = 0
    page_size: int = Field(0, validation_alias=AliasChoices("pageSize", "page_size"))
    page_index: int = Field(1, validation_alias=AliasChoices("pageIndex", "page_index"))
    jobs: list[JobRecord] = []

    @field_validator("count", "page_size", "page_index", mode="before")
    @classmethod
    def _blank_as_zero(cls, value: Any) -> Any:
        if value is None or value == "":
            return 0
        return value

    @field_validator("jobs", mode="before")
    @classmethod
    def _jobs_list_only(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @property
    def total_pages(self) -> int:
        if self.count <= 0:
            return 0
        if self.page_size <= 0:
            return 1
        return math.ceil(self.count / self.page_size)


# ── Response Models ─────────────────────────────────────────────────────────


class CatalogSearchResult(BaseModel):
    """Merged, de-duplicated outcome of a catalog search."""

    total_count: int
    retrieved_count: int
    unique_count: int
    jobs: list[JobRecord]


class JobListData(BaseModel):
    jobs: list[JobRecord]


class JobSearchResponse(BaseModel):
    """HTTP envelope for GET /api/career/jobs."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_count: int = Field(alias="totalCount")
    retrieved_count: int = Field(alias="retrievedCount")
    unique_count: int = Field(alias="uniqueCount")
    data: JobListData


class PassthroughResponse(BaseModel):
    """HTTP envelope for the single-call CareerNet proxies."""

    success: bool = True
    data: Any
