from pydantic import BaseModel, ConfigDict, Field


class Qualification(BaseModel):
    """A national qualification (Q-Net ``jmcd`` / ``jmfldnm``)."""

    code: str
    name: str


class SyncResult(BaseModel):
    """Outcome of refreshing the qualification store."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_count: int = Field(alias="totalCount")
    message: str
    is_temporary: bool = Field(alias="isTemporary")


class QualificationList(BaseModel):
    qualifications: list[Qualification]


class QualificationSearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_count: int = Field(alias="totalCount")
    data: QualificationList


class QualificationNames(BaseModel):
    qualifications: list[str]


class QualificationNamesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_count: int = Field(alias="totalCount")
    data: QualificationNames
