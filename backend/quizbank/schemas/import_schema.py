"""Pydantic schemas for CSV imports."""

from pydantic import BaseModel, Field


class RowRejectionOut(BaseModel):
    code: str
    message: str
    field: str | None = None
    line_number: int | None = None


class ImportResultOut(BaseModel):
    """Summary returned after a successful upload."""

    imported_count: int = Field(..., description="Questions written to the bank")
    skipped_count: int = Field(..., description="Rows skipped due to invalid format")
    dropped_lines: list[int] = Field(default_factory=list, description="Lines with fewer than five columns")
    message: str
    rejections: list[RowRejectionOut] = Field(default_factory=list)
