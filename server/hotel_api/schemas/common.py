"""Common Pydantic schemas."""

import math
from typing import List, Optional

from pydantic import BaseModel, Field


class Pagination(BaseModel):
    """Page metadata returned alongside paginated lists."""

    current_page: int = Field(..., ge=1, description="Current page number (1-based)")
    per_page: int = Field(..., ge=1, description="Page size")
    total_items: int = Field(..., ge=0, description="Total matching items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(
            current_page=page,
            per_page=limit,
            total_items=total,
            total_pages=math.ceil(total / limit),
        )


class FieldViolation(BaseModel):
    """One failed field check in a validation error."""

    field: str = Field(..., description="Name of the invalid field")
    message: str = Field(..., description="Validation error message")
    location: str = Field(..., description="Where the field was sent (body, query, path, header)")


class ErrorResponse(BaseModel):
    """Failure envelope returned by every endpoint."""

    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable summary")
    errors: Optional[List[FieldViolation]] = Field(None, description="Validation errors")
    error: Optional[str] = Field(None, description="Diagnostic detail, hidden outside development")
