"""Common request/response schemas."""
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire.

    Accepts both camelCase and snake_case on input; endpoints return these
    with `response_model_by_alias` (FastAPI's default) so clients only ever
    see camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    """Standard success response."""
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(CamelModel):
    """Standard error response for documentation."""
    success: bool = False
    error: str


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
