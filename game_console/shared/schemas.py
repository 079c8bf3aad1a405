from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any


class CamelModel(BaseModel):
    """Wire format is camelCase, Python side stays snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict = {}


class ErrorResponse(BaseModel):
    error: ErrorDetail


class PaginatedResponse(BaseModel):
    items: list[Any]
    total: int
    limit: int
    offset: int


def error_responses(*statuses: int) -> dict[int, dict]:
    """OpenAPI ``responses=`` entries for the ``{"error": {...}}`` envelope."""
    return {status: {"model": ErrorResponse} for status in statuses}
