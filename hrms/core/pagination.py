# hrms/core/pagination.py
"""
Page/limit pagination shared by list endpoints
"""
from math import ceil

from fastapi import Query as QueryParam
from pydantic import BaseModel, Field, computed_field


class PaginationParams(BaseModel):
    """Pagination parameters, 1-indexed"""
    page: int = Field(1, ge=1, description="Page number (1-indexed)")
    limit: int = Field(50, ge=1, description="Items per page")

    @computed_field
    @property
    def offset(self) -> int:
        """Calculate offset for database query"""
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, params: PaginationParams, total: int) -> "PaginationMeta":
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            pages=ceil(total / params.limit) if total else 0,
        )


def get_pagination_params(
        page: int = QueryParam(1, ge=1, description="Page number"),
        limit: int = QueryParam(50, ge=1, description="Items per page"),
) -> PaginationParams:
    """Dependency to get pagination parameters"""
    return PaginationParams(page=page, limit=limit)
