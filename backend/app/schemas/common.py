from pydantic import BaseModel, Field
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Envelope used by every successful directory response"""
    success: bool = True
    message: Optional[str] = None
    data: T


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    page: int = Field(ge=1, description="Current page number")
    limit: int = Field(ge=1, description="Items per page")
    total: int = Field(ge=0, description="Total number of items")
    total_pages: int = Field(ge=0, description="Total number of pages")
