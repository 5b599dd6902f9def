from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from ..enums import ApprovalState
from .common import PaginationMeta


class BusinessContent(BaseModel):
    """Content fields shared by drafts and patches. Presence rules are enforced by the workflow service."""
    name: Optional[str] = None
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    category_id: Optional[int] = None
    location_id: Optional[int] = None
    image_url: Optional[str] = None


class BusinessDraft(BusinessContent):
    """Submission of a new business"""
    pass


class BusinessPatch(BusinessContent):
    """Partial content update; unset fields are left untouched"""
    pass


class ApprovalRequest(BaseModel):
    is_approved: bool


class BusinessFilters(BaseModel):
    """Filters for the public business listing"""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    category_id: Optional[int] = None
    location_id: Optional[int] = None
    search: Optional[str] = None
    approved_only: bool = True


class TaxonomyRef(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class BusinessResponse(BaseModel):
    id: int
    owner_id: int
    name: str
    description: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    image_url: Optional[str] = None
    category_id: int
    location_id: int
    is_approved: bool
    approval_state: ApprovalState
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BusinessDetailResponse(BusinessResponse):
    """Single business enriched with its category and location names"""
    category: Optional[TaxonomyRef] = None
    location: Optional[TaxonomyRef] = None


class FeaturedBusiness(BusinessResponse):
    category_name: Optional[str] = None
    location_name: Optional[str] = None


class BusinessListResponse(BaseModel):
    """Paginated response for business listing"""
    success: bool = True
    data: List[BusinessResponse]
    pagination: PaginationMeta
