# Common envelopes
from .common import DataResponse, MessageResponse, PaginationMeta

# Auth schemas
from .auth import (
    RegisterRequest,
    LoginRequest,
    UserResponse,
    AuthPayload,
    AuthResponse
)

# Taxonomy schemas
from .category import Category, CategoryCreate, CategoryUpdate, CategoryWithCount
from .location import Location, LocationCreate, LocationUpdate, LocationWithCount

# Business schemas
from .business import (
    BusinessContent,
    BusinessDraft,
    BusinessPatch,
    ApprovalRequest,
    BusinessFilters,
    TaxonomyRef,
    BusinessResponse,
    BusinessDetailResponse,
    FeaturedBusiness,
    BusinessListResponse
)

# Make all schemas available at package level
__all__ = [
    # Common
    "DataResponse",
    "MessageResponse",
    "PaginationMeta",
    # Auth
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "AuthPayload",
    "AuthResponse",
    # Taxonomy
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryWithCount",
    "Location",
    "LocationCreate",
    "LocationUpdate",
    "LocationWithCount",
    # Business
    "BusinessContent",
    "BusinessDraft",
    "BusinessPatch",
    "ApprovalRequest",
    "BusinessFilters",
    "TaxonomyRef",
    "BusinessResponse",
    "BusinessDetailResponse",
    "FeaturedBusiness",
    "BusinessListResponse",
]
