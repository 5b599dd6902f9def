from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session
import logging

from ..core.settings import get_settings
from ..dependencies import get_db, get_current_actor, get_optional_actor, get_image_storage
from ..policies import Actor
from ..schemas import (
    ApprovalRequest,
    BusinessDraft,
    BusinessPatch,
    BusinessFilters,
    BusinessResponse,
    BusinessDetailResponse,
    BusinessListResponse,
    FeaturedBusiness,
    DataResponse,
    MessageResponse
)
from ..services.business_service import BusinessWorkflowService, BusinessQueryService
from ..services.image_storage import AzureImageStorage

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/businesses", tags=["businesses"])


async def _release_image(storage: AzureImageStorage, image_url: Optional[str]) -> None:
    if image_url and not await storage.delete_image(image_url):
        logger.warning(f"Could not release image {image_url}")


@router.get("", response_model=BusinessListResponse)
async def list_businesses(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(settings.default_page_size, ge=1, le=100, description="Items per page"),
    category: Optional[int] = Query(None, description="Filter by category ID"),
    location: Optional[int] = Query(None, description="Filter by location ID"),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or description"),
    approved_only: bool = Query(True, description="Set to false (admins only) to include pending businesses"),
    actor: Actor = Depends(get_optional_actor),
    db: Session = Depends(get_db)
):
    """
    List directory businesses, newest first.

    Anyone may list approved businesses. ``approved_only=false`` is reserved
    for administrators reviewing submissions.
    """
    filters = BusinessFilters(
        page=page,
        limit=limit,
        category_id=category,
        location_id=location,
        search=search,
        approved_only=approved_only
    )
    return BusinessQueryService.list_visible(db, filters, actor)


@router.get("/featured", response_model=DataResponse[List[FeaturedBusiness]])
async def featured_businesses(
    limit: int = Query(settings.featured_limit, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Random approved businesses for the home page"""
    return DataResponse(data=BusinessQueryService.featured(db, limit))


@router.get("/user/my-businesses", response_model=DataResponse[List[BusinessResponse]])
async def my_businesses(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """The caller's own businesses, whatever their approval state"""
    return DataResponse(data=BusinessQueryService.list_for_owner(db, actor))


@router.get("/{business_id}", response_model=DataResponse[BusinessDetailResponse])
async def get_business(
    business_id: int,
    actor: Actor = Depends(get_optional_actor),
    db: Session = Depends(get_db)
):
    return DataResponse(data=BusinessQueryService.get_business(db, business_id, actor))


@router.post("", response_model=DataResponse[BusinessResponse], status_code=status.HTTP_201_CREATED)
async def create_business(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    category_id: Optional[int] = Form(None),
    location_id: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
    storage: AzureImageStorage = Depends(get_image_storage)
):
    """
    Submit a business listing (multipart form).

    Admin submissions are approved immediately; everyone else's wait for review.
    """
    image_url = None
    if image is not None and image.filename:
        image_url = await storage.upload_image(image, actor.id)

    draft = BusinessDraft(
        name=name,
        description=description,
        phone=phone,
        email=email,
        address=address,
        category_id=category_id,
        location_id=location_id,
        image_url=image_url
    )
    try:
        business = BusinessWorkflowService.submit(db, draft, actor)
    except Exception:
        await _release_image(storage, image_url)
        raise

    return DataResponse(
        message="Business created successfully" if business.is_approved else "Business submitted for approval",
        data=BusinessResponse.model_validate(business)
    )


@router.put("/{business_id}", response_model=DataResponse[BusinessResponse])
async def update_business(
    business_id: int,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    category_id: Optional[int] = Form(None),
    location_id: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
    storage: AzureImageStorage = Depends(get_image_storage)
):
    """Edit content fields (owner or admin). Approval state is left as is."""
    business = BusinessWorkflowService.editable(db, business_id, actor)

    image_url = None
    if image is not None and image.filename:
        image_url = await storage.upload_image(image, business.owner_id)

    patch = BusinessPatch(
        name=name,
        description=description,
        phone=phone,
        email=email,
        address=address,
        category_id=category_id,
        location_id=location_id,
        image_url=image_url
    )
    try:
        outcome = BusinessWorkflowService.edit(db, business_id, patch, actor)
    except Exception:
        await _release_image(storage, image_url)
        raise

    await _release_image(storage, outcome.released_image_url)

    return DataResponse(
        message="Business updated successfully",
        data=BusinessResponse.model_validate(outcome.business)
    )


@router.delete("/{business_id}", response_model=MessageResponse)
async def delete_business(
    business_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
    storage: AzureImageStorage = Depends(get_image_storage)
):
    """Delete a business (owner or admin) and release its image"""
    outcome = BusinessWorkflowService.remove(db, business_id, actor)
    await _release_image(storage, outcome.released_image_url)
    return MessageResponse(message="Business deleted successfully")


@router.patch("/{business_id}/approve", response_model=DataResponse[BusinessResponse])
async def set_approval_status(
    business_id: int,
    request: ApprovalRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """Approve or reject (return to pending) a business. Admin only."""
    business = BusinessWorkflowService.set_approval(db, business_id, request.is_approved, actor)
    return DataResponse(
        message="Business approved successfully" if request.is_approved else "Business rejected",
        data=BusinessResponse.model_validate(business)
    )
