from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging
import math

from sqlalchemy import delete, func, or_, true
from sqlalchemy.orm import Session, joinedload

from .. import models
from ..enums import ApprovalState, BusinessAction
from ..exceptions import InvalidInputError, NotFoundError, UnauthorizedError
from ..policies import Actor, is_allowed, require
from ..schemas import (
    BusinessDraft,
    BusinessPatch,
    BusinessFilters,
    BusinessResponse,
    BusinessDetailResponse,
    BusinessListResponse,
    FeaturedBusiness,
    PaginationMeta
)
from .transactions import unit_of_work

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = ("name", "description", "phone")
OPTIONAL_TEXT_FIELDS = ("email", "address", "image_url")
MAX_LENGTHS = {"name": 100, "phone": 20, "email": 100, "image_url": 255}
REFERENCES = {
    "category_id": (models.Category, "Category"),
    "location_id": (models.Location, "Location"),
}


@dataclass
class EditOutcome:
    """Updated business plus the image it no longer references, if any."""
    business: models.Business
    released_image_url: Optional[str] = None


@dataclass
class RemovalOutcome:
    """The engine does not touch storage; callers release ``released_image_url``."""
    business_id: int
    released_image_url: Optional[str] = None


class BusinessWorkflowService:
    """
    Approval workflow for business listings.

    A business is PENDING (is_approved=false) or APPROVED (is_approved=true).
    Admin submissions start APPROVED, everything else starts PENDING, and only
    set_approval moves between the two. Every mutation is a single INSERT,
    UPDATE or DELETE so concurrent admin actions cannot lose updates.
    """

    @staticmethod
    def _clean_content(db: Session, values: Dict[str, Any], creating: bool) -> Dict[str, Any]:
        """Validate content fields and normalise blank optional strings to None."""
        cleaned = dict(values)

        if creating:
            for field in REQUIRED_TEXT_FIELDS + tuple(REFERENCES):
                if cleaned.get(field) is None:
                    raise InvalidInputError(field)

        for field in REQUIRED_TEXT_FIELDS:
            if field in cleaned and not str(cleaned[field]).strip():
                raise InvalidInputError(field, f"{field} must not be blank")

        for field in OPTIONAL_TEXT_FIELDS:
            if field in cleaned and not str(cleaned[field]).strip():
                cleaned[field] = None

        for field, limit in MAX_LENGTHS.items():
            value = cleaned.get(field)
            if value is not None and len(value) > limit:
                raise InvalidInputError(field, f"{field} must be at most {limit} characters")

        for field, (model, label) in REFERENCES.items():
            if field not in cleaned:
                continue
            exists = db.query(model.id).filter(model.id == cleaned[field]).first()
            if exists is None:
                raise InvalidInputError(field, f"{label} {cleaned[field]} does not exist")

        return cleaned

    @staticmethod
    def _owned_by(actor: Actor):
        """SQL form of the owner-or-admin rule from app.policies."""
        if actor.is_admin:
            return true()
        return models.Business.owner_id == actor.id

    @staticmethod
    def _raise_missing_or_denied(db: Session, business_id: int, actor: Actor, action: BusinessAction) -> None:
        """Explain why a guarded UPDATE/DELETE matched no row."""
        business = db.get(models.Business, business_id)
        if business is None:
            raise NotFoundError("Business", business_id)
        require(actor, action, business, message=f"Not authorized to {action.value} this business")
        # allowed but gone: deleted between statements
        raise NotFoundError("Business", business_id)

    @staticmethod
    def submit(db: Session, draft: BusinessDraft, actor: Actor) -> models.Business:
        """
        Create a business owned by ``actor``.

        Raises:
            UnauthorizedError: anonymous actor
            InvalidInputError: missing/blank required field or unknown category/location
        """
        require(actor, BusinessAction.SUBMIT)
        values = BusinessWorkflowService._clean_content(
            db, draft.model_dump(exclude_none=True), creating=True
        )

        business = models.Business(
            **values,
            owner_id=actor.id,
            is_approved=actor.is_admin
        )
        with unit_of_work(db, "Failed to create business"):
            db.add(business)
        db.refresh(business)

        logger.info(
            f"Business {business.id} submitted by user {actor.id} "
            f"as {business.approval_state.value}"
        )
        return business

    @staticmethod
    def set_approval(db: Session, business_id: int, approved: bool, actor: Actor) -> models.Business:
        """
        Move a business to APPROVED or back to PENDING. Admin only, idempotent.

        Raises:
            UnauthorizedError / ForbiddenError: non-admin actor
            NotFoundError: unknown business
        """
        require(actor, BusinessAction.SET_APPROVAL, message="Admin privileges required")

        with unit_of_work(db, "Failed to update approval status"):
            updated = db.query(models.Business).filter(
                models.Business.id == business_id
            ).update(
                {"is_approved": bool(approved), "updated_at": func.now()},
                synchronize_session=False
            )
            if not updated:
                raise NotFoundError("Business", business_id)

        business = db.get(models.Business, business_id)
        db.refresh(business)
        logger.info(
            f"Business {business_id} set to {ApprovalState.from_flag(approved).value} by admin {actor.id}"
        )
        return business

    @staticmethod
    def editable(db: Session, business_id: int, actor: Actor) -> models.Business:
        """
        Business ``actor`` may edit. Checked before any patch content is validated.

        Raises:
            UnauthorizedError: anonymous actor
            NotFoundError: unknown business
            ForbiddenError: actor is neither owner nor admin
        """
        if actor.is_anonymous:
            raise UnauthorizedError("Authentication required")

        business = db.get(models.Business, business_id)
        if business is None:
            raise NotFoundError("Business", business_id)
        require(actor, BusinessAction.EDIT, business, message="Not authorized to edit this business")
        return business

    @staticmethod
    def edit(db: Session, business_id: int, patch: BusinessPatch, actor: Actor) -> EditOutcome:
        """
        Update content fields of a business. Approval state and owner are never touched.

        Raises:
            UnauthorizedError: anonymous actor
            InvalidInputError: blank required field or unknown category/location
            NotFoundError: unknown business
            ForbiddenError: actor is neither owner nor admin
        """
        business = BusinessWorkflowService.editable(db, business_id, actor)

        values = BusinessWorkflowService._clean_content(
            db, patch.model_dump(exclude_none=True), creating=False
        )

        previous_image_url = None
        if values:
            values["updated_at"] = func.now()
            with unit_of_work(db, "Failed to update business"):
                if "image_url" in values:
                    # row stays locked until commit, so each replaced image is released once
                    previous_image_url = db.query(models.Business.image_url).filter(
                        models.Business.id == business_id
                    ).with_for_update().scalar()
                updated = db.query(models.Business).filter(
                    models.Business.id == business_id,
                    BusinessWorkflowService._owned_by(actor)
                ).update(values, synchronize_session=False)
                if not updated:
                    BusinessWorkflowService._raise_missing_or_denied(
                        db, business_id, actor, BusinessAction.EDIT
                    )
            db.refresh(business)

        released = None
        if previous_image_url and previous_image_url != business.image_url:
            released = previous_image_url

        logger.info(f"Business {business_id} edited by user {actor.id}: {sorted(k for k in values if k != 'updated_at')}")
        return EditOutcome(business=business, released_image_url=released)

    @staticmethod
    def remove(db: Session, business_id: int, actor: Actor) -> RemovalOutcome:
        """
        Delete a business.

        Raises:
            UnauthorizedError: anonymous actor
            NotFoundError: unknown business
            ForbiddenError: actor is neither owner nor admin
        """
        if actor.is_anonymous:
            raise UnauthorizedError("Authentication required")

        statement = (
            delete(models.Business)
            .where(
                models.Business.id == business_id,
                BusinessWorkflowService._owned_by(actor)
            )
            .returning(models.Business.image_url)
            .execution_options(synchronize_session=False)
        )
        with unit_of_work(db, "Failed to delete business"):
            row = db.execute(statement).first()
            if row is None:
                BusinessWorkflowService._raise_missing_or_denied(
                    db, business_id, actor, BusinessAction.REMOVE
                )

        logger.info(f"Business {business_id} deleted by user {actor.id}")
        return RemovalOutcome(business_id=business_id, released_image_url=row.image_url)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class BusinessQueryService:
    """Read side of the directory: listings, detail, owner view, featured."""

    @staticmethod
    def list_visible(db: Session, filters: BusinessFilters, actor: Actor) -> BusinessListResponse:
        """
        List businesses newest first with filters and pagination.

        Only approved businesses are returned unless ``filters.approved_only`` is
        false, which is restricted to admins reviewing the full directory.
        """
        if not filters.approved_only:
            require(
                actor,
                BusinessAction.LIST_ALL,
                message="Admin privileges required to list unapproved businesses"
            )

        query = db.query(models.Business)

        if filters.approved_only:
            query = query.filter(models.Business.is_approved.is_(True))

        if filters.category_id is not None:
            query = query.filter(models.Business.category_id == filters.category_id)

        if filters.location_id is not None:
            query = query.filter(models.Business.location_id == filters.location_id)

        search = (filters.search or "").strip()
        if search:
            pattern = _like_pattern(search)
            query = query.filter(or_(
                models.Business.name.ilike(pattern, escape="\\"),
                models.Business.description.ilike(pattern, escape="\\")
            ))

        total = query.count()
        total_pages = math.ceil(total / filters.limit) if total > 0 else 0
        offset = (filters.page - 1) * filters.limit

        businesses = query.order_by(
            models.Business.created_at.desc(),
            models.Business.id.desc()
        ).offset(offset).limit(filters.limit).all()

        logger.info(f"Retrieved {len(businesses)} businesses (page {filters.page}/{total_pages})")

        return BusinessListResponse(
            data=[BusinessResponse.model_validate(b) for b in businesses],
            pagination=PaginationMeta(
                page=filters.page,
                limit=filters.limit,
                total=total,
                total_pages=total_pages
            )
        )

    @staticmethod
    def get_business(db: Session, business_id: int, actor: Actor) -> BusinessDetailResponse:
        """Single business with category/location names. Pending ones are hidden from everyone but owner and admins."""
        business = db.query(models.Business).options(
            joinedload(models.Business.category),
            joinedload(models.Business.location)
        ).filter(models.Business.id == business_id).first()

        if business is None or not is_allowed(actor, BusinessAction.VIEW, business):
            raise NotFoundError("Business", business_id)

        return BusinessDetailResponse.model_validate(business)

    @staticmethod
    def list_for_owner(db: Session, actor: Actor) -> List[BusinessResponse]:
        """All of the actor's own businesses regardless of approval state"""
        if actor.is_anonymous:
            raise UnauthorizedError("Authentication required")

        businesses = db.query(models.Business).filter(
            models.Business.owner_id == actor.id
        ).order_by(models.Business.created_at.desc(), models.Business.id.desc()).all()

        return [BusinessResponse.model_validate(b) for b in businesses]

    @staticmethod
    def featured(db: Session, limit: int) -> List[FeaturedBusiness]:
        """Random sample of approved businesses for the home page"""
        businesses = db.query(models.Business).options(
            joinedload(models.Business.category),
            joinedload(models.Business.location)
        ).filter(
            models.Business.is_approved.is_(True)
        ).order_by(func.random()).limit(limit).all()

        return [
            FeaturedBusiness.model_validate(b).model_copy(update={
                "category_name": b.category.name if b.category else None,
                "location_name": b.location.name if b.location else None,
            })
            for b in businesses
        ]
