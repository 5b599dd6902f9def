from typing import Any, Dict, List, Type
import logging

from pydantic import BaseModel
from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from .. import models
from ..enums import BusinessAction
from ..exceptions import ConflictError, InvalidInputError, NotFoundError
from ..policies import Actor, require
from .transactions import unit_of_work

logger = logging.getLogger(__name__)


class TaxonomyService:
    """
    CRUD for the lookup tables businesses are classified by (categories, locations).

    Reads are public; writes are admin only. A row referenced by any business
    cannot be deleted.
    """

    def __init__(self, model: Type[Any], label: str, business_fk):
        self.model = model
        self.label = label
        self.business_fk = business_fk

    def list_all(self, db: Session) -> List[Any]:
        return db.query(self.model).order_by(self.model.name).all()

    def list_with_count(self, db: Session) -> List[Dict[str, Any]]:
        """Every row with the number of approved businesses referencing it, ordered by name"""
        rows = db.query(
            self.model,
            func.count(models.Business.id)
        ).outerjoin(
            models.Business,
            and_(self.business_fk == self.model.id, models.Business.is_approved.is_(True))
        ).group_by(self.model.id).order_by(self.model.name).all()

        return [
            {**{c.name: getattr(item, c.name) for c in self.model.__table__.columns}, "business_count": count}
            for item, count in rows
        ]

    def get(self, db: Session, item_id: int) -> Any:
        item = db.get(self.model, item_id)
        if item is None:
            raise NotFoundError(self.label, item_id)
        return item

    def _clean(self, db: Session, data: BaseModel, exclude_id: int = None) -> Dict[str, Any]:
        values = data.model_dump()
        name = (values.get("name") or "").strip()
        if not name:
            raise InvalidInputError("name", f"Please provide a {self.label.lower()} name")
        if len(name) > 100:
            raise InvalidInputError("name", "name must be at most 100 characters")
        values["name"] = name

        # optional fields: blank means unset
        for field, value in values.items():
            if field != "name" and isinstance(value, str) and not value.strip():
                values[field] = None

        duplicate = db.query(self.model.id).filter(self.model.name == name)
        if exclude_id is not None:
            duplicate = duplicate.filter(self.model.id != exclude_id)
        if duplicate.first() is not None:
            raise ConflictError(f"{self.label} '{name}' already exists")

        return values

    def create(self, db: Session, data: BaseModel, actor: Actor) -> Any:
        require(actor, BusinessAction.MANAGE_TAXONOMY, message="Admin privileges required")
        values = self._clean(db, data)

        item = self.model(**values)
        with unit_of_work(
            db,
            f"Failed to create {self.label.lower()}",
            conflict_message=f"{self.label} '{values['name']}' already exists"
        ):
            db.add(item)
        db.refresh(item)

        logger.info(f"{self.label} {item.id} '{item.name}' created by admin {actor.id}")
        return item

    def update(self, db: Session, item_id: int, data: BaseModel, actor: Actor) -> Any:
        """Replace name and optional fields; omitted optional fields are cleared"""
        require(actor, BusinessAction.MANAGE_TAXONOMY, message="Admin privileges required")
        item = self.get(db, item_id)
        values = self._clean(db, data, exclude_id=item_id)

        with unit_of_work(
            db,
            f"Failed to update {self.label.lower()}",
            conflict_message=f"{self.label} '{values['name']}' already exists"
        ):
            for field, value in values.items():
                setattr(item, field, value)
        db.refresh(item)

        logger.info(f"{self.label} {item_id} updated by admin {actor.id}")
        return item

    def delete(self, db: Session, item_id: int, actor: Actor) -> None:
        """
        Delete a row nobody references.

        Raises:
            ConflictError: at least one business (approved or not) references it
        """
        require(actor, BusinessAction.MANAGE_TAXONOMY, message="Admin privileges required")
        self.get(db, item_id)

        in_use = db.query(func.count(models.Business.id)).filter(self.business_fk == item_id).scalar()
        if in_use:
            raise ConflictError(
                f"Cannot delete {self.label.lower()} as it is being used by businesses",
                details={"business_count": in_use}
            )

        # the foreign key still guards against a business added meanwhile
        with unit_of_work(
            db,
            f"Failed to delete {self.label.lower()}",
            conflict_message=f"Cannot delete {self.label.lower()} as it is being used by businesses"
        ):
            db.query(self.model).filter(self.model.id == item_id).delete(synchronize_session=False)

        logger.info(f"{self.label} {item_id} deleted by admin {actor.id}")


category_service = TaxonomyService(models.Category, "Category", models.Business.category_id)
location_service = TaxonomyService(models.Location, "Location", models.Business.location_id)
