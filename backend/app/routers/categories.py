from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from .. import schemas
from ..dependencies import get_db, get_current_actor
from ..policies import Actor
from ..services.taxonomy_service import category_service

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=schemas.DataResponse[List[schemas.Category]])
def list_categories(db: Session = Depends(get_db)):
    """List all categories ordered by name"""
    return schemas.DataResponse(data=category_service.list_all(db))


@router.get("/with-count", response_model=schemas.DataResponse[List[schemas.CategoryWithCount]])
def list_categories_with_count(db: Session = Depends(get_db)):
    """Categories with the number of approved businesses in each"""
    return schemas.DataResponse(data=category_service.list_with_count(db))


@router.get("/{category_id}", response_model=schemas.DataResponse[schemas.Category])
def get_category(category_id: int, db: Session = Depends(get_db)):
    return schemas.DataResponse(data=category_service.get(db, category_id))


@router.post("", response_model=schemas.DataResponse[schemas.Category], status_code=status.HTTP_201_CREATED)
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """Create a category (admin only)"""
    created = category_service.create(db, category, actor)
    return schemas.DataResponse(message="Category created successfully", data=created)


@router.put("/{category_id}", response_model=schemas.DataResponse[schemas.Category])
def update_category(
    category_id: int,
    category: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """Update a category (admin only)"""
    updated = category_service.update(db, category_id, category, actor)
    return schemas.DataResponse(message="Category updated successfully", data=updated)


@router.delete("/{category_id}", response_model=schemas.MessageResponse)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """Delete a category no business uses (admin only)"""
    category_service.delete(db, category_id, actor)
    return schemas.MessageResponse(message="Category deleted successfully")
