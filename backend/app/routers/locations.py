from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from .. import schemas
from ..dependencies import get_db, get_current_actor
from ..policies import Actor
from ..services.taxonomy_service import location_service

router = APIRouter(
    prefix="/locations",
    tags=["Locations"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=schemas.DataResponse[List[schemas.Location]])
def list_locations(db: Session = Depends(get_db)):
    """List all locations ordered by name"""
    return schemas.DataResponse(data=location_service.list_all(db))


@router.get("/with-count", response_model=schemas.DataResponse[List[schemas.LocationWithCount]])
def list_locations_with_count(db: Session = Depends(get_db)):
    """Locations with the number of approved businesses in each"""
    return schemas.DataResponse(data=location_service.list_with_count(db))


@router.get("/{location_id}", response_model=schemas.DataResponse[schemas.Location])
def get_location(location_id: int, db: Session = Depends(get_db)):
    return schemas.DataResponse(data=location_service.get(db, location_id))


@router.post("", response_model=schemas.DataResponse[schemas.Location], status_code=status.HTTP_201_CREATED)
def create_location(
    location: schemas.LocationCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """Create a location (admin only)"""
    created = location_service.create(db, location, actor)
    return schemas.DataResponse(message="Location created successfully", data=created)


@router.put("/{location_id}", response_model=schemas.DataResponse[schemas.Location])
def update_location(
    location_id: int,
    location: schemas.LocationUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """Update a location (admin only)"""
    updated = location_service.update(db, location_id, location, actor)
    return schemas.DataResponse(message="Location updated successfully", data=updated)


@router.delete("/{location_id}", response_model=schemas.MessageResponse)
def delete_location(
    location_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """Delete a location no business uses (admin only)"""
    location_service.delete(db, location_id, actor)
    return schemas.MessageResponse(message="Location deleted successfully")
