"""
Zones router.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ronda_api.routers._common import respond
from ronda_api.services.domain import ZoneService
from shared.infrastructure.db import get_db
from shared.utils.schemas import ZoneCreate, ZoneUpdate


router = APIRouter(prefix="/api/zones", tags=["zones"])


@router.get("")
def list_zones(db: Session = Depends(get_db)):
    return respond(ZoneService(db).list_all())


@router.post("")
def create_zone(body: ZoneCreate, db: Session = Depends(get_db)):
    return respond(ZoneService(db).create(body), status.HTTP_201_CREATED)


@router.put("/{zone_id}")
def update_zone(zone_id: int, body: ZoneUpdate, db: Session = Depends(get_db)):
    return respond(ZoneService(db).update(zone_id, body))


@router.delete("/{zone_id}")
def delete_zone(zone_id: int, db: Session = Depends(get_db)):
    """Blocked while tables are assigned to the zone."""
    return respond(ZoneService(db).delete(zone_id))
