"""
Rondas router.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ronda_api.routers._common import respond
from ronda_api.services.domain import RondaService
from shared.infrastructure.db import get_db
from shared.utils.schemas import CloseTableRequest


router = APIRouter(prefix="/api/rondas", tags=["rondas"])


@router.post("/{ronda_id}/close")
def close_ronda(ronda_id: int, body: CloseTableRequest, db: Session = Depends(get_db)):
    """Settle a ronda by id; records the payment and frees its tables."""
    return respond(RondaService(db).close_ronda(ronda_id, body))
