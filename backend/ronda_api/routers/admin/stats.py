"""
Dashboard statistics endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ronda_api.routers._common import respond
from ronda_api.services.domain import StatsService
from shared.infrastructure.db import get_db


router = APIRouter(tags=["admin-stats"])


@router.get("/stats")
def get_stats(db: Session = Depends(get_db)):
    """Totals, today's sales, 7-day series, status distribution and top tables."""
    return respond(StatsService(db).dashboard())
