"""
Table groups router.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ronda_api.routers._common import respond
from ronda_api.services.domain import TableGroupService
from shared.infrastructure.db import get_db
from shared.utils.schemas import GroupTablesRequest


router = APIRouter(prefix="/api/table-groups", tags=["table-groups"])


@router.get("")
def list_groups(db: Session = Depends(get_db)):
    return respond(TableGroupService(db).list_active_groups())


@router.post("")
def group_tables(body: GroupTablesRequest, db: Session = Depends(get_db)):
    return respond(TableGroupService(db).group_tables(body), status.HTTP_201_CREATED)


@router.delete("/{group_id}")
def ungroup_tables(group_id: int, db: Session = Depends(get_db)):
    return respond(TableGroupService(db).ungroup(group_id))
