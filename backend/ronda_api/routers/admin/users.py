"""
Staff management endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ronda_api.routers._common import respond
from ronda_api.services.domain import UserService
from shared.infrastructure.db import get_db
from shared.utils.schemas import UserCreate, UserUpdate


router = APIRouter(tags=["admin-users"])


@router.get("/users")
def list_users(db: Session = Depends(get_db)):
    return respond(UserService(db).list_all())


@router.post("/users")
def create_user(body: UserCreate, db: Session = Depends(get_db)):
    return respond(UserService(db).create(body), status.HTTP_201_CREATED)


@router.put("/users/{user_id}")
def update_user(user_id: int, body: UserUpdate, db: Session = Depends(get_db)):
    return respond(UserService(db).update(user_id, body))


@router.delete("/users/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    """Blocked for staff with recorded orders or reservations."""
    return respond(UserService(db).delete(user_id))
