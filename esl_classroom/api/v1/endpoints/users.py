# esl_classroom/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from esl_classroom.core.security import get_current_user, get_password_hash
from esl_classroom.db.session import get_db
from esl_classroom.models.user import User
from esl_classroom.schemas.user import UserPublic, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
def read_me(
    current_user: User = Depends(get_current_user),
):
    return current_user


@router.put("/me", response_model=UserPublic)
def update_me(
    obj_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    update_data = obj_in.model_dump(exclude_unset=True)
    if update_data.get("name") is None:
        update_data.pop("name", None)
    password = update_data.pop("password", None)
    if password:
        current_user.password_hash = get_password_hash(password)
    for field, value in update_data.items():
        setattr(current_user, field, value)
    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return current_user
