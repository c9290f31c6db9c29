from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.auth_schemas import (
    PasswordUpdateIn,
    ProfileUpdateSchema,
    RolesResponse,
    UserResponse,
)
from app.services.access_policy import get_roles
from app.services.dependencies import get_current_user
from app.utils.hashing import get_password_hash, verify_password

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/me", response_model=UserResponse)
def get_my_profile(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserResponse)
def update_my_profile(
    payload: ProfileUpdateSchema,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if "full_name" in payload.model_fields_set:
        user.full_name = payload.full_name

    db.commit()
    db.refresh(user)
    return user


@router.get("/me/roles", response_model=RolesResponse)
def get_my_roles(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"roles": get_roles(db, user.id)}


@router.put("/me/password", status_code=status.HTTP_200_OK)
def update_my_password(
    payload: PasswordUpdateIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if payload.new_password != payload.confirm_new_password:
        raise HTTPException(status_code=400, detail="New passwords do not match")

    if not verify_password(payload.current_password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password incorrect",
        )

    user.password = get_password_hash(payload.new_password)
    # changing the password signs out every other session
    user.token_version += 1
    db.commit()
    return {"message": "Password updated successfully"}
