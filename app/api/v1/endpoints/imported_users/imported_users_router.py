from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.imported_user_schemas import ImportedUserResponse
from app.services.dependencies import get_current_admin
from app.services.import_service import (
    delete_imported_user,
    export_users_csv,
    get_imported_user,
    list_imported_users,
)

router = APIRouter(prefix="/imported-users", tags=["Imported Users (Admin)"])


@router.get("", response_model=list[ImportedUserResponse])
def get_imported_users(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1),
):
    return list_imported_users(db=db, viewer=admin, skip=skip, limit=limit)


@router.get("/export")
def export_imported_users(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    users = list_imported_users(db=db, viewer=admin)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return Response(
        content=export_users_csv(users),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="generated-credentials-{stamp}.csv"'
        },
    )


@router.get("/{imported_user_id}", response_model=ImportedUserResponse)
def get_imported_user_by_id(
    imported_user_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return get_imported_user(db=db, viewer=admin, imported_user_id=imported_user_id)


@router.delete("/{imported_user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_imported_user_by_id(
    imported_user_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    delete_imported_user(db=db, viewer=admin, imported_user_id=imported_user_id)
    return None
