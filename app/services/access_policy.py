from sqlalchemy.orm import Session

from app.models.user_models import User
from app.models.user_role_models import AppRole, UserRole


class AccessDeniedError(PermissionError):
    pass


def has_role(db: Session, user_id: str, role: AppRole) -> bool:
    return (
        db.query(UserRole.id)
        .filter(UserRole.user_id == str(user_id), UserRole.role == role)
        .first()
        is not None
    )


def get_roles(db: Session, user_id: str) -> list[AppRole]:
    rows = (
        db.query(UserRole.role)
        .filter(UserRole.user_id == str(user_id))
        .order_by(UserRole.role)
        .all()
    )
    return [row.role for row in rows]


def require_role(db: Session, user: User, role: AppRole) -> None:
    if not has_role(db, user.id, role):
        raise AccessDeniedError(f"{role.value} role required")


def grant_role(db: Session, user: User, role: AppRole) -> UserRole:
    existing = (
        db.query(UserRole)
        .filter(UserRole.user_id == str(user.id), UserRole.role == role)
        .first()
    )
    if existing:
        return existing

    user_role = UserRole(user_id=str(user.id), role=role)
    db.add(user_role)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user_role)
    return user_role
