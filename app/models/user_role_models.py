import uuid
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship

from app.db.database import Base


class AppRole(str, enum.Enum):
    admin = "admin"
    user = "user"


class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(SAEnum(AppRole, name="app_role"), nullable=False, default=AppRole.user)

    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    user = relationship("User", back_populates="roles")

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
