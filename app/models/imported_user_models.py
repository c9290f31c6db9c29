import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.database import Base


class ImportedUser(Base):
    __tablename__ = "imported_users"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))

    imported_by = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    full_name = Column(String, nullable=False)
    postal_code = Column(String, nullable=True)
    birthday = Column(Date, nullable=True)

    generated_email = Column(String, nullable=False)
    generated_password = Column(String, nullable=False)

    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )

    importer = relationship("User", foreign_keys=[imported_by])
