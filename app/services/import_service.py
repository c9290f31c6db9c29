import csv
import io
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List

from fastapi import HTTPException, status
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.models.imported_user_models import ImportedUser
from app.models.user_models import User
from app.models.user_role_models import AppRole
from app.services.access_policy import require_role
from app.services.credential_service import GeneratedUser, generate_users
from app.services.csv_parser_service import RowError, parse_csv

logger = logging.getLogger(__name__)

EXPORT_HEADERS = ["Full Name", "Postal Code", "Birthday", "Generated Email", "Generated Password"]


class ImportFailedError(Exception):
    pass


@dataclass
class ImportResult:
    users: List[GeneratedUser] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)
    records: List[ImportedUser] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.users)


# -------------------------
# IMPORT (parse -> generate -> insert)
# -------------------------
def import_csv(db: Session, csv_content: str, importer: User, settings: Settings) -> ImportResult:
    require_role(db, importer, AppRole.admin)

    parsed = parse_csv(
        csv_content,
        max_rows=settings.max_csv_rows,
        max_bytes=settings.max_csv_bytes,
    )
    logger.info(
        "Parsed %s rows from CSV for user %s (%s skipped)",
        len(parsed.rows),
        importer.id,
        len(parsed.errors),
    )
    for error in parsed.errors:
        logger.warning("Skipping CSV line %s: %s", error.line, error.message)

    users = generate_users(
        parsed.rows,
        domain=settings.email_domain,
        password_length=settings.password_length,
    )

    records = [
        ImportedUser(
            imported_by=str(importer.id),
            full_name=u.full_name,
            postal_code=u.postal_code,
            birthday=date.fromisoformat(u.birthday),
            generated_email=u.generated_email,
            generated_password=u.generated_password,
        )
        for u in users
    ]

    # one batch: either every row is stored or none is
    try:
        db.add_all(records)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error inserting imported users")
        raise ImportFailedError("Failed to store imported users")

    for record in records:
        db.refresh(record)

    logger.info("Successfully imported %s users", len(records))
    return ImportResult(users=users, errors=parsed.errors, records=records)


# -------------------------
# READ / DELETE (admin only)
# -------------------------
def list_imported_users(
    db: Session, viewer: User, skip: int = 0, limit: int | None = None
) -> list[ImportedUser]:
    require_role(db, viewer, AppRole.admin)
    query = db.query(ImportedUser).order_by(desc(ImportedUser.created_at)).offset(skip)
    # no limit means every record
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def get_imported_user(db: Session, viewer: User, imported_user_id: str) -> ImportedUser:
    require_role(db, viewer, AppRole.admin)
    record = db.query(ImportedUser).filter(ImportedUser.id == imported_user_id).first()
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Imported user not found")
    return record


def delete_imported_user(db: Session, viewer: User, imported_user_id: str) -> None:
    record = get_imported_user(db, viewer, imported_user_id)
    db.delete(record)
    db.commit()
    logger.info("Imported user %s deleted by %s", imported_user_id, viewer.id)


# -------------------------
# EXPORT
# -------------------------
def export_users_csv(users: Iterable) -> str:
    buffer = io.StringIO()
    buffer.write(",".join(EXPORT_HEADERS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for u in users:
        writer.writerow(
            [
                u.full_name,
                u.postal_code or "",
                u.birthday.isoformat() if isinstance(u.birthday, date) else (u.birthday or ""),
                u.generated_email,
                u.generated_password,
            ]
        )
    return buffer.getvalue()
