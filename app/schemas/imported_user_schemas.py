from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CSVUploadSchema(BaseModel):
    csv_content: Optional[str] = Field(None, alias="csvContent")


class GeneratedUserResponse(BaseModel):
    full_name: str
    postal_code: str
    birthday: str
    generated_email: str
    generated_password: str

    class Config:
        from_attributes = True


class RowErrorResponse(BaseModel):
    line: int
    message: str

    class Config:
        from_attributes = True


class CSVImportResponse(BaseModel):
    success: bool
    users: List[GeneratedUserResponse]
    count: int
    errors: List[RowErrorResponse] = []


class ImportedUserResponse(BaseModel):
    id: str
    imported_by: str
    full_name: str
    postal_code: Optional[str] = None
    birthday: Optional[date] = None
    generated_email: str
    generated_password: str
    created_at: datetime

    class Config:
        from_attributes = True
