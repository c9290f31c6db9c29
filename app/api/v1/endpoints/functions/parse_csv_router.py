import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.exceptions import FunctionError
from app.db.database import get_db
from app.models.user_models import User
from app.schemas.imported_user_schemas import CSVImportResponse, CSVUploadSchema
from app.services.access_policy import AccessDeniedError
from app.services.csv_parser_service import CSVValidationError
from app.services.dependencies import get_function_admin
from app.services.import_service import ImportFailedError, import_csv

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

router = APIRouter(prefix="/functions", tags=["Functions"])


def function_error_handler(request: Request, exc: FunctionError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=CORS_HEADERS,
    )


async def read_csv_content(request: Request) -> str:
    try:
        body = await request.json()
    except ValueError:
        raise FunctionError("Request body must be valid JSON")

    try:
        payload = CSVUploadSchema.model_validate(body)
    except ValidationError:
        raise FunctionError("No CSV content provided")

    if not payload.csv_content or not payload.csv_content.strip():
        raise FunctionError("No CSV content provided")
    return payload.csv_content


@router.options("/parse-csv")
def parse_csv_preflight():
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.post("/parse-csv", response_model=CSVImportResponse)
def parse_csv_upload(
    # the admin check runs before the body is read
    admin: User = Depends(get_function_admin),
    csv_content: str = Depends(read_csv_content),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    logger.info("Processing CSV for user: %s", admin.id)

    try:
        result = import_csv(db, csv_content, importer=admin, settings=settings)
    except AccessDeniedError as exc:
        raise FunctionError(f"Forbidden: {exc}", status_code=status.HTTP_403_FORBIDDEN)
    except (CSVValidationError, ImportFailedError) as exc:
        logger.warning("CSV import rejected for user %s: %s", admin.id, exc)
        raise FunctionError(str(exc))
    except Exception:
        logger.exception("Error in parse-csv function")
        raise FunctionError("Failed to process CSV file")

    body = CSVImportResponse(
        success=True,
        users=[u.to_dict() for u in result.users],
        count=result.count,
        errors=[{"line": e.line, "message": e.message} for e in result.errors],
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=body.model_dump(),
        headers=CORS_HEADERS,
    )
