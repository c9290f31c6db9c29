from fastapi import FastAPI

from app.core.config import get_settings
from app.core.exceptions import FunctionError
from app.db.database import engine
from app.db.database import Base
from app.models import user_models, user_role_models, imported_user_models  # noqa: F401
from app.api.v1.api import api_router
from app.api.v1.endpoints.functions import parse_csv_router
from app.web import pages_router
from app.utils.logger import configure_logging

configure_logging(get_settings().log_level)

# Create all tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title="CSV User Importer")

app.add_exception_handler(FunctionError, parse_csv_router.function_error_handler)

app.include_router(api_router, prefix="/api/v1")
app.include_router(parse_csv_router.router)
app.include_router(pages_router.router)


@app.get("/health")
def health():
    return {"status": "ok"}
