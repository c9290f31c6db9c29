from pathlib import Path

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.core.config import get_settings

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.globals["email_domain"] = get_settings().email_domain

router = APIRouter(tags=["Pages"], include_in_schema=False)


@router.get("/", name="index")
def index(request: Request):
    return RedirectResponse(request.url_for("dashboard"), status_code=status.HTTP_303_SEE_OTHER)


@router.get("/auth", response_class=HTMLResponse, name="auth_page")
def auth_page(request: Request):
    return templates.TemplateResponse(request, "auth.html", {})


@router.get("/dashboard", response_class=HTMLResponse, name="dashboard")
def dashboard(request: Request):
    # the page authenticates itself with the stored bearer token
    return templates.TemplateResponse(request, "dashboard.html", {})
