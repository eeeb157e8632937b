# backend/routes/pages.py
import logging
from datetime import timedelta
from typing import Optional
from urllib.parse import urlencode, urlparse

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.catalog import Category, Project, Unit
from models.material import Material
from models.stock import Inflow, Outflow
from models.users import Role, User
from routes.auth import authenticate, clear_session_cookie, set_session_cookie
from schemas.user import SessionUser
from utils.inventory_queries import build_dashboard, get_inventory_movements, get_materials_with_units
from utils.permissions import can_manage_inventory, can_manage_users, can_view_dashboard
from utils.templating import templates
from utils.time_utils import utcnow
from utils.tokenJWT import (
    DASHBOARD_PATH,
    PageRedirect,
    create_session_token,
    page_role_required,
    read_session,
    require_page_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], include_in_schema=False)

PAGE_SIZE = 50

NAV_ITEMS = (
    ("Dashboard", "/dashboard"),
    ("Materials", "/dashboard/materials"),
    ("Categories", "/dashboard/categories"),
    ("Units", "/dashboard/units"),
    ("Projects", "/dashboard/projects"),
    ("Inflows", "/dashboard/inflows"),
    ("Outflows", "/dashboard/outflows"),
    ("Reports", "/dashboard/reports"),
)


def safe_callback(request: Request, callback_url: Optional[str]) -> str:
    """Reduce a callback to a same-site path; anything else falls back to the dashboard."""
    if not callback_url:
        return DASHBOARD_PATH
    parsed = urlparse(callback_url)
    if parsed.scheme and parsed.scheme not in ("http", "https"):
        return DASHBOARD_PATH
    if parsed.netloc and parsed.netloc != request.url.netloc:
        return DASHBOARD_PATH
    if not parsed.path.startswith("/") or parsed.path.startswith("//"):
        return DASHBOARD_PATH
    if parsed.path.startswith("/auth/"):
        return DASHBOARD_PATH
    return f"{parsed.path}?{parsed.query}" if parsed.query else parsed.path


def _page(request: Request, name: str, user: Optional[SessionUser], **context):
    nav = list(NAV_ITEMS)
    if user is not None and can_manage_users(user.role):
        nav.append(("Users", "/dashboard/users"))
    context.update({
        "user": user,
        "nav_items": nav,
        "current_path": request.url.path,
        "can_edit": user is not None and can_manage_inventory(user.role),
    })
    return templates.TemplateResponse(request, name, context)


# ---- Public pages ----

@router.get("/")
def landing(request: Request):
    return _page(request, "index.html", read_session(request))


@router.get("/auth/signin")
def signin_form(request: Request, callback_url: Optional[str] = Query(None, alias="callbackUrl")):
    target = safe_callback(request, callback_url)
    if read_session(request) is not None:
        return RedirectResponse(target, status_code=status.HTTP_302_FOUND)
    return _page(request, "auth/signin.html", None, callback_url=target, error=None)


@router.post("/auth/signin")
def signin_submit(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    callback_url: Optional[str] = Form(None, alias="callbackUrl"),
    db: Session = Depends(get_db),
):
    target = safe_callback(request, callback_url)
    db_user = authenticate(db, username, password)
    if db_user is None:
        logger.warning("Failed sign-in for %r from the sign-in form", username)
        response = _page(request, "auth/signin.html", None, callback_url=target, error="Invalid username or password")
        response.status_code = status.HTTP_401_UNAUTHORIZED
        return response

    response = RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, create_session_token(db_user))
    logger.info("User %s signed in", db_user.username)
    return response


@router.get("/auth/signout")
def signout_page():
    response = RedirectResponse("/", status_code=status.HTTP_302_FOUND)
    clear_session_cookie(response)
    return response


@router.get("/auth/error")
def error_page(request: Request, error: Optional[str] = Query(None)):
    return _page(request, "auth/error.html", read_session(request), error=error or "Authentication error")


# ---- Dashboard pages ----

@router.get("/dashboard")
def dashboard_page(
    request: Request,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_page_user),
):
    # Redirecting back to /dashboard would loop for a role without dashboard access
    if not can_view_dashboard(user.role):
        raise PageRedirect(f"/auth/error?{urlencode({'error': 'AccessDenied'})}")
    return _page(request, "dashboard/index.html", user, dashboard=build_dashboard(db))


@router.get("/dashboard/materials")
def materials_page(
    request: Request,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_page_user),
):
    materials = (
        db.query(Material)
        .options(joinedload(Material.category))
        .filter(Material.is_active.is_(True))
        .order_by(Material.name)
        .all()
    )
    return _page(
        request,
        "dashboard/materials.html",
        user,
        materials=materials,
        materials_with_units={m["id"]: m["units"] for m in get_materials_with_units(db)},
    )


# Categories, units and projects share one listing template
CATALOG_PAGES = {
    "categories": (Category, "Categories"),
    "units": (Unit, "Units"),
    "projects": (Project, "Projects"),
}


def _catalog_page(kind: str):
    model, title = CATALOG_PAGES[kind]

    def _view(
        request: Request,
        db: Session = Depends(get_db),
        user: SessionUser = Depends(require_page_user),
    ):
        rows = db.query(model).filter(model.is_active.is_(True)).order_by(model.name).all()
        return _page(request, "dashboard/catalog.html", user, title=title, kind=kind, rows=rows)

    _view.__name__ = f"{kind}_page"
    return _view


for _kind in CATALOG_PAGES:
    router.add_api_route(f"/dashboard/{_kind}", _catalog_page(_kind), methods=["GET"])


@router.get("/dashboard/inflows")
def inflows_page(
    request: Request,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_page_user),
):
    rows = (
        db.query(Inflow)
        .options(joinedload(Inflow.material), joinedload(Inflow.unit), joinedload(Inflow.project))
        .order_by(Inflow.created_at.desc())
        .offset((page - 1) * PAGE_SIZE)
        .limit(PAGE_SIZE)
        .all()
    )
    return _page(request, "dashboard/inflows.html", user, rows=rows, page=page)


@router.get("/dashboard/outflows")
def outflows_page(
    request: Request,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_page_user),
):
    rows = (
        db.query(Outflow)
        .options(joinedload(Outflow.material), joinedload(Outflow.unit), joinedload(Outflow.project))
        .order_by(Outflow.created_at.desc())
        .offset((page - 1) * PAGE_SIZE)
        .limit(PAGE_SIZE)
        .all()
    )
    return _page(request, "dashboard/outflows.html", user, rows=rows, page=page)


@router.get("/dashboard/reports")
def reports_page(
    request: Request,
    days: int = Query(30, ge=1, le=366),
    db: Session = Depends(get_db),
    user: SessionUser = Depends(require_page_user),
):
    end = utcnow()
    start = end - timedelta(days=days)
    movements = get_inventory_movements(db, start, end)
    return _page(
        request,
        "dashboard/reports.html",
        user,
        movements=movements,
        days=days,
        start=start,
        end=end,
    )


@router.get("/dashboard/users")
def users_page(
    request: Request,
    db: Session = Depends(get_db),
    user: SessionUser = Depends(page_role_required(Role.SUPER_USER)),
):
    users = db.query(User).order_by(User.created_at.desc()).all()
    return _page(request, "dashboard/users.html", user, users=users, roles=list(Role))
