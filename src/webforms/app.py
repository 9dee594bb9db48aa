# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from webforms.auth.session import COOKIE_NAME, SessionCookieCodec
from webforms.auth.store import SessionStore
from webforms.auth.users import login, logout, register
from webforms.config import Settings, load_settings
from webforms.errors import DuplicateUsername, FormNotFound, InvalidCredentials, WebformsError
from webforms.infra.db import Database
from webforms.infra.form_repo import FormRepository
from webforms.infra.user_repo import UserRepository
from webforms.logging_config import log_id
from webforms.permissions import (
    Authenticated,
    cookie_settings,
    current_identity,
    load_identity_from_request,
    require_user,
    safe_next,
)

logger = logging.getLogger("webforms")
access_logger = logging.getLogger("webforms.access")

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

router = APIRouter()


def _render(request: Request, template_name: str, ctx: Optional[dict] = None, *, status_code: int = 200):
    """TemplateResponse wrapper injecting the login state."""
    base_ctx = {
        "logged_in": isinstance(current_identity(request), Authenticated),
    }
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FormNotFound)
    async def _not_found(request: Request, exc: FormNotFound):
        return _render(request, "error.html", {"status_code": 404, "message": "Not found"}, status_code=404)

    @app.exception_handler(WebformsError)
    async def _internal(request: Request, exc: WebformsError):
        logger.error("internal error on %s %s: %r", request.method, request.url.path, exc, exc_info=exc)
        return _render(
            request, "error.html", {"status_code": 500, "message": "Internal server error"}, status_code=500
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    db = Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        db.init_schema()
        yield
        application.state.sessions.clear()
        db.dispose()

    app = FastAPI(title="webforms", docs_url=None, redoc_url=None, lifespan=lifespan)

    app.state.settings = settings
    app.state.db = db
    app.state.sessions = SessionStore(max_age=settings.session_max_age)
    app.state.codec = SessionCookieCodec(
        settings.secret_key, salt=settings.cookie_salt, max_age=settings.session_max_age
    )
    app.state.users = UserRepository(db)
    app.state.forms = FormRepository(db)

    @app.middleware("http")
    async def _auth_middleware(request: Request, call_next):
        request.state.identity = load_identity_from_request(request)
        return await call_next(request)

    @app.middleware("http")
    async def _access_log(request: Request, call_next):
        start = time.monotonic()
        response = await call_next(request)
        elapsed_ms = (time.monotonic() - start) * 1000
        ident = getattr(request.state, "identity", None)
        user = log_id(ident.user_id) if isinstance(ident, Authenticated) else "-"
        access_logger.info(
            "method=%s path=%s status=%d elapsed_ms=%.1f user=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            user,
        )
        return response

    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
    register_error_handlers(app)
    app.include_router(router)
    return app


# ------------------ Routes ------------------


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    ident = current_identity(request)
    forms = []
    if isinstance(ident, Authenticated):
        forms = request.app.state.forms.list_for_owner(ident.user_id)
    return _render(request, "index.html", {"forms": forms})


@router.get("/login", response_class=HTMLResponse)
def login_get(request: Request, next: str = "/"):
    if isinstance(current_identity(request), Authenticated):
        return RedirectResponse(url=safe_next(next), status_code=303)
    return _render(request, "login.html", {"next": safe_next(next), "error": ""})


@router.post("/login")
def login_post(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    next: str = Form("/"),
):
    state = request.app.state
    try:
        cookie_value = login(state.users, state.sessions, state.codec, username.strip(), password)
    except InvalidCredentials:
        return _render(
            request,
            "login.html",
            {"next": safe_next(next), "error": "Invalid username or password"},
            status_code=401,
        )
    resp = RedirectResponse(url=safe_next(next), status_code=303)
    resp.set_cookie(COOKIE_NAME, cookie_value, **cookie_settings(state.settings))
    return resp


@router.post("/logout")
def logout_post(request: Request):
    state = request.app.state
    logout(state.sessions, state.codec, request.cookies.get(COOKIE_NAME))
    resp = RedirectResponse(url="/", status_code=303)
    resp.delete_cookie(COOKIE_NAME, path="/", secure=state.settings.cookie_secure, httponly=True, samesite="strict")
    return resp


@router.get("/register", response_class=HTMLResponse)
def register_get(request: Request):
    return _render(request, "register.html", {"error": ""})


@router.post("/register")
def register_post(request: Request, username: str = Form(""), password: str = Form("")):
    username = username.strip()
    if not username or not password:
        return _render(
            request, "register.html", {"error": "Username and password are required"}, status_code=400
        )
    try:
        register(request.app.state.users, username, password)
    except DuplicateUsername:
        return _render(
            request, "register.html", {"error": "Username already taken"}, status_code=409
        )
    return RedirectResponse(url="/login", status_code=303)


@router.get("/form/new", response_class=HTMLResponse)
def new_form(request: Request, user: Authenticated = Depends(require_user)):
    return _render(request, "form_edit.html", {"form": None})


@router.post("/form")
def create_form(
    request: Request,
    title: str = Form(""),
    fields: str = Form(""),
    published: bool = Form(False),
    user: Authenticated = Depends(require_user),
):
    request.app.state.forms.create(user.user_id, title=title.strip(), fields=fields, published=published)
    return RedirectResponse(url="/", status_code=303)


@router.get("/form/{form_id}", response_class=HTMLResponse)
def edit_form(request: Request, form_id: int, user: Authenticated = Depends(require_user)):
    form = request.app.state.forms.get(form_id, user.user_id)
    return _render(request, "form_edit.html", {"form": form})


@router.post("/form/{form_id}")
def update_form(
    request: Request,
    form_id: int,
    title: str = Form(""),
    fields: str = Form(""),
    published: bool = Form(False),
    user: Authenticated = Depends(require_user),
):
    request.app.state.forms.update(
        form_id, user.user_id, title=title.strip(), fields=fields, published=published
    )
    return RedirectResponse(url="/", status_code=303)


@router.post("/form/{form_id}/publish")
def publish_form(request: Request, form_id: int, user: Authenticated = Depends(require_user)):
    request.app.state.forms.set_published(form_id, user.user_id, True)
    return RedirectResponse(url="/", status_code=303)


@router.post("/form/{form_id}/unpublish")
def unpublish_form(request: Request, form_id: int, user: Authenticated = Depends(require_user)):
    request.app.state.forms.set_published(form_id, user.user_id, False)
    return RedirectResponse(url="/", status_code=303)


@router.post("/form/{form_id}/clone")
def clone_form(request: Request, form_id: int, user: Authenticated = Depends(require_user)):
    request.app.state.forms.clone(form_id, user.user_id)
    return RedirectResponse(url="/", status_code=303)


@router.post("/form/{form_id}/delete")
def delete_form(request: Request, form_id: int, user: Authenticated = Depends(require_user)):
    request.app.state.forms.delete(form_id, user.user_id)
    return RedirectResponse(url="/", status_code=303)
