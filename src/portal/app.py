# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import random
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pymongo import MongoClient
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.auth.session import SessionUser
from portal.auth.users import AuthError, authenticate, register
from portal.config import Settings
from portal.context import ServiceContext, get_context
from portal.infra.mongo import connect, ensure_indexes
from portal.middleware import SessionMiddleware
from portal.permissions import current_user_optional, get_session, require_admin, require_login
from portal.schemas import LoginForm, SignupForm, validate

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

MEMBER_IMAGES = ["1.svg", "2.svg", "3.svg"]


def _render(request: Request, template_name: str, ctx: Optional[dict] = None, *, status_code: int = 200):
    """TemplateResponse wrapper injecting the session user."""
    base_ctx = {"current_user": current_user_optional(request)}
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=302)


async def _http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405):
        return _render(request, "404.html", status_code=404)
    if exc.status_code == 403:
        return _render(request, "403.html", {"message": exc.detail}, status_code=403)
    return await http_exception_handler(request, exc)


def create_app(settings: Optional[Settings] = None, *, client: Optional[MongoClient] = None) -> FastAPI:
    """Build the application around an explicit service context.

    ``client`` lets callers (tests, scripts) supply their own Mongo client; when
    omitted one is created from ``settings`` and closed on shutdown.
    """
    settings = settings or Settings.from_env()
    owns_client = client is None
    client = client or connect(settings)
    ctx = ServiceContext.build(settings, client)
    ensure_indexes(client[settings.mongodb_database])

    @asynccontextmanager
    async def _lifespan(_app: FastAPI):
        yield
        if owns_client:
            client.close()

    app = FastAPI(lifespan=_lifespan)
    app.state.ctx = ctx
    app.add_middleware(SessionMiddleware)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    # ------------------ Public ------------------

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request):
        return _render(request, "index.html", {"user": current_user_optional(request)})

    @app.get("/signup", response_class=HTMLResponse)
    def signup_get(request: Request):
        return _render(request, "signup.html", {"error": None})

    @app.post("/signup")
    async def signup_post(request: Request, ctx: ServiceContext = Depends(get_context)):
        form, errors = validate(SignupForm, await request.form())
        if errors:
            return _render(request, "signup.html", {"error": "\n".join(errors)}, status_code=400)
        try:
            user = await run_in_threadpool(register, ctx.users, form)
        except AuthError as e:
            return _render(request, "signup.html", {"error": str(e)}, status_code=400)
        get_session(request).user = user
        return _redirect("/members")

    @app.get("/login", response_class=HTMLResponse)
    def login_get(request: Request):
        return _render(request, "login.html", {"error": None})

    @app.post("/login")
    async def login_post(request: Request, ctx: ServiceContext = Depends(get_context)):
        form, errors = validate(LoginForm, await request.form())
        if errors:
            return _render(request, "login.html", {"error": "\n".join(errors)}, status_code=400)
        try:
            user = await run_in_threadpool(authenticate, ctx.users, str(form.email), form.password)
        except AuthError as e:
            return _render(request, "login.html", {"error": str(e)}, status_code=400)
        get_session(request).user = user
        return _redirect("/members")

    @app.get("/logout")
    def logout(request: Request):
        get_session(request).destroy()
        return _redirect("/")

    # ------------------ Members ------------------

    @app.get("/members", response_class=HTMLResponse)
    def members(request: Request, user: SessionUser = Depends(require_login)):
        return _render(
            request,
            "members.html",
            {"user": user, "image": random.choice(MEMBER_IMAGES)},
        )

    # ------------------ Admin ------------------

    @app.get("/admin", response_class=HTMLResponse)
    def admin(
        request: Request,
        user: SessionUser = Depends(require_admin),
        ctx: ServiceContext = Depends(get_context),
    ):
        return _render(request, "admin.html", {"users": ctx.users.list_all(), "current_name": user.name})

    @app.get("/admin/promote/{name}")
    def promote(name: str, user: SessionUser = Depends(require_admin), ctx: ServiceContext = Depends(get_context)):
        if ctx.users.set_user_type(name, "admin"):
            logger.info("%s promoted %r to admin", user.email, name)
        return _redirect("/admin")

    @app.get("/admin/demote/{name}")
    def demote(name: str, user: SessionUser = Depends(require_admin), ctx: ServiceContext = Depends(get_context)):
        if ctx.users.set_user_type(name, "user"):
            logger.info("%s demoted %r to user", user.email, name)
        return _redirect("/admin")
