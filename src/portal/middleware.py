# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from portal.auth.session import Session, new_session_id
from portal.context import ServiceContext

logger = logging.getLogger(__name__)


def cookie_settings(ctx: ServiceContext) -> dict:
    return {"httponly": True, "samesite": "lax", "secure": ctx.settings.cookie_secure}


class SessionMiddleware(BaseHTTPMiddleware):
    """Attach ``request.state.session`` and persist it after the handler runs.

    - Empty sessions are never written, so anonymous visitors get no cookie.
    - A session is only written when its data changed; each write restarts the TTL.
    - ``Session.destroy()`` removes the record and clears the cookie.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        ctx: ServiceContext = request.app.state.ctx
        cookie_name = ctx.settings.cookie_name

        token = request.cookies.get(cookie_name, "")
        sid = ctx.signer.unsign(token) if token else None
        if token and not sid:
            logger.warning("Ignoring session cookie with an invalid or expired signature")

        data = await run_in_threadpool(ctx.sessions.load, sid) if sid else None
        session = Session(sid=sid if data is not None else None, data=data)
        request.state.session = session
        before = dict(session)

        response = await call_next(request)

        if session.destroyed:
            if session.sid:
                await run_in_threadpool(ctx.sessions.destroy, session.sid)
            response.delete_cookie(cookie_name, **cookie_settings(ctx))
        elif dict(session) != before and (session or session.sid):
            if not session.sid:
                session.sid = new_session_id()
            await run_in_threadpool(ctx.sessions.save, session.sid, dict(session))
            response.set_cookie(
                cookie_name,
                ctx.signer.sign(session.sid),
                max_age=ctx.settings.session_ttl,
                **cookie_settings(ctx),
            )
        return response
